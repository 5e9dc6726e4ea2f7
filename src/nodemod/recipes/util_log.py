"""``util.log(...)`` to ``console.log(new Date().toLocaleString(), ...)``."""

from __future__ import annotations

from nodemod.engine.edits import EditScript
from nodemod.engine.types import Edit, ImportSite
from nodemod.engine.usage import call_arguments, find_calls
from nodemod.recipes.base import Recipe, bindings_for, finish, prune
from nodemod.syntax.tree import Node, SourceFile, node_text

BINDING_PATH = "$.log"
TIMESTAMP = "new Date().toLocaleString()"


def console_log(call: Node) -> str:
    args = [node_text(arg) for arg in call_arguments(call)]
    return f"console.log({', '.join([TIMESTAMP, *args])})"


def transform(source: SourceFile) -> str | None:
    script = EditScript()
    roots: dict[ImportSite, list[str]] = {}
    rewritten: dict[ImportSite, list[Node]] = {}

    for site, resolved in bindings_for(source, "util", BINDING_PATH):
        calls = find_calls(source, resolved.expression, exclude=[site])
        for call in calls:
            script.add(Edit.replace(call, console_log(call)))
        roots.setdefault(site, []).append(resolved.root)
        rewritten.setdefault(site, []).extend(c.child_by_field_name("function") for c in calls)

    prune(source, script, roots, rewritten)
    return finish(source, script)


RECIPE = Recipe(
    name="util-log",
    description="Replace the deprecated util.log() with console.log() and a timestamp",
    transform=transform,
    modules=("util",),
)
