"""``util.types.isNativeError`` to ``Error.isError``."""

from __future__ import annotations

from nodemod.engine.edits import EditScript
from nodemod.engine.types import ImportSite
from nodemod.engine.usage import find_usages
from nodemod.recipes.base import Recipe, bindings_for, finish, prune, replace_use
from nodemod.syntax.tree import Node, SourceFile

BINDING_PATH = "$.types.isNativeError"
REPLACEMENT = "Error.isError"


def transform(source: SourceFile) -> str | None:
    script = EditScript()
    roots: dict[ImportSite, list[str]] = {}
    rewritten: dict[ImportSite, list[Node]] = {}

    for site, resolved in bindings_for(source, "util", BINDING_PATH):
        uses = find_usages(source, resolved.expression, exclude=[site])
        for node in uses:
            script.add(replace_use(node, REPLACEMENT))
        roots.setdefault(site, []).append(resolved.root)
        rewritten.setdefault(site, []).extend(uses)

    prune(source, script, roots, rewritten)
    return finish(source, script)


RECIPE = Recipe(
    name="types-is-native-error",
    description="Replace util.types.isNativeError with Error.isError",
    transform=transform,
    modules=("util",),
)
