"""``crypto.fips`` to ``crypto.getFips()`` / ``crypto.setFips()``.

- ``crypto.fips`` reads become ``crypto.getFips()``
- ``crypto.fips = value`` becomes ``crypto.setFips(value)``
- a destructured ``fips`` (aliased or not) is replaced by ``getFips, setFips``
  and its uses are rewritten the same way
"""

from __future__ import annotations

from nodemod.core.logging import get_logger
from nodemod.engine.bindings import update_binding
from nodemod.engine.edits import EditScript
from nodemod.engine.types import Edit, ImportSite
from nodemod.engine.usage import find_usages
from nodemod.recipes.base import Recipe, bindings_for, finish, replace_use, splice, use_text
from nodemod.syntax.tree import Node, SourceFile, is_inside

log = get_logger(__name__)

BINDING_PATH = "$.fips"


def _assignment_of(node: Node) -> Node | None:
    parent = node.parent
    if parent is None or parent.type != "assignment_expression":
        return None
    left = parent.child_by_field_name("left")
    if left is None or left.start_byte != node.start_byte or left.end_byte != node.end_byte:
        return None
    return parent


def _rewrite_uses(
    source: SourceFile,
    site: ImportSite,
    expression: str,
    getter: str,
    setter: str,
    script: EditScript,
) -> int:
    uses = find_usages(source, expression, exclude=[site])
    assignments = [a for a in (_assignment_of(n) for n in uses) if a is not None]

    for assignment in assignments:
        value = assignment.child_by_field_name("right")
        if value is None:
            continue
        inner = [(n, use_text(n, getter)) for n in uses if is_inside(n, value)]
        script.add(Edit.replace(assignment, f"{setter}({splice(source, value, inner)})"))

    for node in uses:
        if not any(is_inside(node, a) for a in assignments):
            script.add(replace_use(node, getter))
    return len(uses)


def transform(source: SourceFile) -> str | None:
    script = EditScript()
    for site, resolved in bindings_for(source, "crypto", BINDING_PATH):
        if resolved.is_bare:
            count = _rewrite_uses(source, site, resolved.expression, "getFips()", "setFips", script)
            script.add_change(update_binding(site, resolved.expression, ["getFips", "setFips"]))
        else:
            base = resolved.base
            count = _rewrite_uses(
                source, site, resolved.expression, f"{base}.getFips()", f"{base}.setFips", script
            )
        log.debug("fips_rewritten", path=str(source.path), expression=resolved.expression, uses=count)
    return finish(source, script)


RECIPE = Recipe(
    name="crypto-fips",
    description="Replace the deprecated crypto.fips property with crypto.getFips() and crypto.setFips()",
    transform=transform,
    modules=("crypto",),
)
