"""Binding path resolution.

Turns a capability path such as ``$.types.isNativeError`` into the
expression that reaches it in one file, given how the module was bound:

==========================================  ==========================
binding                                     ``$.types.isNativeError``
==========================================  ==========================
``const util = require("util")``            ``util.types.isNativeError``
``import * as u from "node:util"``          ``u.types.isNativeError``
``const { types } = require("util")``       ``types.isNativeError``
``import { types as t } from "util"``       ``t.isNativeError``
``const { types: { isNativeError } } = …``  ``isNativeError``
``const { inspect } = require("util")``     ``None``
==========================================  ==========================

Resolution is purely syntactic. Property existence on the real module is
never checked and locals shadowing an imported name are not detected.
"""

from __future__ import annotations

from nodemod.engine.types import BindingPath, ImportSite, ResolvedBinding, Specifier


def _as_path(path: BindingPath | str) -> BindingPath:
    return path if isinstance(path, BindingPath) else BindingPath.parse(path)


def _resolve_specifier(site: ImportSite, spec: Specifier, path: BindingPath) -> ResolvedBinding | None:
    if spec.kind.binds_module:
        return ResolvedBinding(
            expression=".".join((spec.local, *path.segments)),
            depth=1,
            site=site,
            specifier=spec,
        )
    imported = spec.imported_segments
    if not imported or path.segments[: len(imported)] != imported:
        return None
    rest = path.segments[len(imported) :]
    return ResolvedBinding(
        expression=".".join((spec.local, *rest)),
        depth=1 + len(imported),
        site=site,
        specifier=spec,
    )


def resolve_all(site: ImportSite, path: BindingPath | str) -> list[ResolvedBinding]:
    """Every expression through which ``site`` exposes ``path``.

    Destructured/named matches come first (longest imported prefix first),
    followed by namespace/default roots, each in source order.
    """
    binding_path = _as_path(path)
    resolved = [
        match
        for spec in site.specifiers
        if (match := _resolve_specifier(site, spec, binding_path)) is not None
    ]
    # stable: source order is kept among equal depths, roots (depth 1) last
    return sorted(resolved, key=lambda r: -r.depth)


def resolve_binding_path(site: ImportSite, path: BindingPath | str) -> ResolvedBinding | None:
    """The preferred expression for ``path`` in this site, or None if not imported here."""
    resolved = resolve_all(site, path)
    return resolved[0] if resolved else None


def resolve_expressions(sites: list[ImportSite], path: BindingPath | str) -> list[ResolvedBinding]:
    """Resolve ``path`` against several sites, dropping duplicate expressions."""
    binding_path = _as_path(path)
    seen: set[str] = set()
    result: list[ResolvedBinding] = []
    for site in sites:
        for resolved in resolve_all(site, binding_path):
            if resolved.expression in seen:
                continue
            seen.add(resolved.expression)
            result.append(resolved)
    return result
