"""Binding resolution and safe rewrite engine."""

from nodemod.engine.bindings import remove_binding, remove_bindings, remove_site_bindings, update_binding
from nodemod.engine.edits import EditScript, commit_edits, remove_lines
from nodemod.engine.locator import (
    get_import_calls,
    get_import_statements,
    get_module_dependencies,
    get_require_calls,
    locate,
)
from nodemod.engine.resolver import resolve_all, resolve_binding_path, resolve_expressions
from nodemod.engine.types import (
    BindingChange,
    BindingPath,
    Edit,
    ImportSite,
    LineRange,
    ResolvedBinding,
    Specifier,
    SpecifierKind,
)
from nodemod.engine.usage import (
    call_arguments,
    find_calls,
    find_parent_statement,
    find_usages,
    get_scope,
    is_binding_used,
    member_chain,
)

__all__ = [
    # Types
    "BindingChange",
    "BindingPath",
    "Edit",
    "ImportSite",
    "LineRange",
    "ResolvedBinding",
    "Specifier",
    "SpecifierKind",
    # Locator
    "get_import_calls",
    "get_import_statements",
    "get_module_dependencies",
    "get_require_calls",
    "locate",
    # Resolver
    "resolve_all",
    "resolve_binding_path",
    "resolve_expressions",
    # Bindings
    "remove_binding",
    "remove_bindings",
    "remove_site_bindings",
    "update_binding",
    # Edits
    "EditScript",
    "commit_edits",
    "remove_lines",
    # Usage
    "call_arguments",
    "find_calls",
    "find_parent_statement",
    "find_usages",
    "get_scope",
    "is_binding_used",
    "member_chain",
]
