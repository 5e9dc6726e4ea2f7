"""Tests for removing and updating bindings."""

from __future__ import annotations

import pytest

from nodemod.engine.bindings import remove_binding, remove_bindings, remove_site_bindings, update_binding
from nodemod.engine.edits import EditScript
from nodemod.engine.types import BindingChange
from nodemod.syntax.tree import SourceFile


def _apply(source: SourceFile, *changes: BindingChange) -> str:
    script = EditScript()
    for change in changes:
        script.add_change(change)
    return script.apply(source)


class TestRemoveBinding:
    """remove_binding()."""

    def test_given_sole_specifier_when_removed_then_line_to_remove_only(self, sites_of) -> None:
        # Given
        source, sites = sites_of("const { fips } = require('crypto');\nfoo();\n", "crypto")

        # When
        change = remove_binding(sites[0], "fips")

        # Then
        assert change.edit is None
        assert change.line_to_remove is not None
        assert change.line_to_remove.start_row == 0
        assert _apply(source, change) == "foo();\n"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("fips", "const { randomBytes: rb, createHash } = require('crypto');\n"),
            ("rb", "const { fips, createHash } = require('crypto');\n"),
            ("randomBytes", "const { fips, createHash } = require('crypto');\n"),
            ("createHash", "const { fips, randomBytes: rb } = require('crypto');\n"),
        ],
    )
    def test_given_several_specifiers_when_one_removed_then_others_untouched(
        self, sites_of, name: str, expected: str
    ) -> None:
        source, sites = sites_of("const { fips, randomBytes: rb, createHash } = require('crypto');\n", "crypto")

        change = remove_binding(sites[0], name)

        assert change.line_to_remove is None
        assert _apply(source, change) == expected

    def test_given_named_import_alias_when_removed_then_comma_removed(self, sites_of) -> None:
        source, sites = sites_of("import { a, b as c } from 'm';\n", "m")

        assert _apply(source, remove_binding(sites[0], "c")) == "import { a } from 'm';\n"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("a", "import d from 'm';\n"),
            ("d", "import { a } from 'm';\n"),
        ],
    )
    def test_given_default_and_named_when_one_part_emptied_then_part_removed(
        self, sites_of, name: str, expected: str
    ) -> None:
        source, sites = sites_of("import d, { a } from 'm';\n", "m")

        assert _apply(source, remove_binding(sites[0], name)) == expected

    def test_given_nested_pattern_when_emptied_then_pair_removed(self, sites_of) -> None:
        source, sites = sites_of("const { types: { isNativeError }, inspect } = require('util');\n", "util")

        result = _apply(source, remove_binding(sites[0], "isNativeError"))

        assert result == "const { inspect } = require('util');\n"

    def test_given_namespace_when_removed_then_statement_removed(self, sites_of) -> None:
        source, sites = sites_of("const util = require('util');\nconst x = 1;\n", "util")

        change = remove_binding(sites[0], "util")

        assert change.line_to_remove is not None
        assert _apply(source, change) == "const x = 1;\n"

    def test_given_several_declarators_when_removed_then_only_declarator(self, sites_of) -> None:
        source, sites = sites_of("const a = require('m'), b = require('x');\n", "m")

        change = remove_binding(sites[0], "a")

        assert change.edit is not None
        assert _apply(source, change) == "const b = require('x');\n"

    def test_given_promise_callback_when_emptied_then_parameter_removed(self, sites_of) -> None:
        source, sites = sites_of("import('m').then(({ a }) => a);\n", "m")

        change = remove_binding(sites[0], "a")

        assert change.line_to_remove is None
        assert _apply(source, change) == "import('m').then(() => a);\n"

    def test_given_unknown_name_when_removed_then_empty_change(self, sites_of) -> None:
        _, sites = sites_of("const { fips } = require('crypto');\n", "crypto")

        change = remove_binding(sites[0], "getFips")

        assert not change
        assert change == BindingChange()

    def test_given_removed_binding_when_removed_again_then_no_op(self, sites_of) -> None:
        source, sites = sites_of("const { fips, getFips } = require('crypto');\n", "crypto")
        once = _apply(source, remove_binding(sites[0], "fips"))

        again, again_sites = sites_of(once, "crypto")

        assert not remove_binding(again_sites[0], "fips")
        assert once == "const { getFips } = require('crypto');\n"


class TestRemoveBindings:
    """remove_bindings() with several names from one list."""

    @pytest.mark.parametrize(
        ("names", "expected"),
        [
            (["isArray", "isBoolean"], "const { promisify } = require('util');\n"),
            (["isBoolean", "promisify"], "const { isArray } = require('util');\n"),
            (["isArray", "promisify"], "const { isBoolean } = require('util');\n"),
        ],
    )
    def test_given_adjacent_entries_when_removed_then_no_overlap(self, sites_of, names: list[str], expected: str) -> None:
        source, sites = sites_of("const { isArray, isBoolean, promisify } = require('util');\n", "util")

        changes = remove_bindings(sites[0], names)

        assert _apply(source, *changes) == expected

    def test_given_every_entry_when_removed_then_statement_removed(self, sites_of) -> None:
        source, sites = sites_of("const { isArray, isBoolean } = require('util');\nrun();\n", "util")

        changes = remove_bindings(sites[0], ["isArray", "isBoolean"])

        assert len(changes) == 1
        assert changes[0].line_to_remove is not None
        assert _apply(source, *changes) == "run();\n"

    def test_given_named_list_emptied_when_removed_then_default_kept(self, sites_of) -> None:
        source, sites = sites_of("import d, { a, b } from 'm';\n", "m")

        changes = remove_bindings(sites[0], ["a", "b"])

        assert _apply(source, *changes) == "import d from 'm';\n"

    def test_given_unknown_names_when_removed_then_nothing(self, sites_of) -> None:
        _, sites = sites_of("const { a } = require('m');\n", "m")

        assert remove_bindings(sites[0], ["x", "y"]) == []


class TestRemoveSiteBindings:
    """remove_site_bindings() across sites sharing a declaration."""

    def test_given_every_declarator_emptied_when_removed_then_one_statement_removal(self, sites_of) -> None:
        # Given
        source, sites = sites_of("const a = require('m'), b = require('m');\nrun();\n", "m")

        # When
        changes = remove_site_bindings({sites[0]: ["a"], sites[1]: ["b"]})

        # Then
        assert len(changes) == 1
        assert changes[0].line_to_remove is not None
        assert _apply(source, *changes) == "run();\n"

    def test_given_adjacent_declarators_when_removed_then_single_run_deleted(self, sites_of) -> None:
        source, sites = sites_of("let x = 0, a = require('m'), b = require('m');\n", "m")

        changes = remove_site_bindings({sites[0]: ["a"], sites[1]: ["b"]})

        assert _apply(source, *changes) == "let x = 0;\n"

    def test_given_name_not_bound_when_removed_then_site_untouched(self, sites_of) -> None:
        source, sites = sites_of("const { a } = require('m'), b = require('m');\n", "m")

        changes = remove_site_bindings({sites[0]: ["z"], sites[1]: ["b"]})

        assert _apply(source, *changes) == "const { a } = require('m');\n"

class TestUpdateBinding:
    """update_binding()."""

    def test_given_named_import_when_expanded_then_both_names(self, sites_of) -> None:
        source, sites = sites_of("import { fips } from 'node:crypto';\n", "crypto")

        change = update_binding(sites[0], "fips", ["getFips", "setFips"])

        assert _apply(source, change) == "import { getFips, setFips } from 'node:crypto';\n"

    def test_given_aliased_destructure_when_renamed_then_alias_kept(self, sites_of) -> None:
        source, sites = sites_of("const { fips: x } = require('crypto');\n", "crypto")

        change = update_binding(sites[0], "fips", "getFips")

        assert _apply(source, change) == "const { getFips: x } = require('crypto');\n"

    def test_given_aliased_import_when_renamed_then_alias_kept(self, sites_of) -> None:
        source, sites = sites_of("import { a as b } from 'm';\n", "m")

        assert _apply(source, update_binding(sites[0], "a", "c")) == "import { c as b } from 'm';\n"

    def test_given_name_already_present_when_expanded_then_not_duplicated(self, sites_of) -> None:
        source, sites = sites_of("import { fips, getFips } from 'crypto';\n", "crypto")

        change = update_binding(sites[0], "fips", ["getFips", "setFips"])

        assert _apply(source, change) == "import { setFips, getFips } from 'crypto';\n"

    def test_given_all_names_present_when_expanded_then_removal(self, sites_of) -> None:
        source, sites = sites_of("import { fips, getFips, setFips } from 'crypto';\n", "crypto")

        change = update_binding(sites[0], "fips", ["getFips", "setFips"])

        assert _apply(source, change) == "import { getFips, setFips } from 'crypto';\n"

    def test_given_none_when_updated_then_removed(self, sites_of) -> None:
        source, sites = sites_of("const { a, b } = require('m');\n", "m")

        assert _apply(source, update_binding(sites[0], "a", None)) == "const { b } = require('m');\n"

    def test_given_namespace_when_renamed_then_local_renamed(self, sites_of) -> None:
        source, sites = sites_of("const crypto = require('crypto');\n", "crypto")

        assert _apply(source, update_binding(sites[0], "crypto", "c")) == "const c = require('crypto');\n"

    def test_given_namespace_when_expanded_then_destructured(self, sites_of) -> None:
        source, sites = sites_of("const util = require('util');\n", "util")

        change = update_binding(sites[0], "util", ["log", "inspect"])

        assert _apply(source, change) == "const { log, inspect } = require('util');\n"

    def test_given_default_import_when_expanded_then_named_imports(self, sites_of) -> None:
        source, sites = sites_of("import util from 'util';\n", "util")

        change = update_binding(sites[0], "util", ["a", "b"])

        assert _apply(source, change) == "import { a, b } from 'util';\n"

    def test_given_member_require_when_expanded_then_destructured_require(self, sites_of) -> None:
        source, sites = sites_of("const fips = require('crypto').fips;\n", "crypto")

        change = update_binding(sites[0], "fips", ["getFips", "setFips"])

        assert _apply(source, change) == "const { getFips, setFips } = require('crypto');\n"

    def test_given_unknown_name_when_updated_then_empty_change(self, sites_of) -> None:
        _, sites = sites_of("import { a } from 'm';\n", "m")

        assert not update_binding(sites[0], "zzz", "b")
