"""Tests for the types-is-native-error recipe."""

from __future__ import annotations

from nodemod.recipes.types_is_native_error import RECIPE


class TestRewrite:
    """util.types.isNativeError in its binding forms."""

    def test_given_namespace_require_when_transformed_then_import_removed(self, run_recipe) -> None:
        # Given
        code = (
            "const util = require('node:util');\n"
            "\n"
            "if (util.types.isNativeError(err)) {\n"
            "  throw err;\n"
            "}\n"
        )

        # When
        result = run_recipe(RECIPE, code, "input.js")

        # Then
        assert result == "\nif (Error.isError(err)) {\n  throw err;\n}\n"

    def test_given_types_destructured_when_transformed_then_sibling_kept(self, run_recipe) -> None:
        code = (
            "const { types, inspect } = require('util');\n"
            "\n"
            "console.log(types.isNativeError(e), inspect(e));\n"
        )

        result = run_recipe(RECIPE, code, "input.js")

        assert result == (
            "const { inspect } = require('util');\n"
            "\n"
            "console.log(Error.isError(e), inspect(e));\n"
        )

    def test_given_nested_destructuring_when_transformed_then_statement_removed(self, run_recipe) -> None:
        code = "const { types: { isNativeError } } = require('util');\nisNativeError(e);\n"

        result = run_recipe(RECIPE, code, "input.js")

        assert result == "Error.isError(e);\n"

    def test_given_named_import_when_transformed_then_import_removed(self, run_recipe) -> None:
        code = "import { types } from 'node:util';\n\nexport const check = (e) => types.isNativeError(e);\n"

        result = run_recipe(RECIPE, code)

        assert result == "\nexport const check = (e) => Error.isError(e);\n"

    def test_given_function_passed_around_when_transformed_then_reference_replaced(self, run_recipe) -> None:
        code = "import util from 'util';\nconst errors = values.filter(util.types.isNativeError);\n"

        result = run_recipe(RECIPE, code)

        assert result == "const errors = values.filter(Error.isError);\n"


class TestBindingKept:
    """The import survives while something else still needs it."""

    def test_given_other_types_member_when_transformed_then_binding_kept(self, run_recipe) -> None:
        code = "const { types } = require('util');\ntypes.isNativeError(a);\ntypes.isPromise(b);\n"

        result = run_recipe(RECIPE, code, "input.js")

        assert result == "const { types } = require('util');\nError.isError(a);\ntypes.isPromise(b);\n"

    def test_given_import_without_use_when_transformed_then_none(self, run_recipe) -> None:
        """An unused import is not this recipe's business."""
        assert run_recipe(RECIPE, "const { types } = require('util');\n", "input.js") is None


class TestNoChange:
    """Files the recipe leaves alone."""

    def test_given_no_util_import_when_transformed_then_none(self, run_recipe) -> None:
        assert run_recipe(RECIPE, "isNativeError(e);\ntypes.isNativeError(e);\n", "input.js") is None

    def test_given_migrated_output_when_transformed_again_then_none(self, run_twice) -> None:
        code = "const util = require('util');\nutil.types.isNativeError(e);\nutil.inspect(e);\n"

        first, second = run_twice(RECIPE, code, "input.js")

        assert first == "const util = require('util');\nError.isError(e);\nutil.inspect(e);\n"
        assert second is None
