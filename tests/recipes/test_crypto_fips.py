"""Tests for the crypto-fips recipe."""

from __future__ import annotations

import pytest

from nodemod.recipes.crypto_fips import RECIPE


class TestNamespaceAccess:
    """crypto.fips through a namespace or default binding."""

    def test_given_read_and_assignment_when_transformed_then_getter_and_setter(self, run_recipe) -> None:
        # Given
        code = (
            "const crypto = require('node:crypto');\n"
            "\n"
            "console.log(crypto.fips);\n"
            "crypto.fips = true;\n"
        )

        # When
        result = run_recipe(RECIPE, code, "input.js")

        # Then
        assert result == (
            "const crypto = require('node:crypto');\n"
            "\n"
            "console.log(crypto.getFips());\n"
            "crypto.setFips(true);\n"
        )

    def test_given_assignment_reading_fips_when_transformed_then_value_rewritten(self, run_recipe) -> None:
        code = "import crypto from 'node:crypto';\ncrypto.fips = !crypto.fips;\n"

        result = run_recipe(RECIPE, code)

        assert result == "import crypto from 'node:crypto';\ncrypto.setFips(!crypto.getFips());\n"

    def test_given_promise_namespace_when_transformed_then_parameter_used(self, run_recipe) -> None:
        code = "import('node:crypto').then(c => console.log(c.fips));\n"

        result = run_recipe(RECIPE, code)

        assert result == "import('node:crypto').then(c => console.log(c.getFips()));\n"

    def test_given_namespace_when_transformed_then_import_untouched(self, run_recipe) -> None:
        code = "import * as crypto from 'crypto';\nif (crypto.fips) {}\n"

        result = run_recipe(RECIPE, code)

        assert result is not None
        assert result.startswith("import * as crypto from 'crypto';\n")


class TestDestructuredBinding:
    """A fips binding of its own."""

    def test_given_shorthand_when_transformed_then_both_functions_imported(self, run_recipe) -> None:
        code = "const { fips } = require('crypto');\nconsole.log(fips);\n"

        result = run_recipe(RECIPE, code, "input.cjs")

        assert result == "const { getFips, setFips } = require('crypto');\nconsole.log(getFips());\n"

    def test_given_alias_when_transformed_then_alias_uses_rewritten(self, run_recipe) -> None:
        code = "const { fips: isFips } = require('crypto');\nif (isFips) {}\n"

        result = run_recipe(RECIPE, code, "input.js")

        assert result == "const { getFips, setFips } = require('crypto');\nif (getFips()) {}\n"

    def test_given_named_import_when_transformed_then_named_imports_expanded(self, run_recipe) -> None:
        code = "import { fips, randomBytes } from 'node:crypto';\nconst on = fips;\n"

        result = run_recipe(RECIPE, code)

        assert result == "import { getFips, setFips, randomBytes } from 'node:crypto';\nconst on = getFips();\n"


    def test_given_shorthand_property_when_transformed_then_expanded_to_getter(self, run_recipe) -> None:
        # Given
        code = "const { fips } = require('crypto');\nconst o = { fips };\n"

        # When
        result = run_recipe(RECIPE, code, "input.js")

        # Then
        assert result == "const { getFips, setFips } = require('crypto');\nconst o = { fips: getFips() };\n"

class TestNoChange:
    """Files the recipe leaves alone."""

    @pytest.mark.parametrize(
        "code",
        [
            "console.log(crypto.fips);\n",
            "const crypto = require('crypto-js');\ncrypto.fips;\n",
            "const { randomBytes } = require('crypto');\nrandomBytes(4);\n",
            "",
        ],
    )
    def test_given_nothing_to_migrate_when_transformed_then_none(self, run_recipe, code: str) -> None:
        assert run_recipe(RECIPE, code, "input.js") is None

    def test_given_migrated_output_when_transformed_again_then_none(self, run_twice) -> None:
        code = "const { fips } = require('crypto');\nfips;\n"

        first, second = run_twice(RECIPE, code, "input.js")

        assert first == "const { getFips, setFips } = require('crypto');\ngetFips();\n"
        assert second is None
