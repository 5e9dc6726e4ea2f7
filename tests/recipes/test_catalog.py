"""Tests for the recipe catalog."""

from __future__ import annotations

import pytest

from nodemod.core.errors import ErrorCode, RecipeError
from nodemod.recipes import RECIPES, get_recipe


class TestCatalog:
    """Recipe lookup."""

    def test_catalog_lists_every_recipe(self) -> None:
        assert sorted(RECIPES) == ["crypto-fips", "types-is-native-error", "util-is", "util-log"]

    def test_given_known_name_when_looked_up_then_recipe(self) -> None:
        recipe = get_recipe("util-log")

        assert recipe.name == "util-log"
        assert recipe.modules == ("util",)
        assert recipe.description

    def test_given_unknown_name_when_looked_up_then_recipe_error(self) -> None:
        with pytest.raises(RecipeError) as exc_info:
            get_recipe("util-nope")

        assert exc_info.value.code == ErrorCode.RECIPE_NOT_FOUND
        assert exc_info.value.details["available"] == sorted(RECIPES)
