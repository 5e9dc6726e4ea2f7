"""Shared helpers for recipe tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from nodemod.recipes.base import Recipe
from nodemod.syntax.tree import parse_source


@pytest.fixture
def run_recipe() -> Callable[..., str | None]:
    """Apply a recipe to source text."""

    def _run(recipe: Recipe, code: str, filename: str = "input.mjs") -> str | None:
        return recipe(parse_source(code, filename))

    return _run


@pytest.fixture
def run_twice(run_recipe) -> Callable[..., tuple[str | None, str | None]]:
    """Apply a recipe, then apply it again to its own output."""

    def _run(recipe: Recipe, code: str, filename: str = "input.mjs") -> tuple[str | None, str | None]:
        first = run_recipe(recipe, code, filename)
        assert first is not None
        return first, run_recipe(recipe, first, filename)

    return _run
