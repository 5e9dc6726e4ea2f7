"""Recipe catalog."""

from nodemod.core.errors import RecipeError
from nodemod.recipes import crypto_fips, types_is_native_error, util_is, util_log
from nodemod.recipes.base import Recipe

RECIPES: dict[str, Recipe] = {
    recipe.name: recipe
    for recipe in (
        crypto_fips.RECIPE,
        types_is_native_error.RECIPE,
        util_is.RECIPE,
        util_log.RECIPE,
    )
}


def get_recipe(name: str) -> Recipe:
    """Look up a recipe by name.

    Raises:
        RecipeError: No recipe has this name.
    """
    try:
        return RECIPES[name]
    except KeyError:
        raise RecipeError.not_found(name, sorted(RECIPES)) from None


__all__ = ["RECIPES", "Recipe", "get_recipe"]
