"""nodemod list command - show the recipe catalog."""

import json

import click

from nodemod.core.progress import get_console, make_recipe_table
from nodemod.recipes import RECIPES


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_command(as_json: bool) -> None:
    """List available recipes."""
    recipes = sorted(RECIPES.values(), key=lambda r: r.name)
    if as_json:
        click.echo(
            json.dumps(
                [{"name": r.name, "modules": list(r.modules), "description": r.description} for r in recipes],
                indent=2,
            )
        )
        return

    rows = [(r.name, ", ".join(r.modules), r.description) for r in recipes]
    get_console().print(make_recipe_table(rows))
