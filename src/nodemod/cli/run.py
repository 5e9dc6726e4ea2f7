"""nodemod run command - apply a recipe to files."""

import json
from pathlib import Path

import click

from nodemod.config import load_config
from nodemod.core.errors import NodemodError
from nodemod.core.logging import configure_logging
from nodemod.core.progress import pluralize, print_diff, status
from nodemod.recipes import get_recipe
from nodemod.runner import RecipeRunner


@click.command()
@click.argument("recipe_name", metavar="RECIPE")
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Report changes without writing files")
@click.option("--diff", "show_diff", is_flag=True, help="Print a unified diff of each change (implies --dry-run)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def run_command(
    ctx: click.Context,
    recipe_name: str,
    paths: tuple[Path, ...],
    dry_run: bool,
    show_diff: bool,
    as_json: bool,
) -> None:
    """Apply RECIPE to PATHS (default: current directory)."""
    targets = list(paths) or [Path(".")]
    try:
        recipe = get_recipe(recipe_name)
        config = load_config(Path.cwd())
        configure_logging(config=config.logging, verbose=(ctx.obj or {}).get("verbose", False))
        result = RecipeRunner(config.runner).run(recipe, targets, dry_run=dry_run or show_diff)
    except NodemodError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        verb = "Would rewrite" if result.dry_run else "Rewrote"
        for change in result.changes:
            status(f"{change.path} (+{change.insertions} -{change.deletions})", style="success")
            if show_diff and change.unified_diff:
                print_diff(change.unified_diff)
        for failure in result.failures:
            status(f"{failure.path}: {failure.message}", style="error")
        status(
            f"{verb} {pluralize(result.files_changed, 'file')} of {result.files_scanned} scanned"
            + (f", {result.files_skipped} skipped" if result.files_skipped else ""),
            style="none",
        )

    if result.failures:
        raise SystemExit(1)
