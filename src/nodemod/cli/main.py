"""nodemod CLI - nodemod command."""

import click

from nodemod.cli.list import list_command
from nodemod.cli.run import run_command
from nodemod.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="nodemod")
@click.option("-v", "--verbose", is_flag=True, help="Log debug events to the console")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """nodemod - Node.js API migration codemods."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="WARNING", verbose=verbose)


cli.add_command(list_command, name="list")
cli.add_command(run_command, name="run")


if __name__ == "__main__":
    cli()
