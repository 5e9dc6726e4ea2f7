"""nodemod CLI package."""

from nodemod.cli.main import cli

__all__ = ["cli"]
