"""Core module exports."""

from nodemod.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    NodemodError,
    ParseError,
    RecipeError,
)
from nodemod.core.logging import (
    configure_logging,
    end_run,
    get_logger,
    get_run_id,
    start_run,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "NodemodError",
    "ParseError",
    "RecipeError",
    # Logging
    "configure_logging",
    "end_run",
    "get_logger",
    "get_run_id",
    "start_run",
]
