"""Config module exports."""

from nodemod.config.loader import load_config
from nodemod.config.models import (
    LoggingConfig,
    LogOutputConfig,
    NodemodConfig,
    RunnerConfig,
)

__all__ = [
    "load_config",
    "LoggingConfig",
    "LogOutputConfig",
    "NodemodConfig",
    "RunnerConfig",
]
