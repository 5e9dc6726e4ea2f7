"""Structured logging for recipe runs.

Every record emitted while a run is active carries the run's ``run_id`` and
``recipe`` name, bound through structlog's context variables, so the events
of one ``nodemod run`` can be picked out of a shared log file. Console and
file outputs have separate levels; ``verbose`` lowers the console ones to
DEBUG without touching files.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from nodemod.config.models import LoggingConfig

_CONSOLE_DESTINATIONS = ("stderr", "stdout")
_RUN_KEYS = ("run_id", "recipe")


def start_run(recipe: str, run_id: str | None = None) -> str:
    """Bind a run id (generated when not given) and the recipe name to later records."""
    rid = run_id or uuid4().hex[:8]
    structlog.contextvars.bind_contextvars(run_id=rid, recipe=recipe)
    return rid


def end_run() -> None:
    structlog.contextvars.unbind_contextvars(*_RUN_KEYS)


def get_run_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("run_id")


def _level(name: str | None, default: int) -> int:
    if name is None:
        return default
    return logging.getLevelNamesMapping().get(name.upper(), default)


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
    verbose: bool = False,
) -> None:
    """Configure structlog. Pass config for multi-output, or use simple params.

    Args:
        config: Logging configuration with outputs
        json_format: Use JSON format for simple setup
        level: Default log level
        verbose: Log DEBUG records to the console outputs whatever their level
    """
    from nodemod.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    default_level = _level(config.level, logging.INFO)
    floor = logging.DEBUG if verbose else _lowest_output_level(config, default_level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(floor),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Don't cache - allows reconfiguration and respects level changes
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(floor)

    for output in config.outputs:
        is_console = output.destination in _CONSOLE_DESTINATIONS
        if verbose and is_console:
            output_level = logging.DEBUG
        else:
            output_level = _level(output.level, default_level)

        handler = _create_handler(output.destination)
        handler.setLevel(output_level)
        handler.setFormatter(_formatter(output.format, is_console, shared_processors))
        root_logger.addHandler(handler)


def _lowest_output_level(config: LoggingConfig, default_level: int) -> int:
    levels = [_level(output.level, default_level) for output in config.outputs]
    return min(levels, default=default_level)


def _formatter(
    fmt: str,
    is_console: bool,
    shared_processors: list[structlog.types.Processor],
) -> structlog.stdlib.ProcessorFormatter:
    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=is_console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)


def _create_handler(destination: str) -> logging.Handler:
    """Create handler for stderr, stdout, or file path."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
