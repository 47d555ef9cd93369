"""Logging configuration for ucloudctl.

Structured logging via loguru. The library logger is disabled by default and
enabled by the CLI (or any embedding program) through ``setup_logging``.

Example:
    from ucloudctl.logging import LogConfig, setup_logging, teardown_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG", file="ucloudctl.log"))
    ...
    teardown_logging(handler_ids)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Literal, TypeAlias

from loguru import logger

# Disable by default (library behavior)
logger.disable("ucloudctl")

LogLevel: TypeAlias = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Sinks enabled by the CLI: stderr at ``level`` and an optional DEBUG log file."""

    level: LogLevel = "WARNING"
    file: str | None = None
    console: bool = True
    rotation: str = "10 MB"
    retention: int = 5


def setup_logging(config: LogConfig) -> list[int]:
    """Enable ucloudctl logging and return handler IDs for cleanup."""
    logger.enable("ucloudctl")
    logger.configure(extra={"component": "ucloudctl"})
    handler_ids: list[int] = []

    if config.console:
        hid = logger.add(
            sys.stderr,
            level=config.level,
            format=CONSOLE_FORMAT,
            colorize=True,
            filter="ucloudctl",
        )
        handler_ids.append(hid)

    if config.file:
        hid = logger.add(
            config.file,
            level="DEBUG",
            format=FILE_FORMAT,
            rotation=config.rotation,
            retention=config.retention,
            diagnose=False,  # no local variables in tracebacks
            filter="ucloudctl",
        )
        handler_ids.append(hid)

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove handlers and disable logging again."""
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("ucloudctl")


def verbosity_level(*, verbose: bool, debug: bool) -> LogLevel:
    """Map the CLI verbosity flags to a console log level."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return "WARNING"
