"""Logging for deskpilot using loguru.

Nothing is configured at import time: library code only binds named loggers
with ``get_logger`` and the CLI calls ``setup_logger`` once per command.
Until then records go to loguru's default stderr sink.

Environment:
    DESKPILOT_LOG_FILE: Log file path (default: deskpilot.log, see ``default_log_path``)
    DESKPILOT_LOG_LEVEL: Minimum level (default: INFO)
    DESKPILOT_LOG_CONSOLE: "true" to also log to stderr
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from deskpilot.utils import get_project_root

LOG_FILE_NAME = "deskpilot.log"

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)


@dataclass
class LogSettings:
    """Where and how much deskpilot logs."""

    log_file: str
    level: str = "INFO"
    console_output: bool = False
    rotation: str = "10 MB"
    retention: str = "7 days"
    compression: str = "zip"

    @classmethod
    def from_env(cls) -> "LogSettings":
        return cls(
            log_file=os.getenv("DESKPILOT_LOG_FILE") or default_log_path(),
            level=os.getenv("DESKPILOT_LOG_LEVEL", "INFO").upper(),
            console_output=os.getenv("DESKPILOT_LOG_CONSOLE", "false").lower() == "true",
        )


def default_log_path() -> str:
    """``deskpilot.log`` in a source checkout's root, else in the working directory.

    An installed package has no pyproject.toml above it, so its "project root"
    would be inside site-packages.
    """
    root = get_project_root()
    if os.path.isfile(os.path.join(root, "pyproject.toml")):
        return os.path.join(root, LOG_FILE_NAME)
    return os.path.join(os.getcwd(), LOG_FILE_NAME)


def setup_logger(settings: Optional[LogSettings] = None, log_level: Optional[str] = None) -> LogSettings:
    """
    Replace loguru's sinks with deskpilot's file sink (and optional stderr sink).

    Args:
        settings: Sink configuration; read from the environment when None
        log_level: Overrides ``settings.level`` (the CLI's --debug flag)

    Returns:
        The settings that were applied
    """
    settings = settings or LogSettings.from_env()
    if log_level:
        settings.level = log_level

    logger.remove()
    logger.configure(extra={"name": "deskpilot"})

    if settings.console_output:
        logger.add(sys.stderr, level=settings.level, format=CONSOLE_FORMAT, colorize=True)

    logger.add(
        settings.log_file,
        level=settings.level,
        format=FILE_FORMAT,
        rotation=settings.rotation,
        retention=settings.retention,
        compression=settings.compression,
        encoding="utf-8",
    )
    return settings


def get_logger(name: Optional[str] = None):
    """Logger bound to ``name`` (shown in the ``extra[name]`` column)."""
    return logger.bind(name=name or "deskpilot")
