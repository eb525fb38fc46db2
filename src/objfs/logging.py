"""Logging setup for the objfs command-line tool.

Two handlers are attached to the root logger by the CLI:

- a Rich console handler on stderr, whose level follows ``-v``/``-q``;
- a "flight recorder": a ``MemoryHandler`` that keeps the most recent
  records at DEBUG granularity and writes them to a log file once a
  WARNING (or worse) is seen.

Library code never configures logging; it only calls
``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "objfs"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)


class ThirdPartyPrefixFilter(logging.Filter):
    """Tag records from other libraries with their top-level package name.

    ``sqlalchemy.engine.Engine`` records get ``record.prefix = "[sqlalchemy]"``;
    objfs records get an empty prefix. Nothing is filtered out.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            record.prefix = f"[{record.name.split('.')[0]}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr console handler.

    Args:
        level: Minimum level shown. Forced to DEBUG in debug mode.
        debug_mode: Show timestamps, logger names, and source locations.
        color: Allow ANSI colors (mirrors click-extra's ``--color/--no-color``).

    Returns:
        RichHandler: Handler ready to attach to the root logger.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(fmt=DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the in-memory flight recorder.

    Args:
        path: File the buffered records are written to (truncated on open).
        capacity: Number of records kept in memory.
        flush_level: Records at or above this level trigger a flush.
        flush_on_close: Also flush when the handler is closed at exit.

    Returns:
        MemoryHandler: Buffering handler targeting a ``FileHandler`` on *path*.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=target,
        flushOnClose=flush_on_close,
    )


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
    store_url: str | None = None,
) -> None:
    """Log a one-line INFO summary and DEBUG diagnostics at CLI startup.

    Args:
        logger: Logger to emit on.
        app_version: objfs version.
        level: Effective console level.
        handlers: Handlers attached to the root logger.
        log_path: Flight recorder file, or None.
        flight_recorder: Whether the flight recorder is on.
        flight_capacity: Flight recorder capacity, or None when off.
        force_flush_fr: Whether the recorder flushes on exit.
        logger_levels: Per-logger level overrides.
        store_url: Store URL with any password redacted, or None when unset.
    """
    logger.info(
        "objfs %s: console=%s, flight-recorder=%s, store=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
        store_url or "<unset>",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("SQLAlchemy: %s", sqlalchemy.__version__)
    logger.debug("Alembic: %s", alembic.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            log_path or "<none>",
            flight_capacity,
            force_flush_fr,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
        or "<none>",
    )
