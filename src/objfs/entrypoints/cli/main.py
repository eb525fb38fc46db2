"""objfs CLI entry point.

Defines the top-level ``objfs`` command (via Click-Extra), configures
logging for the whole invocation, and registers the subcommands.

Available commands
- ``objfs ls|dump|mkdir|put|cat|rm|purge|info``: namespace operations.
- ``objfs db``: schema management for SQL-backed stores.

Examples
    $ export OBJFS_STORE_URL=file:///tmp/objfs
    $ objfs mkdir /photos/2024
    $ objfs put ./beach.jpg /photos/2024/beach.jpg
    $ objfs dump
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from objfs import __version__
from objfs.logging import config_console_handler, config_flight_recorder, log_startup

from .db import db as db_group
from .fs import COMMANDS as FS_COMMANDS
from .helpers import sanitize_url
from .helpers.log_level_parser import parse_log_level
from .state import CliState

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """objfs command-line interface.

    objfs stores a directory tree (directories, files, and file content) in a
    flat key/value object store. Node records are keyed by absolute path and
    file content is split into randomly numbered blocks.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--store-url",
    "store_url",
    envvar="OBJFS_STORE_URL",
    show_envvar=True,
    default=None,
    help=(
        "Object store to operate on: memory://, file:///ABS/DIR, or a SQLAlchemy "
        "database URL (e.g. sqlite+pysqlite:///objfs.db)."
    ),
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("objfs", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="OBJFS_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="OBJFS_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    envvar="OBJFS_FLIGHT_RECORDER",
    help=(
        "Keep the last N log records (OBJFS_FLIGHT_RECORDER_CAPACITY) at DEBUG "
        "granularity, unaffected by -v/-q, and write them to --log-path when a "
        "WARNING/ERROR occurs, or on exit if --force-flush is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    envvar="OBJFS_FORCE_FLUSH_FLIGHT_RECORDER",
    help="Always write the flight recorder buffer to --log-path on exit.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    envvar="OBJFS_LOGGER_LEVELS",
    help=(
        "Set the minimum LEVEL of logger NAME (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L objfs.service_layer=DEBUG)."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def objfs(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    store_url: str | None,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """objfs command-line interface."""

    ctx.obj = CliState(store_url=store_url)

    # 0) compute effective verbosity
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    # 1) console handler (+ flight recorder)
    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # 2) root logger captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # 3) per-logger overrides
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
        store_url=sanitize_url(store_url) if store_url else None,
    )

    ctx.call_on_close(logging.shutdown)


for _command in FS_COMMANDS:
    objfs.add_command(_command)
objfs.add_command(db_group)
