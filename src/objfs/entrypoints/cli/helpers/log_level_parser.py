"""Parser for the ``-L/--logger-level NAME=LEVEL`` CLI option.

Values may be repeated (``-L a=INFO -L b=DEBUG``) or packed into one
comma/space separated string (``OBJFS_LOGGER_LEVELS="a=INFO, b=DEBUG"``).
"""

import logging
import re

import click

#: Levels applied to chatty dependencies unless overridden on the command line.
DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "alembic": logging.WARNING}

_SEPARATORS = re.compile(r"[,\s]+")


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten one or more raw option values into ``NAME=LEVEL`` items.

    Args:
        value: A single string or the tuple Click passes for repeatable options.

    Returns:
        list[str]: Non-empty items, in the order given.
    """
    raw = [value] if isinstance(value, str) else list(value)
    return [item for chunk in raw for item in _SEPARATORS.split(chunk) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback turning ``NAME=LEVEL`` items into a level mapping.

    Starts from `DEFAULT_LIB_LEVELS`; later items override earlier ones.

    Returns:
        dict[str, int]: Logger name to numeric level.

    Raises:
        click.BadParameter: If an item is not ``NAME=LEVEL`` or LEVEL is not a
            standard logging level name.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_name = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelNamesMapping().get(level_name.strip().upper())
        if level is None:
            raise click.BadParameter(f"Invalid log level: {level_name}")
        levels[name.strip()] = level
    return levels
