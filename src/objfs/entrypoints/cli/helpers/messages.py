"""Terminal message helpers for the objfs CLI.

Each helper prints one styled line to stderr, prefixed with an emoji glyph
or, when stderr cannot encode it, an ASCII stand-in. stdout stays reserved
for command output such as ``objfs cat``.
"""

import click

GLYPHS = {
    "warn": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
}


def _stderr_can_encode(character: str) -> bool:
    """Return True if *character* can be encoded on stderr."""
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(kind: str) -> str:
    """Return the marker for *kind* (``warn``, ``success`` or ``error``).

    Raises:
        KeyError: If *kind* is unknown.
    """
    emoji, fallback = GLYPHS[kind]
    return emoji if _stderr_can_encode(emoji) else fallback


def warn(msg: str) -> None:
    """Print a yellow, bold warning line to stderr."""
    click.secho(f"{glyph('warn')}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Print a green, bold success line to stderr."""
    click.secho(f"{glyph('success')}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Print a red, bold error line to stderr."""
    click.secho(f"{glyph('error')}  {msg}", fg="red", bold=True, err=True)
