"""Fixtures for end-to-end tests of the top-level ``objfs`` options.

A test-only ``emit-logs`` command logs a fixed sequence of records, at
every level, from an objfs logger and from a third-party logger. The
``invoke`` fixture registers it for one test, runs the CLI inside an
isolated directory and points the flight recorder at a local file.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

import click
import pytest
from click.testing import CliRunner, Result

from objfs.entrypoints.cli.main import objfs

OBJFS_LOGGER = "objfs.service_layer.filesystem_store"
THIRD_PARTY_LOGGER = "urllib3.connectionpool"
LOG_FILE = "flight_recorder.log"

Invoke = Callable[..., Result]


@click.command("emit-logs")
def emit_logs() -> None:
    """Log one record per level, then a trailing DEBUG record."""
    log = logging.getLogger(OBJFS_LOGGER)
    third_party = logging.getLogger(THIRD_PARTY_LOGGER)

    log.debug("Allocated block 17 (19 bytes)")
    log.info("Stored node /a/f")
    third_party.debug("Starting new HTTPS connection (1): store.example")
    third_party.info("Resetting dropped connection: store.example")
    third_party.warning("Retrying connection to store.example")
    log.warning("Block 17 missing from store")
    log.error("Failed to remove block 18")
    log.critical("Store unreachable")
    log.debug("Released store handle")


def _unregister(group: click.Group, name: str) -> None:
    group.commands.pop(name, None)
    # click-extra keeps its own per-section registries
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for section in getattr(group, "_sections", []):
        getattr(section, "commands", {}).pop(name, None)


@pytest.fixture
def invoke() -> Iterator[Invoke]:
    """Return ``invoke(*args, env=None)`` running ``objfs`` in a scratch dir.

    ``OBJFS_STORE_URL`` is cleared and ``OBJFS_LOG_PATH`` defaults to
    `LOG_FILE` inside the scratch directory; *env* overrides both.
    """
    runner = CliRunner()
    objfs.add_command(emit_logs)

    def _invoke(*args: str, env: dict[str, Any] | None = None) -> Result:
        merged = {"OBJFS_STORE_URL": None, "OBJFS_LOG_PATH": LOG_FILE, **(env or {})}
        return runner.invoke(objfs, list(args), env=merged)

    try:
        with runner.isolated_filesystem():
            yield _invoke
    finally:
        _unregister(objfs, "emit-logs")
