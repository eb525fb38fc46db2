"""``objfs db``: schema management for the SQL object store.

Forward-only wrappers over Alembic. Only needed when ``--store-url`` /
``OBJFS_STORE_URL`` is a SQLAlchemy database URL; ``memory://`` and
``file://`` stores have no schema.

Behavior
- Human-oriented notices go to **stderr**, Alembic output to **stdout**.
- ``upgrade`` prompts for confirmation unless ``--force`` or ``--sql``.

Failure modes
- Missing URL, a non-SQL URL, or an unreachable database → ``ClickException``.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, OperationalError

from objfs import config
from objfs.adapters.db.engine import make_engine

from .helpers import error, sanitize_url, success, warn
from .state import CliState, pass_state

if TYPE_CHECKING:
    from alembic.config import Config
    from sqlalchemy.engine import Engine

NOT_A_DATABASE_MSG = (
    "The configured store URL is not a SQLAlchemy database URL.\n"
    "'objfs db' commands only apply to SQL-backed stores."
)

CANNOT_CONNECT_MSG = (
    "The store URL is set, but the database is not reachable.\n"
    "Please ensure the database is running and the URL is correct."
)

UPGRADE_SCHEMA_WARNING = (
    "This will upgrade the object store schema to the latest version.\n"
    "Please ensure you have a backup before proceeding."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'objfs db upgrade' to update the schema."


def _check_connection(url: str) -> None:
    engine = make_engine(url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))  # pragma: no mutate
    finally:
        engine.dispose()


def _get_url(state: CliState) -> str:
    url = state.require_url()
    if url.lower().startswith(("memory:", "file:")):
        raise click.ClickException(NOT_A_DATABASE_MSG)
    try:
        _check_connection(url)
    except OperationalError as e:
        raise click.ClickException(CANNOT_CONNECT_MSG) from e
    except (ArgumentError, NoSuchModuleError) as e:
        raise click.ClickException(NOT_A_DATABASE_MSG) from e
    return url


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """SQL object store schema commands."""


@db.command()
@click.option(
    "--verbose",
    "-v",
    "verbose",
    is_flag=True,
    help="Show alembic's more verbose output.",
)
@pass_state
def current(state: CliState, verbose: bool) -> None:
    """Show the current schema revision."""
    cfg = config.build_alembic_config(db_url=_get_url(state), stdout=sys.stdout)
    command.current(cfg, verbose=verbose)


@db.command()
@click.option("--sql", is_flag=True, help="Generate SQL without executing.")
@click.option("--force", is_flag=True, help="Upgrade without confirmation.")
@pass_state
def upgrade(state: CliState, sql: bool, force: bool) -> None:
    """Create or upgrade the objects table to the head revision."""
    url = _get_url(state)
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    if not force and not sql:
        warn(UPGRADE_SCHEMA_WARNING)
        click.secho(f"db: {click.style(sanitize_url(url), underline=True)}")
        click.confirm("Are you sure you want to proceed?", abort=True)
    command.upgrade(cfg, revision="head", sql=sql)
    if not sql:
        success("Upgrade complete!")


class MigrationStatus(Enum):
    """Describes the migration status of the database schema."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


def _get_current_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def _get_head_revision(cfg: Config) -> str | None:
    return ScriptDirectory.from_config(cfg).get_current_head()


@db.command()
@pass_state
def status(state: CliState) -> None:
    """Show database connection and schema status."""
    try:
        url = _get_url(state)
    except click.ClickException as e:
        error("Cannot connect to database")
        click.echo(e.format_message())
        return

    engine = make_engine(url)
    try:
        rev = _get_current_revision(engine)
        dialect = engine.dialect.name
    finally:
        engine.dispose()
    head = _get_head_revision(config.build_alembic_config(db_url=url))

    success("Database reachable")
    click.echo(f"Backend : {dialect}")
    click.echo(f"URL     : {sanitize_url(url)}")
    if rev is None:
        migration_status = MigrationStatus.UNINITIALIZED
    elif rev == head:
        migration_status = MigrationStatus.UP_TO_DATE
    else:
        migration_status = MigrationStatus.OUT_OF_DATE

    message = (
        f"{rev} ({migration_status.value})"
        if rev is not None
        else migration_status.value
    )
    click.echo(f"Schema  : {message}")
    if migration_status is not MigrationStatus.UP_TO_DATE:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
