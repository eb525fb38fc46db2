"""Alembic environment for the objfs objects table.

The database URL comes from ``alembic -x url=...``, then the
``sqlalchemy.url`` main option set by ``objfs.config.build_alembic_config``,
then ``OBJFS_STORE_URL``. Online runs connect through
``objfs.adapters.db.engine.make_engine`` so SQLite gets the usual PRAGMAs.
"""

from logging.config import fileConfig

from alembic import context

# registers objfs_objects on the shared metadata
import objfs.adapters.object_store.schema  # noqa: F401 # pylint: disable=unused-import
from objfs import config as objfs_config
from objfs.adapters.db.engine import is_sqlite, make_engine
from objfs.adapters.db.metadata import metadata

# pylint: disable=no-member

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)


def database_url() -> str:
    """Return the URL to migrate; raise if none is configured."""
    url = context.get_x_argument(as_dictionary=True).get("url")
    url = url or alembic_config.get_main_option(objfs_config.ALEMBIC_URL_KEY)
    if url:
        return url
    try:
        return objfs_config.get_store_url()
    except objfs_config.StoreUrlNotSetError:
        raise RuntimeError(
            f"Set {objfs_config.STORE_URL_ENV} to the database URL to migrate."
        ) from None


def run_offline(url: str) -> None:
    """Emit the migration SQL instead of executing it."""
    context.configure(
        url=url,
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: str) -> None:
    """Apply the migrations over a live connection."""
    engine = make_engine(url)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=metadata,
                compare_type=True,
                render_as_batch=is_sqlite(url),
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline(database_url())
else:
    run_online(database_url())
