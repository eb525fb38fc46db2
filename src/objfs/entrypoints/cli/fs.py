"""Namespace commands: ``ls``, ``dump``, ``mkdir``, ``put``, ``cat``, ``rm``,
``purge`` and ``info``.

All commands open the store named by ``--store-url``/``OBJFS_STORE_URL``.
Paths are absolute objfs paths; local files are ordinary filesystem paths.
Command output goes to stdout; notices and errors go to stderr.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path, PurePosixPath

import click

from objfs import __version__
from objfs.config import DEFAULT_BLOCK_SIZE
from objfs.domain.errors import InodeFormatError, InvalidPathError
from objfs.domain.inode import DIRECTORY_INODE, INode
from objfs.domain.paths import ROOT, path_to_key, to_path
from objfs.interfaces.object_store import NotFound, ObjectStoreError
from objfs.service_layer import FileSystemStore

from .helpers import sanitize_url, success, warn
from .state import CliState, pass_state

logger = logging.getLogger(__name__)

PURGE_WARNING = (
    "This will permanently delete EVERY object in the store, "
    "including data that objfs did not write."
)


@contextmanager
def _store_errors() -> Iterator[None]:
    """Turn core exceptions into ``ClickException`` with a readable message."""
    try:
        yield
    except InvalidPathError as e:
        raise click.BadParameter(str(e)) from e
    except NotFound as e:
        raise click.ClickException(f"Not found: {e.key}") from e
    except InodeFormatError as e:
        raise click.ClickException(f"Corrupt node record: {e}") from e
    except ObjectStoreError as e:
        raise click.ClickException(f"Store error: {e}") from e


def _objfs_path(value: str) -> PurePosixPath:
    """Click type: an absolute objfs path (``InvalidPathError`` is a ValueError)."""
    path = to_path(value)
    path_to_key(path)
    return path


def _parents(path: PurePosixPath) -> list[PurePosixPath]:
    """Return the ancestors of *path* from just below the root down."""
    return [p for p in reversed(path.parents) if p != ROOT]


def _require_directory(store: FileSystemStore, path: PurePosixPath) -> None:
    if not store.retrieve_node(path).is_directory:
        raise click.ClickException(f"Not a directory: {path}")


@click.command()
@click.argument("path", default="/", type=_objfs_path)
@pass_state
def ls(state: CliState, path: PurePosixPath) -> None:
    """List every path below PATH (default: the root)."""
    store = state.open_store()
    with _store_errors():
        _require_directory(store, path)
        for sub_path in store.list_sub_paths(path):
            inode = store.retrieve_node(sub_path)
            suffix = f"\t{inode.length}" if inode.is_file else ""
            click.echo(f"{sub_path}\t{inode.file_type.name}{suffix}")


@click.command()
@pass_state
def dump(state: CliState) -> None:
    """Print every node record with its blocks."""
    store = state.open_store()
    with _store_errors():
        click.echo(store.dump(), nl=False)


@click.command()
@click.argument("path", type=_objfs_path)
@pass_state
def mkdir(state: CliState, path: PurePosixPath) -> None:
    """Create directory PATH and any missing parents."""
    store = state.open_store()
    with _store_errors():
        store.path_exists(ROOT)
        for directory in [*_parents(path), path]:
            if store.path_exists(directory):
                _require_directory(store, directory)
                continue
            store.store_node(directory, DIRECTORY_INODE)
            logger.info("Created directory %s", directory)


@click.command()
@click.argument(
    "local", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.argument("path", type=_objfs_path)
@click.option(
    "--block-size",
    type=click.IntRange(min=1),
    default=DEFAULT_BLOCK_SIZE,
    show_default=True,
    help="Maximum bytes per block.",
)
@pass_state
def put(state: CliState, local: Path, path: PurePosixPath, block_size: int) -> None:
    """Copy the local file LOCAL to PATH.

    The parent of PATH must be an existing directory. An existing file at
    PATH is replaced and its old blocks are deleted.
    """
    store = state.open_store()
    with _store_errors():
        _require_directory(store, path.parent)
        previous: INode | None = None
        if store.path_exists(path):
            previous = store.retrieve_node(path)
            if previous.is_directory:
                raise click.ClickException(f"Is a directory: {path}")

        size = local.stat().st_size
        blocks = []
        with local.open("rb") as fp:
            for index in range(math.ceil(size / block_size)):
                length = min(block_size, size - index * block_size)
                blocks.append(store.allocate_and_store_block(fp, length))
        store.store_node(path, INode.file(blocks))
        logger.info("Stored %s as %d block(s)", path, len(blocks))

        if previous is not None:
            for block in previous.blocks:
                store.delete_block(block)
    success(f"{local} -> {path} ({size} bytes, {len(blocks)} block(s))")


@click.command()
@click.argument("path", type=_objfs_path)
@pass_state
def cat(state: CliState, path: PurePosixPath) -> None:
    """Write the content of file PATH to stdout."""
    store = state.open_store()
    out = click.get_binary_stream("stdout")
    with _store_errors():
        inode = store.retrieve_node(path)
        if not inode.is_file:
            raise click.ClickException(f"Is a directory: {path}")
        for block in inode.blocks:
            if block.length:
                out.write(store.retrieve_block(block))
    out.flush()


@click.command()
@click.argument("path", type=_objfs_path)
@click.option(
    "--keep-blocks",
    is_flag=True,
    help="Delete only the node record and leave its blocks in the store.",
)
@pass_state
def rm(state: CliState, path: PurePosixPath, keep_blocks: bool) -> None:
    """Remove file or empty directory PATH, then its blocks."""
    if path == ROOT:
        raise click.BadParameter("refusing to remove the root directory")
    store = state.open_store()
    with _store_errors():
        inode = store.retrieve_node(path)
        if inode.is_directory and store.list_sub_paths(path):
            raise click.ClickException(f"Directory not empty: {path}")
        store.delete_node(path)
        if keep_blocks:
            return
        for block in inode.blocks:
            try:
                store.delete_block(block)
            except NotFound:
                warn(f"Block {block.id} of {path} was already gone")


@click.command()
@click.option("--force", is_flag=True, help="Purge without confirmation.")
@pass_state
def purge(state: CliState, force: bool) -> None:
    """Delete every object in the store."""
    url = state.require_url()
    if not force:
        warn(PURGE_WARNING)
        click.secho(f"store: {click.style(sanitize_url(url), underline=True)}")
        click.confirm("Are you sure you want to proceed?", abort=True)
    store = state.open_store()
    with _store_errors():
        store.purge()
    success("Store purged")


@click.command()
@pass_state
def info(state: CliState) -> None:
    """Show the objfs version and the connected store."""
    store = state.open_store()
    with _store_errors():
        backend = store.version()
    click.echo(f"objfs   : {__version__}")
    click.echo(f"Store   : {sanitize_url(state.require_url())}")
    click.echo(f"Backend : {backend}")


COMMANDS = [ls, dump, mkdir, put, cat, rm, purge, info]
