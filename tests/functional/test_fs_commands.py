"""Functional tests for the namespace commands of the ``objfs`` CLI.

Scope
-----
Black-box runs of ``mkdir``, ``ls``, ``put``, ``cat``, ``dump``, ``rm``,
``purge`` and ``info`` via ``click.testing.CliRunner`` against a
``file://`` store in the test's tmp dir. Every invocation opens the store
afresh, so state only carries over through the store directory.

What these tests assert
-----------------------
* Files written with ``put`` read back byte-for-byte with ``cat``.
* ``dump`` lists every node with its blocks; ``ls`` lists descendants.
* Replacing or removing a file cleans up its blocks.
* Bad paths, missing nodes and type mismatches exit non-zero with a
  readable message.
"""

from __future__ import annotations

import re
from pathlib import Path

import pytest
from click.testing import CliRunner

from objfs.entrypoints.cli.fs import PURGE_WARNING
from objfs.entrypoints.cli.main import objfs
from objfs.entrypoints.cli.state import MISSING_STORE_URL_MSG

# pylint: disable=redefined-outer-name, magic-value-comparison

PAYLOAD = b"blah blah blalalah\n"
BLOCK_LINE = re.compile(r"^\tBlockId: (-?\d+) Length: (\d+)$", re.MULTILINE)


def run(runner: CliRunner, *args: str, **kwargs):
    """Invoke the CLI and fail loudly (with output) on unexpected exit codes."""
    expected = kwargs.pop("exit_code", 0)
    result = runner.invoke(objfs, list(args), **kwargs)
    assert result.exit_code == expected, result.output
    return result


@pytest.fixture
def local_file(tmp_path: Path) -> Path:
    path = tmp_path / "payload.txt"
    path.write_bytes(PAYLOAD)
    return path


def block_objects(store_dir: Path) -> list[str]:
    return sorted(p.name for p in store_dir.iterdir() if p.name.startswith("kblock_"))


# ============================================================================
#                              Round trips
# ============================================================================


def test_put_then_cat_round_trips(runner: CliRunner, local_file: Path):
    run(runner, "mkdir", "/a")
    result = run(runner, "put", str(local_file), "/a/f")
    assert "(19 bytes, 1 block(s))" in result.output

    assert run(runner, "cat", "/a/f").stdout_bytes == PAYLOAD


def test_put_splits_into_blocks(runner: CliRunner, local_file: Path, store_dir: Path):
    run(runner, "mkdir", "/a")
    result = run(runner, "put", "--block-size", "4", str(local_file), "/a/f")
    assert "(19 bytes, 5 block(s))" in result.output
    assert len(block_objects(store_dir)) == 5

    lengths = [int(n) for _, n in BLOCK_LINE.findall(run(runner, "dump").output)]
    assert lengths == [4, 4, 4, 4, 3]
    assert run(runner, "cat", "/a/f").stdout_bytes == PAYLOAD


def test_put_empty_file(runner: CliRunner, tmp_path: Path):
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    result = run(runner, "put", str(empty), "/empty")
    assert "(0 bytes, 0 block(s))" in result.output
    assert run(runner, "cat", "/empty").stdout_bytes == b""


def test_dump_reports_tree(runner: CliRunner, local_file: Path):
    run(runner, "mkdir", "/a")
    run(runner, "put", str(local_file), "/a/f")

    output = run(runner, "dump").output
    assert re.fullmatch(
        r"objfs namespace:\n"
        r"/:\tDIRECTORY\n"
        r"/a:\tDIRECTORY\n"
        r"/a/f:\tFILE\n"
        r"\tBlockId: -?\d+ Length: 19\n",
        output,
    ), output


def test_ls_lists_descendants(runner: CliRunner, local_file: Path):
    run(runner, "mkdir", "/a/b/c")
    run(runner, "put", str(local_file), "/a/b/f")
    run(runner, "mkdir", "/z")

    assert run(runner, "ls").output.splitlines() == [
        "/a\tDIRECTORY",
        "/a/b\tDIRECTORY",
        "/a/b/c\tDIRECTORY",
        "/a/b/f\tFILE\t19",
        "/z\tDIRECTORY",
    ]
    assert run(runner, "ls", "/a/b").output.splitlines() == [
        "/a/b/c\tDIRECTORY",
        "/a/b/f\tFILE\t19",
    ]


def test_mkdir_is_idempotent(runner: CliRunner):
    run(runner, "mkdir", "/a/b")
    run(runner, "mkdir", "/a/b")
    run(runner, "mkdir", "/a")
    assert run(runner, "ls").output.splitlines() == ["/a\tDIRECTORY", "/a/b\tDIRECTORY"]


def test_put_replaces_file_and_its_blocks(
    runner: CliRunner, local_file: Path, tmp_path: Path, store_dir: Path
):
    run(runner, "put", "--block-size", "4", str(local_file), "/f")
    assert len(block_objects(store_dir)) == 5

    other = tmp_path / "other"
    other.write_bytes(b"new content")
    run(runner, "put", str(other), "/f")

    assert len(block_objects(store_dir)) == 1
    assert run(runner, "cat", "/f").stdout_bytes == b"new content"


# ============================================================================
#                              Removal
# ============================================================================


def test_rm_file_deletes_node_and_blocks(
    runner: CliRunner, local_file: Path, store_dir: Path
):
    run(runner, "put", str(local_file), "/f")
    run(runner, "rm", "/f")
    assert not block_objects(store_dir)
    assert "/f" not in run(runner, "ls").output


def test_rm_keep_blocks(runner: CliRunner, local_file: Path, store_dir: Path):
    run(runner, "put", str(local_file), "/f")
    run(runner, "rm", "--keep-blocks", "/f")
    assert len(block_objects(store_dir)) == 1
    run(runner, "cat", "/f", exit_code=1)


def test_rm_directory(runner: CliRunner):
    run(runner, "mkdir", "/a/b")
    result = run(runner, "rm", "/a", exit_code=1)
    assert "Directory not empty: /a" in result.output
    run(runner, "rm", "/a/b")
    run(runner, "rm", "/a")
    assert run(runner, "ls").output == ""


def test_rm_warns_about_missing_blocks(
    runner: CliRunner, local_file: Path, store_dir: Path
):
    run(runner, "put", str(local_file), "/f")
    for name in block_objects(store_dir):
        (store_dir / name).unlink()
    result = run(runner, "rm", "/f")
    assert "was already gone" in result.output


def test_rm_root_is_refused(runner: CliRunner):
    result = run(runner, "rm", "/", exit_code=2)
    assert "refusing to remove the root directory" in result.output


def test_purge_requires_confirmation(runner: CliRunner, local_file: Path, store_dir: Path):
    run(runner, "put", str(local_file), "/f")

    result = run(runner, "purge", input="n\n", exit_code=1)
    assert PURGE_WARNING in result.output
    assert "Aborted" in result.output
    assert block_objects(store_dir)

    result = run(runner, "purge", input="y\n")
    assert "Store purged" in result.output
    assert not list(store_dir.iterdir())


def test_purge_force(runner: CliRunner, local_file: Path, store_dir: Path):
    run(runner, "put", str(local_file), "/f")
    result = run(runner, "purge", "--force")
    assert PURGE_WARNING not in result.output
    assert not list(store_dir.iterdir())


# ============================================================================
#                              Errors
# ============================================================================


def test_missing_store_url(tmp_path: Path):
    runner = CliRunner(
        env={"OBJFS_STORE_URL": "", "OBJFS_LOG_PATH": str(tmp_path / "objfs.log")}
    )
    result = run(runner, "ls", exit_code=1)
    assert MISSING_STORE_URL_MSG in result.output


def test_unsupported_store_url(runner: CliRunner):
    result = run(runner, "--store-url", "nosuchdb://host/db", "ls", exit_code=1)
    assert "Unsupported store URL" in result.output


def test_relative_path_is_rejected(runner: CliRunner):
    result = run(runner, "mkdir", "a/b", exit_code=2)
    assert "Invalid value" in result.output


@pytest.mark.parametrize("command", ["cat", "rm"])
def test_missing_node(runner: CliRunner, command: str):
    result = run(runner, command, "/nope", exit_code=1)
    assert "Not found: /nope" in result.output


def test_put_needs_existing_directory_parent(runner: CliRunner, local_file: Path):
    result = run(runner, "put", str(local_file), "/missing/f", exit_code=1)
    assert "Not found: /missing" in result.output

    run(runner, "put", str(local_file), "/f")
    result = run(runner, "put", str(local_file), "/f/g", exit_code=1)
    assert "Not a directory: /f" in result.output


def test_put_onto_directory(runner: CliRunner, local_file: Path):
    run(runner, "mkdir", "/a")
    result = run(runner, "put", str(local_file), "/a", exit_code=1)
    assert "Is a directory: /a" in result.output


def test_cat_directory(runner: CliRunner):
    run(runner, "mkdir", "/a")
    result = run(runner, "cat", "/a", exit_code=1)
    assert "Is a directory: /a" in result.output


def test_mkdir_below_file(runner: CliRunner, local_file: Path):
    run(runner, "put", str(local_file), "/f")
    result = run(runner, "mkdir", "/f/sub", exit_code=1)
    assert "Not a directory: /f" in result.output


def test_corrupt_node_record(runner: CliRunner, store_dir: Path):
    run(runner, "mkdir", "/a")
    (store_dir / "k%2Fa").write_bytes(b"garbage")
    result = run(runner, "dump", exit_code=1)
    assert "Corrupt node record" in result.output


# ============================================================================
#                              Info
# ============================================================================


def test_info(runner: CliRunner, store_dir: Path):
    result = run(runner, "info")
    assert re.search(r"^objfs   : \d+\.\d+\.\d+$", result.output, re.MULTILINE)
    assert f"Store   : {store_dir.as_uri()}" in result.output
    assert f"Backend : local directory {store_dir}" in result.output


def test_memory_store_starts_empty_each_run(runner: CliRunner):
    run(runner, "--store-url", "memory://", "mkdir", "/a")
    assert run(runner, "--store-url", "memory://", "ls").output == ""
