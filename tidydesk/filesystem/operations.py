"""File system operations (create, move, copy, delete).

Copy and delete walk the tree themselves rather than calling
``shutil.copytree``/``shutil.rmtree``:

* copy merges into an existing destination directory and overwrites
  existing files; a failure half way leaves the already copied children
  on disk (there is no rollback).
* copy refuses symlinks and special files (FIFOs, sockets, devices) with
  :class:`UnsupportedNodeError`.
* delete removes children before their parent and unlinks symlinks
  without following them. Delete is immediate and irreversible; showing a
  preview before applying a plan is up to the caller.
"""

import errno
import logging
import os
import shutil
from pathlib import Path

from .paths import is_directory, is_regular_file, is_within, path_exists, to_path

logger = logging.getLogger(__name__)


class UnsupportedNodeError(OSError):
    """Raised when a copy meets a node that is neither a file nor a directory."""


def create_directory(path: str | Path, parents: bool = True) -> Path:
    """
    Create a directory.

    Succeeds silently if the directory already exists.

    Args:
        path: Directory path to create
        parents: Create parent directories if needed

    Returns:
        Created Path object
    """
    path_obj = to_path(path)

    if path_obj.exists() and not path_obj.is_dir():
        raise FileExistsError(f"Path already exists as a file: {path_obj}")

    path_obj.mkdir(parents=parents, exist_ok=True)
    logger.info(f"Directory ready: {path_obj}")
    return path_obj


def create_file(path: str | Path, content: str = "") -> Path:
    """
    Create a file with optional content.

    Missing parent directories are created. An existing file is truncated
    and overwritten.

    Args:
        path: File path to create
        content: Initial file content

    Returns:
        Created Path object
    """
    path_obj = to_path(path)

    if path_exists(path_obj.parent) and not path_obj.parent.is_dir():
        raise NotADirectoryError(errno.ENOTDIR, "Parent is not a directory", str(path_obj.parent))

    path_obj.parent.mkdir(parents=True, exist_ok=True)
    path_obj.write_text(content, encoding="utf-8")
    logger.info(f"File written: {path_obj} ({len(content)} chars)")
    return path_obj


def copy_tree(source: str | Path, destination: str | Path) -> Path:
    """
    Recursively copy a file or directory.

    For a directory source the destination and its missing ancestors are
    created, then each child is copied in turn. For a file source the
    bytes are copied to ``destination``; its parent directory must
    already exist.

    Args:
        source: Source path
        destination: Destination path

    Returns:
        Destination Path object
    """
    source_path = to_path(source)
    dest_path = to_path(destination)

    if not path_exists(source_path):
        raise FileNotFoundError(errno.ENOENT, "Source does not exist", str(source_path))

    if is_directory(source_path) and is_within(dest_path, source_path):
        raise ValueError(f"Cannot copy a directory into itself: {source_path} -> {dest_path}")

    _copy_node(source_path, dest_path)
    logger.info(f"Copied: {source_path} -> {dest_path}")
    return dest_path


def _copy_node(source: Path, destination: Path) -> None:
    if source.is_symlink():
        raise UnsupportedNodeError(errno.EINVAL, "Symbolic links are not copied", str(source))

    if source.is_dir():
        destination.mkdir(parents=True, exist_ok=True)
        for child in source.iterdir():
            _copy_node(child, destination / child.name)
    elif is_regular_file(source):
        shutil.copyfile(source, destination)
    else:
        raise UnsupportedNodeError(errno.EINVAL, "Not a regular file or directory", str(source))


def delete_tree(path: str | Path) -> bool:
    """
    Recursively delete a file or directory.

    Directories are emptied depth-first and removed last. Symlinks are
    unlinked, never followed.

    Args:
        path: Path to delete

    Returns:
        True if deleted successfully
    """
    path_obj = to_path(path)

    if not path_exists(path_obj):
        raise FileNotFoundError(errno.ENOENT, "Path does not exist", str(path_obj))

    _delete_node(path_obj)
    logger.info(f"Deleted: {path_obj}")
    return True


def _delete_node(path: Path) -> None:
    if is_directory(path):
        for child in path.iterdir():
            _delete_node(child)
        path.rmdir()
    else:
        path.unlink()


def move_path(source: str | Path, destination: str | Path) -> Path:
    """
    Move or rename a file or directory.

    Uses an atomic ``os.rename``. When source and destination live on
    different file systems the rename fails with ``EXDEV`` and the move is
    carried out as a recursive copy followed by a recursive delete of the
    source. Whether an existing destination is replaced is decided by the
    platform's rename.

    Args:
        source: Source path
        destination: Destination path

    Returns:
        New Path object
    """
    source_path = to_path(source)
    dest_path = to_path(destination)

    if not path_exists(source_path):
        raise FileNotFoundError(errno.ENOENT, "Source does not exist", str(source_path))

    try:
        os.rename(source_path, dest_path)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        logger.info(f"Cross-device move, copying instead: {source_path} -> {dest_path}")
        copy_tree(source_path, dest_path)
        delete_tree(source_path)

    logger.info(f"Moved: {source_path} -> {dest_path}")
    return dest_path
