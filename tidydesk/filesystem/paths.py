"""Path and tree primitives shared by all file operations."""

import os
from pathlib import Path


def to_path(path: str | Path) -> Path:
    """Normalize a user supplied path (expands ``~``, does not resolve symlinks)."""
    return Path(path).expanduser()


def join_path(base: str | Path, *parts: str) -> Path:
    """Join path components onto a base path."""
    return to_path(base).joinpath(*parts)


def is_directory(path: str | Path) -> bool:
    """True for real directories only; a symlink to a directory is not one."""
    path_obj = to_path(path)
    return path_obj.is_dir() and not path_obj.is_symlink()


def is_regular_file(path: str | Path) -> bool:
    """True for regular files that are not symlinks."""
    path_obj = to_path(path)
    return path_obj.is_file() and not path_obj.is_symlink()


def path_exists(path: str | Path) -> bool:
    """
    Check whether anything exists at ``path``.

    Unlike ``Path.exists`` a dangling symlink counts as existing, so a
    deleted tree is only reported gone once the link itself is gone.
    """
    return os.path.lexists(to_path(path))


def same_path(first: str | Path, second: str | Path) -> bool:
    """Compare two paths after resolving them."""
    return to_path(first).resolve() == to_path(second).resolve()


def is_within(path: str | Path, parent: str | Path) -> bool:
    """True if ``path`` equals ``parent`` or lies somewhere below it."""
    resolved = to_path(path).resolve()
    resolved_parent = to_path(parent).resolve()
    return resolved == resolved_parent or resolved_parent in resolved.parents
