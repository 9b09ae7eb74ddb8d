"""Directory listing and file preview."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from ..settings import settings
from .paths import to_path
from .types import FileEntry

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {
    ".txt", ".md", ".json", ".js", ".html", ".css", ".py", ".cpp", ".java",
    ".csv", ".xml", ".yaml", ".yml", ".toml", ".ini", ".log", ".sh",
}


def scan_directory(path: str | Path, show_hidden: Optional[bool] = None) -> List[FileEntry]:
    """
    List the direct children of a directory.

    Args:
        path: Directory path
        show_hidden: Whether to include dot files (defaults to settings)

    Returns:
        FileEntry list, directories first, then by lowercase name
    """
    if show_hidden is None:
        show_hidden = settings.organizer.show_hidden

    path_obj = to_path(path)

    if not path_obj.exists():
        raise FileNotFoundError(f"Path does not exist: {path_obj}")

    if not path_obj.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {path_obj}")

    entries = []
    for item in path_obj.iterdir():
        if not show_hidden and item.name.startswith('.'):
            continue

        try:
            entries.append(_make_entry(item))
        except OSError as e:
            logger.warning(f"Skipping unreadable entry {item}: {e}")

    logger.info(f"Scanned {path_obj}: {len(entries)} entries")
    return sorted(entries, key=lambda e: (not e.is_directory, e.name.lower()))


def _make_entry(item: Path) -> FileEntry:
    stat = item.stat()
    is_dir = item.is_dir()
    created = getattr(stat, "st_birthtime", stat.st_ctime)

    return FileEntry(
        name=item.name,
        path=str(item.absolute()),
        is_directory=is_dir,
        size=0 if is_dir else stat.st_size,
        modified_at=datetime.fromtimestamp(stat.st_mtime),
        created_at=datetime.fromtimestamp(created),
        extension=None if is_dir else (item.suffix.lower() or None),
    )


def read_file_preview(path: str | Path, max_bytes: Optional[int] = None) -> Dict[str, str]:
    """
    Read a file for the preview panel.

    Args:
        path: File path
        max_bytes: Truncate text content to this many bytes (defaults to settings)

    Returns:
        Dict with 'type' ('text', 'binary' or 'error') and 'content'
    """
    if max_bytes is None:
        max_bytes = settings.organizer.preview_max_bytes

    path_obj = to_path(path)

    if path_obj.suffix.lower() not in TEXT_EXTENSIONS:
        return {"type": "binary", "content": f"Binary file: {path_obj.name}"}

    try:
        with path_obj.open("rb") as f:
            data = f.read(max_bytes)
        return {"type": "text", "content": data.decode("utf-8", errors="replace")}
    except OSError as e:
        logger.warning(f"Could not read {path_obj}: {e}")
        return {"type": "error", "content": str(e)}


def get_directory_tree(path: str | Path, max_depth: int = 3, current_depth: int = 0) -> List[str]:
    """
    Get directory tree structure.

    Args:
        path: Root directory
        max_depth: Maximum depth to traverse
        current_depth: Current depth (for recursion)

    Returns:
        List of formatted tree lines
    """
    path = to_path(path)

    if not path.is_dir():
        return []

    lines = []
    prefix = "  " * current_depth

    try:
        items = [i for i in path.iterdir() if not i.name.startswith('.')]
        items.sort(key=lambda x: (x.is_file(), x.name.lower()))

        for i, item in enumerate(items):
            connector = "└── " if i == len(items) - 1 else "├── "

            if item.is_dir():
                lines.append(f"{prefix}{connector}{item.name}/")
                if current_depth < max_depth:
                    lines.extend(get_directory_tree(item, max_depth, current_depth + 1))
            else:
                lines.append(f"{prefix}{connector}{item.name} ({format_size(item.stat().st_size)})")

    except PermissionError:
        lines.append(f"{prefix}⚠️ Permission denied")

    return lines


def format_size(size: int) -> str:
    """Format a byte count as B, KB, MB or GB with up to two decimals."""
    value = float(max(size, 0))
    for unit in ["B", "KB", "MB"]:
        if value < 1024.0:
            break
        value /= 1024.0
    else:
        unit = "GB"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {unit}"
