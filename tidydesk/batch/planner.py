"""Turn organization proposals into operation lists.

Model output is untrusted: folder names are squeezed into a single safe
path component and rename targets containing separators are dropped
before any operation is built.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Sequence

from ..filesystem.paths import to_path
from ..filesystem.types import FileEntry, RenameSuggestion
from .models import CreateFolder, Move, Operation, Rename

logger = logging.getLogger(__name__)

_UNSAFE_FOLDER_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def safe_folder_name(name: str) -> str:
    """Reduce a category name to a single path component."""
    cleaned = _UNSAFE_FOLDER_CHARS.sub("_", str(name)).strip(" .")
    return cleaned or "Unsorted"


def _valid_new_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name and "\x00" not in name


def plan_moves(buckets: Dict[str, Sequence[FileEntry]], target_root: str | Path) -> List[Operation]:
    """
    Build the operations that move every bucket into its own folder.

    Args:
        buckets: Category -> files (any classification result)
        target_root: Directory that receives one sub-folder per category

    Returns:
        CreateFolder followed by the Moves, per category
    """
    root = to_path(target_root)
    operations: List[Operation] = []

    for category, files in buckets.items():
        folder = root / safe_folder_name(str(category))
        moves = []
        for entry in files:
            destination = folder / entry.name
            if Path(entry.path) == destination:
                continue
            moves.append(Move(source=Path(entry.path), destination=destination))

        if moves:
            operations.append(CreateFolder(path=folder))
            operations.extend(moves)

    logger.info(f"Planned {len(operations)} operations for {len(buckets)} categories")
    return operations


def plan_renames(suggestions: Sequence[RenameSuggestion], files: Sequence[FileEntry]) -> List[Operation]:
    """
    Build Rename operations from rename suggestions.

    Suggestions for unknown files, unchanged names or names that are not a
    single path component are skipped.
    """
    by_name = {f.name: f for f in files if not f.is_directory}
    operations: List[Operation] = []

    for suggestion in suggestions:
        entry = by_name.get(suggestion.original)
        new_name = suggestion.suggested.strip()

        if entry is None:
            logger.warning(f"Rename suggestion for unknown file: {suggestion.original}")
            continue
        if not _valid_new_name(new_name) or new_name == entry.name:
            logger.warning(f"Skipping rename {entry.name!r} -> {suggestion.suggested!r}")
            continue

        old_path = Path(entry.path)
        operations.append(Rename(old_path=old_path, new_path=old_path.with_name(new_name)))

    return operations
