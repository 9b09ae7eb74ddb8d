"""Pure bucketing of FileEntry lists (by extension, month, size or category).

Nothing in here touches the disk. Bucket maps are plain dicts whose keys
appear in the order the first matching file was encountered, so the same
input list always produces the same map.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence

from ..settings import settings
from .types import FileEntry

logger = logging.getLogger(__name__)

# Fallback grouping when no language model is available (order matters)
CATEGORY_EXTENSIONS = {
    "Documents": {".txt", ".doc", ".docx", ".pdf", ".md", ".rtf", ".odt"},
    "Images": {".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".bmp", ".tiff"},
    "Videos": {".mp4", ".avi", ".mov", ".mkv", ".webm"},
    "Audio": {".mp3", ".wav", ".flac", ".aac", ".ogg", ".m4a"},
    "Archives": {".zip", ".rar", ".7z", ".tar", ".gz"},
    "Code": {".js", ".py", ".java", ".cpp", ".html", ".css", ".json"},
}
OTHER_CATEGORY = "Other"

RENAME_MAX_LENGTH = 50
_SAFE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")
_NAME_TOKEN = re.compile(r"[^a-z0-9]+")


def _files_only(files: Sequence[FileEntry]) -> List[FileEntry]:
    return [f for f in files if not f.is_directory]


def organize_by_extension(files: Sequence[FileEntry]) -> Dict[str, List[FileEntry]]:
    """
    Group files by extension.

    Directories are ignored; files without an extension go under the
    ``no-extension`` key.
    """
    no_extension = settings.organizer.no_extension_key
    buckets: Dict[str, List[FileEntry]] = {}
    for entry in _files_only(files):
        key = entry.extension or no_extension
        buckets.setdefault(key, []).append(entry)
    return buckets


def organize_by_month(files: Sequence[FileEntry]) -> Dict[str, List[FileEntry]]:
    """Group files by the ``YYYY-MM`` of their modification time."""
    buckets: Dict[str, List[FileEntry]] = {}
    for entry in _files_only(files):
        key = f"{entry.modified_at.year:04d}-{entry.modified_at.month:02d}"
        buckets.setdefault(key, []).append(entry)
    return buckets


def find_duplicates_by_size(files: Sequence[FileEntry]) -> Dict[int, List[FileEntry]]:
    """
    Find potential duplicates.

    Files are grouped by exact byte size and every group with more than
    one member is returned, keyed by that size. Equal sizes do not prove
    equal content, so false positives are expected.
    """
    by_size: Dict[int, List[FileEntry]] = {}
    for entry in _files_only(files):
        by_size.setdefault(entry.size, []).append(entry)

    groups = {size: group for size, group in by_size.items() if len(group) > 1}
    logger.debug(f"Found {len(groups)} potential duplicate groups")
    return groups


def find_largest_files(files: Sequence[FileEntry], limit: Optional[int] = None) -> List[FileEntry]:
    """Return the largest files, biggest first; equal sizes keep their input order."""
    if limit is None:
        limit = settings.organizer.largest_files_limit
    ranked = sorted(_files_only(files), key=lambda f: f.size, reverse=True)
    return ranked[:limit]


def category_for_extension(extension: Optional[str]) -> str:
    """Look up the fallback category of an extension."""
    if extension:
        ext = extension.lower()
        for category, extensions in CATEGORY_EXTENSIONS.items():
            if ext in extensions:
                return category
    return OTHER_CATEGORY


def fallback_organization(files: Sequence[FileEntry]) -> Dict[str, List[FileEntry]]:
    """
    Group files into the fixed categories (Documents, Images, ... Other).

    Categories come out in table order and empty ones are left out.
    """
    organized: Dict[str, List[FileEntry]] = {name: [] for name in CATEGORY_EXTENSIONS}
    organized[OTHER_CATEGORY] = []

    for entry in _files_only(files):
        organized[category_for_extension(entry.extension)].append(entry)

    return {category: group for category, group in organized.items() if group}


def summarize_files(files: Sequence[FileEntry]) -> Dict[str, object]:
    """Build the overview shown before an organization plan is applied."""
    no_extension = settings.organizer.no_extension_key
    file_types: Dict[str, int] = {}
    only_files = _files_only(files)

    for entry in only_files:
        key = entry.extension or no_extension
        file_types[key] = file_types.get(key, 0) + 1

    return {
        "total_files": len(only_files),
        "total_folders": len(files) - len(only_files),
        "total_size": sum(f.size for f in only_files),
        "file_types": file_types,
    }


def _name_tokens(name: str) -> set:
    return {token for token in _NAME_TOKEN.split(name.lower()) if token}


def find_similar_files(files: Sequence[FileEntry], target: FileEntry) -> List[FileEntry]:
    """
    Find files that look related to ``target`` by metadata alone.

    A file is similar when it shares the extension or at least two name
    tokens with the target.
    """
    target_tokens = _name_tokens(target.name)
    similar = []

    for entry in files:
        if entry.path == target.path:
            continue
        if entry.extension and entry.extension == target.extension:
            similar.append(entry)
        elif len(target_tokens & _name_tokens(entry.name)) >= 2:
            similar.append(entry)

    return similar


def needs_rename(entry: FileEntry) -> bool:
    """True for names with spaces, unusual characters or excessive length."""
    name = entry.name
    return " " in name or not _SAFE_NAME.match(name) or len(name) > RENAME_MAX_LENGTH
