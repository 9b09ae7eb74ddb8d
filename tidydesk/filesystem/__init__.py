"""File system module: primitives, scanning and classification."""

from .paths import (
    to_path,
    join_path,
    is_directory,
    is_regular_file,
    path_exists,
    same_path,
    is_within,
)

from .operations import (
    UnsupportedNodeError,
    create_directory,
    create_file,
    copy_tree,
    delete_tree,
    move_path,
)

from .navigator import (
    scan_directory,
    read_file_preview,
    get_directory_tree,
    format_size,
)

from .types import FileEntry, RenameSuggestion

from .classification import (
    organize_by_extension,
    organize_by_month,
    find_duplicates_by_size,
    find_largest_files,
    fallback_organization,
    category_for_extension,
    summarize_files,
    find_similar_files,
    needs_rename,
)

from .ai_organizer import AIOrganizer, resolve_groups

__all__ = [
    # Paths
    "to_path",
    "join_path",
    "is_directory",
    "is_regular_file",
    "path_exists",
    "same_path",
    "is_within",
    # Operations
    "UnsupportedNodeError",
    "create_directory",
    "create_file",
    "copy_tree",
    "delete_tree",
    "move_path",
    # Navigation
    "scan_directory",
    "read_file_preview",
    "get_directory_tree",
    "format_size",
    # Types
    "FileEntry",
    "RenameSuggestion",
    # Classification
    "organize_by_extension",
    "organize_by_month",
    "find_duplicates_by_size",
    "find_largest_files",
    "fallback_organization",
    "category_for_extension",
    "summarize_files",
    "find_similar_files",
    "needs_rename",
    # Organization
    "AIOrganizer",
    "resolve_groups",
]
