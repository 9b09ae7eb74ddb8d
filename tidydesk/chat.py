"""Chat assistant: route free-text requests and describe proposed plans."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .batch import Operation, plan_moves, plan_renames
from .filesystem import (
    AIOrganizer,
    FileEntry,
    fallback_organization,
    find_duplicates_by_size,
    find_largest_files,
    format_size,
    organize_by_extension,
    organize_by_month,
)

logger = logging.getLogger(__name__)

HELP_MESSAGE = (
    "I can help you organize files by type, date, category or project, "
    "find duplicates, identify large files or suggest better names. "
    "What would you like to do?"
)
NO_FILES_MESSAGE = "Please select a folder first to organize files."

# Order matters: first match wins
CHAT_PATTERNS = [
    ("renames", r"\b(rename|renaming|better names?|clean ?up names?)\b"),
    ("organize_project", r"\b(organi[sz]e|sort|group)\b.*\bprojects?\b"),
    ("organize_type", r"\b(organi[sz]e|sort|group)\b.*\b(type|types|extensions?)\b"),
    ("organize_date", r"\b(organi[sz]e|sort|group)\b.*\b(date|dates|month|months)\b"),
    ("organize_category", r"\b(organi[sz]e|sort|group)\b.*\b(category|categories|kind)\b"),
    ("duplicates", r"\bduplicates?\b"),
    ("largest", r"\b(large|larger|largest|big|biggest)\b"),
    ("organize_ai", r"\b(organi[sz]e|tidy|clean ?up|sort)\b"),
]


@dataclass
class Proposal:
    """Assistant reply plus the operations it would run when applied."""
    message: str
    operations: List[Operation] = field(default_factory=list)


def parse_chat_command(text: str) -> Optional[str]:
    """Return the action for a chat message, or None if nothing matches."""
    query = re.sub(r"\s+", " ", (text or "").strip().lower())
    for action, pattern in CHAT_PATTERNS:
        if re.search(pattern, query):
            return action
    return None


def _describe_buckets(header: str, buckets: Dict[str, Sequence[FileEntry]], footer: str = "") -> str:
    lines = [header, ""]
    for category, files in buckets.items():
        lines.append(f"• {category}: {len(files)} files")
    if footer:
        lines.extend(["", footer])
    return "\n".join(lines)


def describe_duplicates(groups: Dict[int, Sequence[FileEntry]]) -> str:
    if not groups:
        return "No duplicate files found based on file size."

    lines = [f"Found {len(groups)} groups of potential duplicates:", ""]
    for i, (size, files) in enumerate(groups.items(), 1):
        lines.append(f"Group {i} ({format_size(size)}):")
        lines.extend(f"  • {f.name}" for f in files)
    return "\n".join(lines)


def describe_largest(files: Sequence[FileEntry]) -> str:
    if not files:
        return "There are no files in this folder."

    lines = [f"Top {len(files)} largest files:", ""]
    for i, f in enumerate(files, 1):
        lines.append(f"{i}. {f.name} - {format_size(f.size)}")
    return "\n".join(lines)


def handle_chat_message(
    text: str,
    files: Sequence[FileEntry],
    target_root: str | Path,
    organizer: Optional[AIOrganizer] = None,
) -> Proposal:
    """
    Answer one chat message about the current folder.

    Args:
        text: User message
        files: Current directory listing
        target_root: Folder that receives the organized sub-folders
        organizer: Language model helper; without it only table-driven
            actions are offered

    Returns:
        Proposal with the reply and the operations to apply on confirmation
    """
    if not files:
        return Proposal(NO_FILES_MESSAGE)

    action = parse_chat_command(text)
    ai_ready = organizer is not None and organizer.available
    logger.info(f"Chat action: {action} (ai={'on' if ai_ready else 'off'})")
    apply_hint = "Would you like me to create folders and move these files?"

    if action == "organize_type":
        buckets = organize_by_extension(files)
        return Proposal(
            _describe_buckets("I've analyzed your files and found:", buckets, apply_hint),
            plan_moves(buckets, target_root),
        )

    if action == "organize_date":
        buckets = organize_by_month(files)
        return Proposal(
            _describe_buckets("Files organized by month:", buckets, apply_hint),
            plan_moves(buckets, target_root),
        )

    if action == "organize_category":
        buckets = fallback_organization(files)
        return Proposal(
            _describe_buckets("Here's a grouping by category:", buckets, apply_hint),
            plan_moves(buckets, target_root),
        )

    if action == "organize_project":
        if not ai_ready:
            return Proposal("AI features are not available. Check that Ollama is running and TIDYDESK_AI_ENABLED is set.")
        projects = organizer.detect_projects(files)
        if not projects:
            return Proposal(
                "I couldn't detect clear project groupings. Try organizing by type or date instead."
            )
        return Proposal(
            _describe_buckets("I've detected the following projects:", projects,
                              "Would you like me to create folders and organize these files?"),
            plan_moves(projects, target_root),
        )

    if action == "duplicates":
        return Proposal(describe_duplicates(find_duplicates_by_size(files)))

    if action == "largest":
        return Proposal(describe_largest(find_largest_files(files)))

    if action == "renames":
        if not ai_ready:
            return Proposal("AI features are not available, so I can't suggest new names right now.")
        suggestions = organizer.suggest_renames(files)
        if not suggestions:
            return Proposal("All file names already look fine.")
        lines = ["Suggested renames:", ""]
        lines.extend(f"• {s.original} → {s.suggested} ({s.reason})" for s in suggestions)
        return Proposal("\n".join(lines), plan_renames(suggestions, files))

    if action == "organize_ai" and ai_ready:
        buckets = organizer.suggest_organization(files, text)
        return Proposal(
            _describe_buckets("Here's my suggested organization:", buckets, apply_hint),
            plan_moves(buckets, target_root),
        )

    if action == "organize_ai":
        buckets = fallback_organization(files)
        return Proposal(
            _describe_buckets("I've grouped your files by category:", buckets, apply_hint),
            plan_moves(buckets, target_root),
        )

    return Proposal(HELP_MESSAGE)
