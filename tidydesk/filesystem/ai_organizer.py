"""Language-model assisted grouping and rename suggestions.

The model only proposes; callers turn its answer into operations (see
``tidydesk.batch.planner``). Any failure degrades to the table-driven
fallback grouping, an empty project map or an empty rename list.
"""

import fnmatch
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..settings import settings
from .classification import fallback_organization, needs_rename
from .types import FileEntry, RenameSuggestion

logger = logging.getLogger(__name__)

ORGANIZE_SYSTEM_PROMPT = """You are a file organization assistant. Look at the files and propose a folder structure.
Take file types, names, dates and likely projects into account.
Answer with a JSON object: folder names as keys, lists of file names as values.
Every file name must be copied exactly from the input."""

PROJECTS_SYSTEM_PROMPT = """Look at these file names and find projects or other logical groupings
(common prefixes, related content, shared topics).
Answer with a JSON object: project names as keys, lists of file names or glob patterns as values."""

RENAMES_SYSTEM_PROMPT = """Suggest better file names that are:
1. Clean (no spaces, use hyphens or underscores)
2. Descriptive but concise
3. Consistent (lowercase, one separator style, original extension kept)
Answer with a JSON object {"renames": [{"original": "old name", "suggested": "new name", "reason": "why"}]}."""


class AIOrganizer:
    """Wraps a chat provider and converts its JSON answers into bucket maps."""

    def __init__(
        self,
        provider: Optional[Any] = None,
        enabled: Optional[bool] = None,
        max_retries: Optional[int] = None,
    ):
        """
        Args:
            provider: Object with ``generate(prompt, system_prompt, temperature, json_mode)``;
                an OllamaProvider is created when omitted
            enabled: Use the model at all (defaults to settings)
            max_retries: Extra attempts after a failed model call (defaults to settings)
        """
        self.enabled = settings.ollama.enabled if enabled is None else enabled
        self.max_retries = settings.ollama.max_retries if max_retries is None else max_retries

        if provider is None and self.enabled:
            from ..providers import OllamaProvider
            provider = OllamaProvider()
        self.provider = provider

    @property
    def available(self) -> bool:
        return self.enabled and self.provider is not None

    def _ask_json(self, prompt: str, system_prompt: str, temperature: float) -> Any:
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            try:
                reply = self.provider.generate(
                    prompt,
                    system_prompt=system_prompt,
                    temperature=temperature,
                    json_mode=True,
                )
                break
            except Exception as e:
                last_error = e
                logger.warning(f"Model call failed (attempt {attempt + 1}/{self.max_retries + 1}): {e}")
        else:
            raise RuntimeError(f"Model unavailable: {last_error}")

        return json.loads(reply)

    def suggest_organization(self, files: Sequence[FileEntry], user_query: str = "") -> Dict[str, List[FileEntry]]:
        """
        Ask the model for a folder structure.

        Args:
            files: Directory listing
            user_query: The user's request in free text

        Returns:
            Folder name -> files; the fallback grouping if the model fails
        """
        candidates = [f for f in files if not f.is_directory]
        if not self.available or not candidates:
            return fallback_organization(files)

        file_list = [
            {
                "name": f.name,
                "type": f.extension,
                "size": f.size,
                "modified": f.modified_at.isoformat(),
            }
            for f in candidates
        ]
        prompt = f'User request: "{user_query}"\n\nFiles to organize:\n{json.dumps(file_list, indent=2)}'

        try:
            answer = self._ask_json(prompt, ORGANIZE_SYSTEM_PROMPT, temperature=0.7)
            organized = resolve_groups(answer, candidates)
        except Exception as e:
            logger.error(f"AI organization failed, using fallback: {e}")
            return fallback_organization(files)

        if not organized:
            logger.info("Model answer matched no files, using fallback")
            return fallback_organization(files)
        return organized

    def detect_projects(self, files: Sequence[FileEntry]) -> Dict[str, List[FileEntry]]:
        """Ask the model for project groupings; empty dict when unavailable."""
        candidates = [f for f in files if not f.is_directory]
        if not self.available or not candidates:
            return {}

        prompt = "\n".join(f.name for f in candidates)

        try:
            answer = self._ask_json(prompt, PROJECTS_SYSTEM_PROMPT, temperature=0.5)
            return resolve_groups(answer, candidates, allow_patterns=True)
        except Exception as e:
            logger.error(f"Project detection failed: {e}")
            return {}

    def suggest_renames(self, files: Sequence[FileEntry]) -> List[RenameSuggestion]:
        """Ask the model for better names of badly named files."""
        problematic = [f for f in files if not f.is_directory and needs_rename(f)]
        if not self.available or not problematic:
            return []

        names = [f.name for f in problematic]

        try:
            answer = self._ask_json(json.dumps(names), RENAMES_SYSTEM_PROMPT, temperature=0.3)
        except Exception as e:
            logger.error(f"Rename suggestion failed: {e}")
            return []

        if isinstance(answer, dict):
            answer = answer.get("renames", [])
        if not isinstance(answer, list):
            logger.warning("Unexpected rename answer shape, ignoring")
            return []

        known = set(names)
        suggestions = []
        for item in answer:
            try:
                suggestion = RenameSuggestion.model_validate(item)
            except ValidationError as e:
                logger.warning(f"Skipping malformed rename suggestion {item!r}: {e.error_count()} errors")
                continue
            if suggestion.original in known:
                suggestions.append(suggestion)
        return suggestions


def resolve_groups(
    answer: Any,
    files: Sequence[FileEntry],
    allow_patterns: bool = False,
) -> Dict[str, List[FileEntry]]:
    """
    Map a model answer ``{group: [file reference, ...]}`` back onto entries.

    References may be names, paths, objects with a ``name``/``path`` key,
    or (with ``allow_patterns``) glob patterns. Unknown references are
    dropped, as are groups that end up empty. Each file lands in the first
    group that claims it.
    """
    if not isinstance(answer, dict):
        raise ValueError(f"Expected a JSON object, got {type(answer).__name__}")

    by_key: Dict[str, FileEntry] = {}
    for entry in files:
        by_key.setdefault(entry.name, entry)
        by_key.setdefault(entry.path, entry)

    claimed = set()
    groups: Dict[str, List[FileEntry]] = {}

    for group, refs in answer.items():
        if isinstance(refs, (str, dict)):
            refs = [refs]
        if not isinstance(refs, list):
            continue

        members = []
        for ref in refs:
            if isinstance(ref, dict):
                ref = ref.get("path") or ref.get("name")
            if not isinstance(ref, str):
                continue

            if ref in by_key:
                matches = [by_key[ref]]
            elif allow_patterns:
                matches = [f for f in files if fnmatch.fnmatch(f.name, ref)]
            else:
                matches = []

            for entry in matches:
                if entry.path not in claimed:
                    claimed.add(entry.path)
                    members.append(entry)

        if members:
            groups[str(group)] = members

    return groups
