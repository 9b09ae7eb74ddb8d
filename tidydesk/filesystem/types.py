"""File metadata types."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FileEntry(BaseModel):
    """Snapshot of one file system node, taken when its directory was read.

    Entries go stale as soon as anything on disk changes; nothing keeps
    them in sync with later operations.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    is_directory: bool = False
    size: int = 0
    modified_at: datetime
    created_at: Optional[datetime] = None
    extension: Optional[str] = None


class RenameSuggestion(BaseModel):
    """A proposed new name for a file."""

    original: str
    suggested: str
    reason: str = ""
