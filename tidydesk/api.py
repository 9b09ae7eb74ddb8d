"""HTTP API for TidyDesk.

This is the privileged side of the desktop app: the UI process sends
directory reads, classification requests and operation batches here and
only this process touches the file system.

Usage:
    python -m uvicorn tidydesk.api:app --host 127.0.0.1 --port 8000

Or via CLI:
    tidydesk serve
"""

import logging
from typing import Annotated, Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import AfterValidator, BaseModel, Field

from . import __version__
from .batch import BatchReport, OperationResult, ensure_non_blank_path, run_batch
from .batch import executor
from .filesystem import (
    AIOrganizer,
    FileEntry,
    RenameSuggestion,
    fallback_organization,
    find_duplicates_by_size,
    find_largest_files,
    find_similar_files,
    organize_by_extension,
    organize_by_month,
    read_file_preview,
    scan_directory,
    summarize_files,
)
from .settings import settings

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# FastAPI App
app = FastAPI(
    title="TidyDesk API",
    description="Batch file operations and folder organization",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Lazy-loaded on first AI request
_organizer: Optional[AIOrganizer] = None


def get_organizer() -> AIOrganizer:
    """Lazy-load the AI organizer."""
    global _organizer
    if _organizer is None:
        _organizer = AIOrganizer()
    return _organizer


# ============================================================================
# Request / Response Models
# ============================================================================

PathStr = Annotated[str, AfterValidator(ensure_non_blank_path)]


class BatchRequest(BaseModel):
    """Ordered list of operation descriptors, validated one by one."""
    operations: List[Any]


class PathPairRequest(BaseModel):
    source: PathStr
    destination: PathStr


class PathRequest(BaseModel):
    path: PathStr


class RenameRequest(BaseModel):
    old_path: PathStr
    new_path: PathStr


class CreateFileRequest(BaseModel):
    path: PathStr
    content: str = ""


class FilesRequest(BaseModel):
    """A directory listing as returned by /v1/directory."""
    files: List[FileEntry]


class LargestRequest(FilesRequest):
    limit: Optional[int] = Field(default=None, ge=1)


class OrganizeRequest(FilesRequest):
    query: str = ""


class SimilarRequest(FilesRequest):
    target: FileEntry


class DirectoryResponse(BaseModel):
    path: str
    entries: List[FileEntry]


class DuplicateGroup(BaseModel):
    size: int
    files: List[FileEntry]


# ============================================================================
# General
# ============================================================================

@app.get("/health")
async def health():
    """Health-Check Endpoint."""
    status = {
        "status": "ok",
        "version": __version__,
        "ai_enabled": settings.ollama.enabled,
        "ollama": "disabled",
    }

    if settings.ollama.enabled:
        organizer = get_organizer()
        if organizer.provider is not None and organizer.provider.is_available():
            status["ollama"] = "ok"
        else:
            status["ollama"] = "unreachable"
            status["status"] = "degraded"

    return status


@app.get("/v1/directory", response_model=DirectoryResponse)
def read_directory(path: str, show_hidden: bool = False):
    """List the direct children of a directory."""
    try:
        entries = scan_directory(path, show_hidden=show_hidden)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NotADirectoryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return DirectoryResponse(path=path, entries=entries)


@app.get("/v1/file")
def read_file(path: str):
    """Preview a file's content."""
    return read_file_preview(path)


# ============================================================================
# Operations
# ============================================================================

@app.post("/v1/batch", response_model=BatchReport)
def batch(request: BatchRequest):
    """
    Run operations in order.

    Always answers 200; failed operations are reported in the body.
    """
    logger.info(f"Batch request with {len(request.operations)} operations")
    return run_batch(request.operations)


@app.post("/v1/operations/move", response_model=OperationResult)
def move(request: PathPairRequest):
    return executor.move(request.source, request.destination)


@app.post("/v1/operations/copy", response_model=OperationResult)
def copy(request: PathPairRequest):
    return executor.copy(request.source, request.destination)


@app.post("/v1/operations/delete", response_model=OperationResult)
def delete(request: PathRequest):
    return executor.delete(request.path)


@app.post("/v1/operations/rename", response_model=OperationResult)
def rename(request: RenameRequest):
    return executor.rename(request.old_path, request.new_path)


@app.post("/v1/operations/create-folder", response_model=OperationResult)
def create_folder(request: PathRequest):
    return executor.create_folder(request.path)


@app.post("/v1/operations/create-file", response_model=OperationResult)
def create_file(request: CreateFileRequest):
    return executor.create_file(request.path, request.content)


# ============================================================================
# Classification (no disk access)
# ============================================================================

@app.post("/v1/classify/extension", response_model=Dict[str, List[FileEntry]])
def classify_extension(request: FilesRequest):
    return organize_by_extension(request.files)


@app.post("/v1/classify/month", response_model=Dict[str, List[FileEntry]])
def classify_month(request: FilesRequest):
    return organize_by_month(request.files)


@app.post("/v1/classify/duplicates", response_model=List[DuplicateGroup])
def classify_duplicates(request: FilesRequest):
    groups = find_duplicates_by_size(request.files)
    return [DuplicateGroup(size=size, files=files) for size, files in groups.items()]


@app.post("/v1/classify/largest", response_model=List[FileEntry])
def classify_largest(request: LargestRequest):
    return find_largest_files(request.files, limit=request.limit)


@app.post("/v1/classify/categories", response_model=Dict[str, List[FileEntry]])
def classify_categories(request: FilesRequest):
    return fallback_organization(request.files)


@app.post("/v1/classify/similar", response_model=List[FileEntry])
def classify_similar(request: SimilarRequest):
    """Files related to ``target`` by extension or shared name tokens."""
    return find_similar_files(request.files, request.target)


@app.post("/v1/classify/summary")
def classify_summary(request: FilesRequest):
    return summarize_files(request.files)


# ============================================================================
# Language model suggestions
# ============================================================================

@app.post("/v1/ai/organize", response_model=Dict[str, List[FileEntry]])
def ai_organize(request: OrganizeRequest):
    """Suggested grouping; the category fallback when the model is unavailable."""
    return get_organizer().suggest_organization(request.files, request.query)


@app.post("/v1/ai/projects", response_model=Dict[str, List[FileEntry]])
def ai_projects(request: FilesRequest):
    return get_organizer().detect_projects(request.files)


@app.post("/v1/ai/renames", response_model=List[RenameSuggestion])
def ai_renames(request: FilesRequest):
    return get_organizer().suggest_renames(request.files)


# ============================================================================
# Server Entry Point
# ============================================================================

def run_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = False):
    """Start the API server."""
    import uvicorn
    logger.info(f"Starting TidyDesk API on {host}:{port}")
    uvicorn.run("tidydesk.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    run_server(settings.api.host, settings.api.port)
