"""Single-operation executor.

``execute_operation`` never raises: whatever goes wrong is returned as a
failed :class:`OperationResult`.
"""

import logging
from pathlib import Path
from typing import Any

from ..filesystem.operations import (
    copy_tree,
    create_directory,
    create_file as write_file,
    delete_tree,
    move_path,
)
from .errors import InvalidOperationError, classify_error, describe_error
from .models import (
    Copy,
    CreateFile,
    CreateFolder,
    Delete,
    Move,
    Operation,
    OperationResult,
    Rename,
    describe_operation,
    parse_operation,
)

logger = logging.getLogger(__name__)


def _apply(operation: Operation) -> None:
    if isinstance(operation, Move):
        move_path(operation.source, operation.destination)
    elif isinstance(operation, Copy):
        copy_tree(operation.source, operation.destination)
    elif isinstance(operation, Delete):
        delete_tree(operation.path)
    elif isinstance(operation, Rename):
        move_path(operation.old_path, operation.new_path)
    elif isinstance(operation, CreateFolder):
        create_directory(operation.path)
    elif isinstance(operation, CreateFile):
        write_file(operation.path, operation.content)
    else:
        raise InvalidOperationError(f"Unsupported operation: {operation!r}")


def execute_operation(operation: Any) -> OperationResult:
    """
    Execute one operation.

    Args:
        operation: An Operation model or an untrusted descriptor dict

    Returns:
        OperationResult with success flag and error details
    """
    try:
        parsed = parse_operation(operation)
    except Exception as e:
        logger.warning(f"Rejected operation {operation!r}: {e}")
        return OperationResult(
            raw=operation,
            success=False,
            error=describe_error(e),
            error_kind=classify_error(e),
        )

    try:
        _apply(parsed)
    except Exception as e:
        message = describe_error(e)
        logger.warning(f"Failed: {describe_operation(parsed)}: {message}")
        return OperationResult(
            operation=parsed,
            success=False,
            error=message,
            error_kind=classify_error(e),
        )

    return OperationResult(operation=parsed, success=True)


# Single-call conveniences over execute_operation

def move(source: str | Path, destination: str | Path) -> OperationResult:
    return execute_operation({"type": "move", "source": source, "destination": destination})


def copy(source: str | Path, destination: str | Path) -> OperationResult:
    return execute_operation({"type": "copy", "source": source, "destination": destination})


def delete(path: str | Path) -> OperationResult:
    return execute_operation({"type": "delete", "path": path})


def rename(old_path: str | Path, new_path: str | Path) -> OperationResult:
    return execute_operation({"type": "rename", "old_path": old_path, "new_path": new_path})


def create_folder(path: str | Path) -> OperationResult:
    return execute_operation({"type": "create_folder", "path": path})


def create_file(path: str | Path, content: str = "") -> OperationResult:
    return execute_operation({"type": "create_file", "path": path, "content": content})
