"""Batch file-operation engine."""

from .errors import ErrorKind, InvalidOperationError, classify_error
from .models import (
    Move,
    Copy,
    Delete,
    Rename,
    CreateFolder,
    CreateFile,
    Operation,
    OPERATION_TYPES,
    OperationResult,
    BatchReport,
    parse_operation,
    ensure_non_blank_path,
    describe_operation,
)
from .executor import execute_operation
from .runner import run_batch
from .planner import plan_moves, plan_renames, safe_folder_name

__all__ = [
    # Errors
    "ErrorKind",
    "InvalidOperationError",
    "classify_error",
    # Models
    "Move",
    "Copy",
    "Delete",
    "Rename",
    "CreateFolder",
    "CreateFile",
    "Operation",
    "OPERATION_TYPES",
    "OperationResult",
    "BatchReport",
    "parse_operation",
    "ensure_non_blank_path",
    "describe_operation",
    # Execution
    "execute_operation",
    "run_batch",
    # Planning
    "plan_moves",
    "plan_renames",
    "safe_folder_name",
]
