"""Operation descriptors and batch results."""

from pathlib import Path
from typing import Annotated, Any, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import ErrorKind, InvalidOperationError


def ensure_non_blank_path(value: Any) -> Any:
    """Reject empty or whitespace-only path strings; ``Path("")`` means the working directory."""
    if isinstance(value, str) and not value.strip():
        raise ValueError("path must not be empty")
    return value


OperationPath = Annotated[Path, BeforeValidator(ensure_non_blank_path)]


class _OperationBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Move(_OperationBase):
    """Move ``source`` to ``destination``."""
    type: Literal["move"] = "move"
    source: OperationPath
    destination: OperationPath


class Copy(_OperationBase):
    """Recursively copy ``source`` to ``destination``."""
    type: Literal["copy"] = "copy"
    source: OperationPath
    destination: OperationPath


class Delete(_OperationBase):
    """Recursively delete ``path``."""
    type: Literal["delete"] = "delete"
    path: OperationPath


class Rename(_OperationBase):
    """Rename ``old_path`` to ``new_path``."""
    type: Literal["rename"] = "rename"
    old_path: OperationPath
    new_path: OperationPath


class CreateFolder(_OperationBase):
    """Create ``path`` and any missing parents."""
    type: Literal["create_folder"] = "create_folder"
    path: OperationPath


class CreateFile(_OperationBase):
    """Write ``content`` to ``path``, replacing what was there."""
    type: Literal["create_file"] = "create_file"
    path: OperationPath
    content: str = ""


Operation = Annotated[
    Union[Move, Copy, Delete, Rename, CreateFolder, CreateFile],
    Field(discriminator="type"),
]

OPERATION_TYPES = ("move", "copy", "delete", "rename", "create_folder", "create_file")

_operation_adapter = TypeAdapter(Operation)


def parse_operation(data: Any) -> Operation:
    """
    Validate an untrusted operation descriptor.

    Raises:
        InvalidOperationError: unknown ``type`` tag, missing or extra fields
    """
    if isinstance(data, _OperationBase):
        return data
    try:
        return _operation_adapter.validate_python(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'operation'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidOperationError(f"Invalid operation: {details}") from e


def describe_operation(operation: Operation) -> str:
    """One-line text for logs and previews."""
    if isinstance(operation, (Move, Copy)):
        return f"{operation.type} {operation.source} -> {operation.destination}"
    if isinstance(operation, Rename):
        return f"rename {operation.old_path} -> {operation.new_path}"
    return f"{operation.type} {operation.path}"


class OperationResult(BaseModel):
    """Outcome of one operation.

    ``operation`` is None only when the descriptor could not be parsed; the
    untrusted input is kept in ``raw`` instead.
    """
    operation: Optional[Operation] = None
    raw: Any = None
    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


class BatchReport(BaseModel):
    """Outcome of a batch, results in input order."""
    total: int
    successful: int
    failed: int
    results: List[OperationResult]

    @classmethod
    def from_results(cls, results: Sequence[OperationResult]) -> "BatchReport":
        """Tally the counts from the results."""
        results = list(results)
        successful = sum(1 for r in results if r.success)
        return cls(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=results,
        )

    @property
    def failures(self) -> List[OperationResult]:
        return [r for r in self.results if not r.success]
