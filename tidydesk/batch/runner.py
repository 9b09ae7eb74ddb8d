"""Batch runner: execute an ordered list of operations and report on each."""

import logging
from typing import Any, Callable, Iterable, List, Optional

from .errors import ErrorKind
from .executor import execute_operation
from .models import BatchReport, OperationResult, parse_operation

logger = logging.getLogger(__name__)


def _cancelled_result(operation: Any) -> OperationResult:
    try:
        parsed, raw = parse_operation(operation), None
    except Exception:
        parsed, raw = None, operation
    return OperationResult(
        operation=parsed,
        raw=raw,
        success=False,
        error="cancelled",
        error_kind=ErrorKind.CANCELLED,
    )


def run_batch(
    operations: Iterable[Any],
    should_cancel: Optional[Callable[[], bool]] = None,
    on_result: Optional[Callable[[int, OperationResult], None]] = None,
) -> BatchReport:
    """
    Run operations strictly in order, one at a time.

    A failing operation never stops the batch; every operation gets a
    result at the same index in the report.

    Args:
        operations: Operation models or untrusted descriptor dicts
        should_cancel: Checked before each operation; once it returns True (or raises)
            the remaining operations are reported as cancelled
        on_result: Called with (index, result) after each operation

    Returns:
        BatchReport
    """
    operations = list(operations)
    results: List[OperationResult] = []
    cancelled = False

    for index, operation in enumerate(operations):
        if not cancelled and should_cancel is not None:
            try:
                cancelled = bool(should_cancel())
            except Exception as e:
                logger.error(f"Cancel check failed before operation {index + 1}, cancelling: {e}")
                cancelled = True
            if cancelled:
                logger.info(f"Batch cancelled before operation {index + 1}/{len(operations)}")

        if cancelled:
            result = _cancelled_result(operation)
        else:
            result = execute_operation(operation)

        results.append(result)
        if on_result is not None:
            try:
                on_result(index, result)
            except Exception as e:
                logger.error(f"Result callback failed for operation {index + 1}: {e}")

    report = BatchReport.from_results(results)
    logger.info(
        f"Batch finished: {report.successful}/{report.total} succeeded, {report.failed} failed"
    )
    return report
