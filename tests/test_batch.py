"""
Tests for the operation executor and the batch runner.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tidydesk.batch import (
    BatchReport,
    Copy,
    CreateFile,
    CreateFolder,
    Delete,
    ErrorKind,
    InvalidOperationError,
    Move,
    Rename,
    describe_operation,
    execute_operation,
    parse_operation,
    run_batch,
)
from tidydesk.batch import executor


def assert_report_invariants(report: BatchReport, operations: list):
    assert report.total == len(operations)
    assert report.successful + report.failed == report.total
    assert len(report.results) == report.total
    assert report.successful == sum(1 for r in report.results if r.success)


# ============================================================================
# Operation descriptors
# ============================================================================

class TestParseOperation:

    @pytest.mark.parametrize("data,expected_type", [
        ({"type": "move", "source": "/a", "destination": "/b"}, Move),
        ({"type": "copy", "source": "/a", "destination": "/b"}, Copy),
        ({"type": "delete", "path": "/a"}, Delete),
        ({"type": "rename", "old_path": "/a", "new_path": "/b"}, Rename),
        ({"type": "create_folder", "path": "/a"}, CreateFolder),
        ({"type": "create_file", "path": "/a", "content": "x"}, CreateFile),
    ])
    def test_valid_descriptors(self, data, expected_type):
        operation = parse_operation(data)
        assert isinstance(operation, expected_type)
        assert operation.type == data["type"]

    @pytest.mark.parametrize("data", [
        {"type": "explode", "path": "/a"},
        {"type": "move", "source": "/a"},
        {"type": "delete", "path": "/a", "force": True},
        {"path": "/a"},
        "delete /a",
        None,
    ])
    def test_invalid_descriptors(self, data):
        with pytest.raises(InvalidOperationError):
            parse_operation(data)

    def test_create_file_content_defaults_to_empty(self):
        operation = parse_operation({"type": "create_file", "path": "/a"})
        assert operation.content == ""

    @pytest.mark.parametrize("data", [
        {"type": "delete", "path": ""},
        {"type": "delete", "path": "   "},
        {"type": "move", "source": "", "destination": "/b"},
        {"type": "copy", "source": "/a", "destination": ""},
        {"type": "rename", "old_path": "/a", "new_path": " "},
        {"type": "create_folder", "path": ""},
        {"type": "create_file", "path": "", "content": "x"},
    ])
    def test_blank_paths_are_rejected(self, data):
        with pytest.raises(InvalidOperationError, match="path must not be empty"):
            parse_operation(data)

    def test_operations_are_immutable(self):
        operation = Delete(path="/a")
        with pytest.raises(Exception):
            operation.path = Path("/b")

    def test_describe_operation(self):
        assert describe_operation(Move(source="/a", destination="/b")) == "move /a -> /b"
        assert describe_operation(Rename(old_path="/a", new_path="/b")) == "rename /a -> /b"
        assert describe_operation(CreateFolder(path="/a")) == "create_folder /a"


# ============================================================================
# Executor
# ============================================================================

class TestExecutor:

    def test_move(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")

        result = execute_operation(Move(source=tmp_path / "a.txt", destination=tmp_path / "b.txt"))

        assert result.success
        assert result.error is None
        assert (tmp_path / "b.txt").read_text() == "a"

    def test_rename_uses_move(self, tmp_path):
        (tmp_path / "dir").mkdir()

        result = execute_operation(Rename(old_path=tmp_path / "dir", new_path=tmp_path / "renamed"))

        assert result.success
        assert (tmp_path / "renamed").is_dir()

    def test_missing_source_is_not_found(self, tmp_path):
        result = execute_operation(Move(source=tmp_path / "nope", destination=tmp_path / "b"))

        assert not result.success
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert "nope" in result.error

    def test_rename_onto_directory_is_collision(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "dir").mkdir()
        (tmp_path / "dir" / "child").write_text("c")

        result = execute_operation(Rename(old_path=tmp_path / "a.txt", new_path=tmp_path / "dir"))

        assert not result.success
        assert result.error_kind == ErrorKind.ALREADY_EXISTS

    def test_create_folder_twice(self, tmp_path):
        operation = CreateFolder(path=tmp_path / "x" / "y")

        first = execute_operation(operation)
        second = execute_operation(operation)

        assert first.success and second.success

    def test_create_folder_over_file(self, tmp_path):
        (tmp_path / "x").write_text("file")

        result = execute_operation(CreateFolder(path=tmp_path / "x"))

        assert not result.success
        assert result.error_kind == ErrorKind.ALREADY_EXISTS

    def test_create_file(self, tmp_path):
        result = execute_operation(CreateFile(path=tmp_path / "a" / "b.txt", content="hi"))

        assert result.success
        assert (tmp_path / "a" / "b.txt").read_text() == "hi"

    def test_create_file_under_a_file(self, tmp_path):
        (tmp_path / "plain").write_text("not a folder")

        result = execute_operation(CreateFile(path=tmp_path / "plain" / "b.txt"))

        assert not result.success
        assert result.error_kind == ErrorKind.IO_ERROR
        assert (tmp_path / "plain").read_text() == "not a folder"

    def test_copy_into_itself_is_invalid(self, tmp_path):
        (tmp_path / "src").mkdir()

        result = execute_operation(Copy(source=tmp_path / "src", destination=tmp_path / "src" / "inner"))

        assert not result.success
        assert result.error_kind == ErrorKind.INVALID_OPERATION

    def test_invalid_descriptor_is_reported(self):
        raw = {"type": "shred", "path": "/a"}

        result = execute_operation(raw)

        assert not result.success
        assert result.operation is None
        assert result.raw == raw
        assert result.error_kind == ErrorKind.INVALID_OPERATION

    def test_unexpected_errors_become_io_errors(self, tmp_path, monkeypatch):
        def broken(path, parents=True):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(executor, "create_directory", broken)

        result = execute_operation(CreateFolder(path=tmp_path / "x"))

        assert not result.success
        assert result.error_kind == ErrorKind.IO_ERROR
        assert result.error == "disk on fire"

    def test_single_call_variants(self, tmp_path):
        assert executor.create_folder(tmp_path / "d").success
        assert executor.create_file(tmp_path / "d" / "f.txt", "data").success
        assert executor.copy(tmp_path / "d", tmp_path / "e").success
        assert executor.move(tmp_path / "e", tmp_path / "g").success
        assert executor.rename(tmp_path / "g" / "f.txt", tmp_path / "g" / "h.txt").success
        assert executor.delete(tmp_path / "d").success

        assert (tmp_path / "g" / "h.txt").read_text() == "data"
        assert not (tmp_path / "d").exists()
        assert not (tmp_path / "e").exists()

    def test_single_call_with_bad_argument_does_not_raise(self):
        result = executor.delete(None)

        assert not result.success
        assert result.error_kind == ErrorKind.INVALID_OPERATION

    @pytest.mark.parametrize("data", [
        {"type": "delete", "path": ""},
        {"type": "move", "source": "", "destination": "elsewhere"},
        {"type": "copy", "source": "", "destination": "elsewhere"},
    ])
    def test_blank_path_leaves_working_directory_alone(self, tmp_path, monkeypatch, data):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "keep.txt").write_text("keep")
        (tmp_path / "sub").mkdir()

        result = execute_operation(data)

        assert not result.success
        assert result.error_kind == ErrorKind.INVALID_OPERATION
        assert result.raw == data
        assert sorted(p.name for p in tmp_path.iterdir()) == ["keep.txt", "sub"]


# ============================================================================
# Batch runner
# ============================================================================

class TestRunBatch:

    def test_end_to_end_scenario(self, tmp_path):
        x = tmp_path / "x"
        y = tmp_path / "y"
        operations = [
            CreateFolder(path=x),
            CreateFile(path=x / "a.txt", content="hello"),
            Copy(source=x, destination=y),
            Delete(path=x),
        ]

        report = run_batch(operations)

        assert_report_invariants(report, operations)
        assert (report.total, report.successful, report.failed) == (4, 4, 0)
        assert not x.exists()
        assert (y / "a.txt").read_text() == "hello"

    def test_results_keep_input_order(self, tmp_path):
        operations = [
            CreateFolder(path=tmp_path / "one"),
            Delete(path=tmp_path / "missing"),
            CreateFolder(path=tmp_path / "two"),
        ]

        report = run_batch(operations)

        assert [r.operation for r in report.results] == operations
        assert [r.success for r in report.results] == [True, False, True]

    @pytest.mark.parametrize("failing_first", [True, False])
    def test_failure_does_not_stop_batch(self, tmp_path, failing_first):
        (tmp_path / "valid.txt").write_text("ok")
        bad = Move(source=tmp_path / "missing.txt", destination=tmp_path / "elsewhere.txt")
        good = Copy(source=tmp_path / "valid.txt", destination=tmp_path / "copy.txt")
        operations = [bad, good] if failing_first else [good, bad]

        report = run_batch(operations)

        assert_report_invariants(report, operations)
        assert report.successful == 1
        assert report.failed == 1
        assert (tmp_path / "copy.txt").read_text() == "ok"

    def test_all_failing_batch_is_well_formed(self, tmp_path):
        operations = [Delete(path=tmp_path / f"missing{i}") for i in range(3)]

        report = run_batch(operations)

        assert_report_invariants(report, operations)
        assert report.successful == 0
        assert report.failed == 3
        assert len(report.failures) == 3

    def test_empty_batch(self):
        report = run_batch([])
        assert (report.total, report.successful, report.failed, report.results) == (0, 0, 0, [])

    def test_raw_descriptors_are_validated_one_by_one(self, tmp_path):
        operations = [
            {"type": "create_folder", "path": str(tmp_path / "a")},
            {"type": "teleport", "path": str(tmp_path / "a")},
            {"type": "create_file", "path": str(tmp_path / "a" / "b.txt")},
        ]

        report = run_batch(operations)

        assert_report_invariants(report, operations)
        assert [r.success for r in report.results] == [True, False, True]
        assert report.results[1].error_kind == ErrorKind.INVALID_OPERATION
        assert (tmp_path / "a" / "b.txt").exists()

    def test_operations_run_sequentially(self, tmp_path):
        # later operations depend on earlier ones
        operations = [
            CreateFolder(path=tmp_path / "a"),
            Move(source=tmp_path / "a", destination=tmp_path / "b"),
            CreateFile(path=tmp_path / "b" / "c.txt", content="c"),
            Rename(old_path=tmp_path / "b" / "c.txt", new_path=tmp_path / "b" / "d.txt"),
        ]

        report = run_batch(operations)

        assert report.failed == 0
        assert (tmp_path / "b" / "d.txt").read_text() == "c"

    def test_cancellation_reports_remaining_operations(self, tmp_path):
        operations = [CreateFolder(path=tmp_path / f"d{i}") for i in range(4)]
        seen = []

        report = run_batch(
            operations,
            should_cancel=lambda: len(seen) >= 2,
            on_result=lambda index, result: seen.append(index),
        )

        assert_report_invariants(report, operations)
        assert seen == [0, 1, 2, 3]
        assert [r.success for r in report.results] == [True, True, False, False]
        assert report.results[3].error_kind == ErrorKind.CANCELLED
        assert not (tmp_path / "d2").exists()

    def test_callback_errors_do_not_abort(self, tmp_path):
        def explode(index, result):
            raise RuntimeError("callback bug")

        operations = [CreateFolder(path=tmp_path / "a"), CreateFolder(path=tmp_path / "b")]

        report = run_batch(operations, on_result=explode)

        assert report.successful == 2

    def test_failing_cancel_check_cancels_the_rest(self, tmp_path):
        def ui_gone():
            raise RuntimeError("ui gone")

        operations = [CreateFolder(path=tmp_path / "a"), CreateFolder(path=tmp_path / "b")]

        report = run_batch(operations, should_cancel=ui_gone)

        assert_report_invariants(report, operations)
        assert [r.error_kind for r in report.results] == [ErrorKind.CANCELLED, ErrorKind.CANCELLED]
        assert not (tmp_path / "a").exists()

    def test_report_serializes_to_plain_data(self, tmp_path):
        report = run_batch([Delete(path=tmp_path / "missing")])

        data = report.model_dump(mode="json")

        assert data["total"] == 1
        assert data["results"][0]["operation"] == {"type": "delete", "path": str(tmp_path / "missing")}
        assert data["results"][0]["error_kind"] == "not_found"
