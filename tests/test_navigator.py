"""
Tests for directory scanning, file preview and settings loading.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tidydesk.filesystem.navigator import format_size, get_directory_tree, read_file_preview, scan_directory
from tidydesk.settings import OllamaSettings, OrganizerSettings, Settings


@pytest.fixture
def folder(tmp_path):
    (tmp_path / "Beta.TXT").write_text("beta")
    (tmp_path / "alpha.md").write_text("# alpha")
    (tmp_path / "zeta").mkdir()
    (tmp_path / "Archive").mkdir()
    (tmp_path / "README").write_text("readme")
    (tmp_path / ".hidden").write_text("secret")
    return tmp_path


# ============================================================================
# scan_directory
# ============================================================================

class TestScanDirectory:

    def test_entries_sorted_directories_first(self, folder):
        entries = scan_directory(folder)

        assert [e.name for e in entries] == ["Archive", "zeta", "alpha.md", "Beta.TXT", "README"]

    def test_entry_fields(self, folder):
        by_name = {e.name: e for e in scan_directory(folder)}

        beta = by_name["Beta.TXT"]
        assert beta.extension == ".txt"
        assert beta.size == 4
        assert beta.path == str(folder / "Beta.TXT")
        assert not beta.is_directory

        assert by_name["README"].extension is None
        assert by_name["zeta"].is_directory
        assert by_name["zeta"].extension is None
        assert by_name["zeta"].size == 0

    def test_hidden_files(self, folder):
        assert ".hidden" not in [e.name for e in scan_directory(folder)]
        assert ".hidden" in [e.name for e in scan_directory(folder, show_hidden=True)]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            scan_directory(tmp_path / "nope")

    def test_not_a_directory(self, folder):
        with pytest.raises(NotADirectoryError):
            scan_directory(folder / "README")


# ============================================================================
# Preview and tree
# ============================================================================

class TestPreview:

    def test_text_file(self, folder):
        assert read_file_preview(folder / "alpha.md") == {"type": "text", "content": "# alpha"}

    def test_text_is_truncated(self, tmp_path):
        (tmp_path / "long.txt").write_text("x" * 100)
        assert read_file_preview(tmp_path / "long.txt", max_bytes=10)["content"] == "x" * 10

    def test_binary_file(self, folder):
        preview = read_file_preview(folder / "README")
        assert preview == {"type": "binary", "content": "Binary file: README"}

    def test_missing_text_file(self, tmp_path):
        assert read_file_preview(tmp_path / "gone.txt")["type"] == "error"

    def test_tree(self, folder):
        lines = get_directory_tree(folder)
        assert lines[0] == "├── Archive/"
        assert lines[-1].startswith("└── README")


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (512, "512 B"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (5 * 1024 ** 2, "5 MB"),
    (3 * 1024 ** 3, "3 GB"),
])
def test_format_size(size, expected):
    assert format_size(size) == expected


# ============================================================================
# Settings
# ============================================================================

class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ["OLLAMA_MODEL", "LARGEST_FILES_LIMIT", "TIDYDESK_AI_ENABLED"]:
            monkeypatch.delenv(name, raising=False)

        loaded = Settings.from_env()

        assert loaded.organizer.largest_files_limit == 10
        assert loaded.organizer.no_extension_key == "no-extension"
        assert loaded.ollama.enabled is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_MODEL", "qwen2.5")
        monkeypatch.setenv("OLLAMA_TIMEOUT", "5")
        monkeypatch.setenv("TIDYDESK_AI_ENABLED", "false")
        monkeypatch.setenv("LARGEST_FILES_LIMIT", "25")

        assert OllamaSettings.from_env().model == "qwen2.5"
        assert OllamaSettings.from_env().timeout == 5.0
        assert OllamaSettings.from_env().enabled is False
        assert OrganizerSettings.from_env().largest_files_limit == 25

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("LARGEST_FILES_LIMIT", "many")

        with pytest.raises(ValueError, match="LARGEST_FILES_LIMIT"):
            OrganizerSettings.from_env()
