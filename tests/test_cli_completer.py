"""Tests for FilehostCompleter."""

import pytest
from pathlib import Path
from unittest.mock import patch

from prompt_toolkit.document import Document

from cli.completer import FilehostCompleter
from cli.constants import COMMANDS


@pytest.fixture
def completer():
    """Create a FilehostCompleter instance."""
    return FilehostCompleter()


@pytest.fixture
def workdir(tmp_path):
    """
    Create a working directory with files to complete.

    Returns:
        Path to the temporary working directory
    """
    (tmp_path / "document.txt").write_text("content")
    (tmp_path / "data.csv").write_text("content")
    (tmp_path / ".hidden").write_text("content")
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "report.pdf").write_text("content")
    return tmp_path


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        """Empty input should suggest all commands."""
        completions = get_completions_list(completer, "")
        for cmd in COMMANDS:
            assert cmd in completions

    def test_partial_command_filters(self, completer):
        """Partial command should filter to matching commands."""
        completions = get_completions_list(completer, "d")
        assert "download" in completions
        assert "delete" in completions
        assert "upload" not in completions

    def test_command_completion_case_insensitive(self, completer):
        """Command completion should be case insensitive."""
        completions = get_completions_list(completer, "UP")
        assert completions == ["upload"]


class TestPathCompletion:
    """Tests for local path completion in the upload command."""

    def test_upload_shows_working_directory(self, completer, workdir):
        """After 'upload ', should show files and directories of the cwd."""
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload ")
        assert "document.txt" in completions
        assert "data.csv" in completions
        assert "docs/" in completions

    def test_hidden_files_need_a_dot(self, completer, workdir):
        """Hidden entries only appear once a dot is typed."""
        with patch.object(Path, "cwd", return_value=workdir):
            assert ".hidden" not in get_completions_list(completer, "upload ")
            assert ".hidden" in get_completions_list(completer, "upload .")

    def test_partial_name_filters(self, completer, workdir):
        """Typed prefix narrows the suggestions."""
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload do")
        assert completions == ["docs/", "document.txt"]

    def test_completes_inside_directory(self, completer, workdir):
        """A path with a slash completes inside that directory."""
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload docs/")
        assert completions == ["docs/report.pdf"]

    def test_already_typed_files_excluded(self, completer, workdir):
        """Files already on the line are not suggested again."""
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload document.txt ")
        assert "document.txt" not in completions
        assert "data.csv" in completions

    def test_missing_directory_yields_nothing(self, completer, workdir):
        with patch.object(Path, "cwd", return_value=workdir):
            assert get_completions_list(completer, "upload nowhere/") == []

    @pytest.mark.parametrize("line", ["download ", "delete ", "rename ", "list "])
    def test_other_commands_have_no_path_completion(self, completer, workdir, line):
        """Only upload reads local paths; the rest name server files."""
        with patch.object(Path, "cwd", return_value=workdir):
            assert get_completions_list(completer, line) == []
