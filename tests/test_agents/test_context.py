"""Tests for workspace context loading."""

import os
from unittest.mock import patch

import pytest

from goclaw.agents.context import ContextFile, ContextLoader, build_context_prompt


class TestContextLoader:
    """Tests for ContextLoader."""

    def test_loads_in_priority_order(self, workspace):
        """Test files come back in fixed order regardless of creation order."""
        (workspace / "memory").mkdir()
        (workspace / "memory" / "MEMORY.md").write_text("mem")
        (workspace / "SOUL.md").write_text("soul")
        (workspace / "IDENTITY.md").write_text("id")

        files = ContextLoader(workspace).load()

        assert files == [
            ContextFile("IDENTITY.md", "id"),
            ContextFile("SOUL.md", "soul"),
            ContextFile("memory/MEMORY.md", "mem"),
        ]

    def test_missing_files_skipped(self, workspace):
        """Test absent files are silently omitted."""
        (workspace / "SOUL.md").write_text("soul")
        assert [f.logical_path for f in ContextLoader(workspace).load()] == ["SOUL.md"]

    def test_missing_workspace(self, tmp_path):
        """Test a nonexistent workspace yields no files."""
        assert ContextLoader(tmp_path / "nowhere").load() == []

    def test_tilde_expansion(self, tmp_path):
        """Test a leading tilde resolves to the home directory."""
        with patch.dict(os.environ, {"HOME": str(tmp_path)}):
            loader = ContextLoader("~/ws")
        assert loader.workspace_dir == tmp_path / "ws"

    def test_load_file(self, workspace):
        """Test loading a single named file."""
        (workspace / "IDENTITY.md").write_text("me")
        assert ContextLoader(workspace).load_file("IDENTITY.md") == ContextFile("IDENTITY.md", "me")

    def test_load_file_missing_raises(self, workspace):
        """Test load_file does not swallow missing files."""
        with pytest.raises(OSError):
            ContextLoader(workspace).load_file("IDENTITY.md")

    def test_reload_sees_edits(self, workspace):
        """Test every load re-reads from disk."""
        loader = ContextLoader(workspace)
        (workspace / "IDENTITY.md").write_text("v1")
        assert loader.load()[0].content == "v1"
        (workspace / "IDENTITY.md").write_text("v2")
        assert loader.load()[0].content == "v2"


class TestBuildContextPrompt:
    """Tests for build_context_prompt."""

    def test_empty(self):
        """Test no files yields empty string."""
        assert build_context_prompt([]) == ""

    def test_format(self):
        """Test exact fragment layout."""
        prompt = build_context_prompt([
            ContextFile("IDENTITY.md", "I am X"),
            ContextFile("SOUL.md", "Be kind"),
        ])
        assert prompt == (
            "## Workspace 上下文文件\n"
            "\n"
            "以下文件已加载，提供了我的身份和记忆：\n"
            "\n"
            "### IDENTITY.md\n"
            "\n"
            "I am X\n"
            "\n"
            "### SOUL.md\n"
            "\n"
            "Be kind\n"
        )
