"""Workspace context files injected into the system prompt."""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..core.config import expand_path

logger = logging.getLogger(__name__)

# Priority order
CONTEXT_FILES = ("IDENTITY.md", "SOUL.md", "memory/MEMORY.md")


@dataclass(frozen=True)
class ContextFile:
    """A loaded workspace file.

    Attributes:
        logical_path: Path relative to the workspace, e.g. memory/MEMORY.md
        content: File text
    """
    logical_path: str
    content: str


class ContextLoader:
    """Reads identity, persona and memory files from the workspace.

    Files are re-read on every call so edits made between turns, including
    the model's own update_memory writes, are picked up immediately.
    """

    def __init__(self, workspace: str | Path) -> None:
        self.workspace_dir = Path(expand_path(str(workspace)))

    def load(self) -> list[ContextFile]:
        """Load every context file that exists; missing files are skipped."""
        files = []
        for logical_path in CONTEXT_FILES:
            path = self.workspace_dir / logical_path
            try:
                content = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Skipping context file {path}: {e}")
                continue
            files.append(ContextFile(logical_path, content))

        logger.debug(f"Loaded {len(files)} context files from {self.workspace_dir}")
        return files

    def load_file(self, logical_path: str) -> ContextFile:
        """Load one workspace file.

        Raises:
            OSError: If the file cannot be read
        """
        path = self.workspace_dir / logical_path
        return ContextFile(logical_path, path.read_text(encoding="utf-8"))


def build_context_prompt(files: list[ContextFile]) -> str:
    """Format loaded files as the markdown fragment appended to the system prompt.

    Returns an empty string when no files were loaded.
    """
    if not files:
        return ""

    sections = [
        "## Workspace 上下文文件",
        "",
        "以下文件已加载，提供了我的身份和记忆：",
        "",
    ]
    for file in files:
        sections.extend([f"### {file.logical_path}", "", file.content, ""])
    return "\n".join(sections)
