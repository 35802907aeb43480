"""Workspace memory tools.

Long-term memory lives as markdown in the workspace: memory/MEMORY.md
plus exported conversations under memory/conversations/. These tools
let the model search, read and extend it.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..core.exceptions import ToolExecutionError
from ..observability.decorators import traced_tool
from ..services.conversation_export import CONVERSATIONS_DIR, export_conversation
from .base import BaseTool

if TYPE_CHECKING:
    from ..services.memory_store import MemoryStore

logger = logging.getLogger(__name__)

MEMORY_DIR = "memory"
MEMORY_FILE = "MEMORY.md"
DEFAULT_SECTION = "其他"


class MemorySearchTool(BaseTool):
    """Case-insensitive substring search over memory files."""

    name = "memory_search"
    description = "在记忆文件中搜索相关信息。搜索 MEMORY.md 和 memory/conversations/*.md"

    def __init__(self, workspace_dir: Path) -> None:
        self.workspace_dir = Path(workspace_dir)

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        query = self.require_str(args, "query")
        matches = self.search(query)
        if not matches:
            return f"未找到关于 '{query}' 的记忆"
        listing = "\n".join(f"- {name}" for name in matches)
        return f"找到 {len(matches)} 条相关记忆：\n{listing}"

    def search(self, query: str) -> list[str]:
        """Return names of memory files containing `query`, ignoring case."""
        needle = query.lower()
        memory_dir = self.workspace_dir / MEMORY_DIR
        matches = []

        if _contains(memory_dir / MEMORY_FILE, needle):
            matches.append(MEMORY_FILE)

        conversations_dir = self.workspace_dir / CONVERSATIONS_DIR
        if conversations_dir.is_dir():
            for path in sorted(conversations_dir.glob("*.md")):
                if path.is_file() and _contains(path, needle):
                    matches.append(path.name)

        return matches

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "搜索关键词或问题",
                }
            },
            "required": ["query"],
        }


class MemoryGetTool(BaseTool):
    """Read one memory file."""

    name = "memory_get"
    description = "读取指定记忆文件的完整内容"

    def __init__(self, workspace_dir: Path) -> None:
        self.workspace_dir = Path(workspace_dir)

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        filename = self.require_str(args, "filename")
        path = self.workspace_dir / MEMORY_DIR / filename
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise ToolExecutionError(self.name, f"无法读取文件 {filename}: {e}") from e

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "filename": {
                    "type": "string",
                    "description": "文件名，例如 MEMORY.md 或 conversations/xxx.md",
                }
            },
            "required": ["filename"],
        }


class UpdateMemoryTool(BaseTool):
    """Append a timestamped section to MEMORY.md."""

    name = "update_memory"
    description = "更新长期记忆文件 MEMORY.md，添加新的重要信息"

    def __init__(self, workspace_dir: Path) -> None:
        self.workspace_dir = Path(workspace_dir)

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        content = self.require_str(args, "content")
        section = self.optional_str(args, "section", DEFAULT_SECTION)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        entry = f"\n## {section}\n\n**时间**: {timestamp}\n\n{content}\n"
        memory_path = self.workspace_dir / MEMORY_DIR / MEMORY_FILE
        try:
            memory_path.parent.mkdir(parents=True, exist_ok=True)
            with memory_path.open("a", encoding="utf-8") as f:
                f.write(entry)
        except OSError as e:
            raise ToolExecutionError(self.name, f"写入 MEMORY.md 失败: {e}") from e

        logger.info(f"Appended section '{section}' to {memory_path}")
        return f"✓ 已更新 MEMORY.md [{section}]"

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "content": {
                    "type": "string",
                    "description": "要添加的内容",
                },
                "section": {
                    "type": "string",
                    "description": "目标章节（可选），例如：用户偏好、重要事项",
                },
            },
            "required": ["content"],
        }


class SaveConversationTool(BaseTool):
    """Export the persisted conversation to memory/conversations/."""

    name = "save_conversation"
    description = "保存当前对话到 markdown 文件，文件位于 memory/conversations/ 目录"

    def __init__(self, store: "MemoryStore", workspace_dir: Path) -> None:
        self.store = store
        self.workspace_dir = Path(workspace_dir)

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        title = self.optional_str(args, "title", "")
        path = export_conversation(self.store, self.workspace_dir, title or None)
        return f"对话已保存到 {path}"

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "对话的简短描述，用于生成文件名（可选）",
                }
            },
        }


def _contains(path: Path, needle: str) -> bool:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return needle in text.lower()
