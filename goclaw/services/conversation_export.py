"""Export the persisted conversation to a markdown file in the workspace."""

import logging
import re
from datetime import datetime
from pathlib import Path

from ..prompts.template_renderer import render_template
from .memory_store import MemoryStore

logger = logging.getLogger(__name__)

CONVERSATIONS_DIR = Path("memory") / "conversations"
DEFAULT_TITLE = "对话记录"


def safe_title(title: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with a dash."""
    return re.sub(r"[^A-Za-z0-9_-]", "-", title)


def conversation_filename(title: str | None, now: datetime) -> str:
    """Build `<YYYYmmdd-HHMMSS>[-<safe title>].md`."""
    stamp = now.strftime("%Y%m%d-%H%M%S")
    if title:
        return f"{stamp}-{safe_title(title)}.md"
    return f"{stamp}.md"


def export_conversation(
    store: MemoryStore,
    workspace_dir: Path,
    title: str | None = None,
    now: datetime | None = None,
) -> Path:
    """Write the full session history as markdown under memory/conversations/.

    Args:
        store: Memory store to read history from
        workspace_dir: Workspace root
        title: Optional title used in the heading and filename
        now: Export time (defaults to the current time)

    Returns:
        Path of the written file

    Raises:
        OSError: If the directory or file cannot be written
        StorageError: If history cannot be read
    """
    now = now or datetime.now()
    conversations_dir = Path(workspace_dir) / CONVERSATIONS_DIR
    conversations_dir.mkdir(parents=True, exist_ok=True)

    messages = store.history(-1)
    content = render_template(
        "conversation.md.j2",
        title=title or DEFAULT_TITLE,
        exported_at=now,
        messages=messages,
    )

    path = conversations_dir / conversation_filename(title, now)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Saved conversation ({len(messages)} messages) to {path}")
    return path
