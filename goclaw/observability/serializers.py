"""Helpers that turn call arguments and results into log-friendly text."""

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

MAX_DEPTH = 10


def safe_serialize(obj: Any, max_depth: int = MAX_DEPTH, current_depth: int = 0) -> Any:
    """Convert `obj` into something json.dumps accepts.

    Containers are walked recursively up to `max_depth`; objects with no
    JSON form fall back to str().
    """
    if current_depth > max_depth:
        return f"<max depth {max_depth} exceeded>"

    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value

    depth = current_depth + 1
    if is_dataclass(obj) and not isinstance(obj, type):
        return safe_serialize(asdict(obj), max_depth, depth)
    if isinstance(obj, dict):
        return {str(key): safe_serialize(value, max_depth, depth) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [safe_serialize(item, max_depth, depth) for item in obj]
    return str(obj)


def preview(obj: Any, limit: int = 300) -> str:
    """Render a compact one-line preview, truncated to `limit` characters."""
    if isinstance(obj, str):
        text = obj
    else:
        text = json.dumps(safe_serialize(obj), ensure_ascii=False, default=str)
    text = text.replace("\n", "\\n")
    return text[:limit] + "..." if len(text) > limit else text
