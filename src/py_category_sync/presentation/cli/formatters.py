from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

__all__ = [
    "dataclass_to_dict",
    "humanize_since",
]


def dataclass_to_dict(obj: Any) -> Any:
    """Convert dataclasses (and nested containers) into JSON-ready values."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: dataclass_to_dict(v) for k, v in asdict(obj).items()}
    if isinstance(obj, list | tuple):
        return [dataclass_to_dict(i) for i in obj]
    if isinstance(obj, dict):
        return {k: dataclass_to_dict(v) for k, v in obj.items()}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def humanize_since(then: datetime | None, now: datetime) -> str:
    """Render the age of a timestamp: never, just now, 3h ago, 2 days ago."""
    if then is None:
        return "never"
    if then.tzinfo is None:
        then = then.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    hours = int((now - then).total_seconds() // 3600)
    if hours < 1:
        return "just now"
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    return "1 day ago" if days == 1 else f"{days} days ago"
