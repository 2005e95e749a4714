from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional


# --- Data models ---
@dataclass(frozen=True)
class Story:
    title: str
    score: int
    by: str
    time: int
    url: Optional[str] = None
    descendants: int = 0
    id: Optional[int] = None

    @classmethod
    def from_json(cls, data: Any) -> "Story":
        """Build a Story from an item payload, ignoring unknown fields."""
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        try:
            title = data["title"]
            score = data["score"]
            by = data["by"]
            posted = data["time"]
        except KeyError as e:
            raise ValueError(f"missing field {e}") from None
        if not isinstance(title, str) or not isinstance(by, str):
            raise ValueError("title and by must be strings")
        url = data.get("url")
        if url is not None and not isinstance(url, str):
            raise ValueError("url must be a string")
        # Absent or null descendants means no comments yet
        descendants = data.get("descendants")
        if descendants is None:
            descendants = 0
        item_id = data.get("id")
        checks = [("score", score), ("time", posted), ("descendants", descendants)]
        if item_id is not None:
            checks.append(("id", item_id))
        for name, value in checks:
            if not _is_unsigned(value):
                raise ValueError(f"{name} must be a non-negative integer")
        return cls(
            title=title,
            score=score,
            by=by,
            time=posted,
            url=url,
            descendants=descendants,
            id=item_id,
        )

    @property
    def domain(self) -> Optional[str]:
        if not self.url:
            return None
        parts = self.url.split("/")
        return parts[2] if len(parts) > 2 and parts[2] else "unknown"


def format_age(timestamp: int, now: Optional[float] = None) -> str:
    """Compact age of a Unix timestamp: ``42m``, ``5h`` or ``3d``."""
    if now is None:
        now = time.time()
    diff = max(0, int(now) - timestamp)
    if diff < 3600:
        return f"{diff // 60}m"
    if diff < 86400:
        return f"{diff // 3600}h"
    return f"{diff // 86400}d"


def _is_unsigned(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
