"""Notice entity.

Notices are written by department administrators. The assistant only reads
them.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

ALL_DEPARTMENTS = "all"


class NoticePriority(Enum):
    """Priority of a notice."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class Notice:
    """An announcement scoped to one department or to all of them.

    Attributes:
        id: Notice identifier.
        title: Headline.
        content: Body text.
        department: Department code, or "all".
        priority: Notice priority.
        created_at: Publication time (timezone-aware).
        author: Display name of the author.
    """

    id: int
    title: str
    content: str
    department: str
    priority: NoticePriority
    created_at: datetime
    author: str

    @property
    def is_high_priority(self) -> bool:
        return self.priority == NoticePriority.HIGH

    def to_dict(self) -> dict[str, Any]:
        """Convert notice to a JSON-compatible dict."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "department": self.department,
            "priority": self.priority.value,
            "createdAt": self.created_at.isoformat(),
            "author": self.author,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Notice":
        """Create notice from a stored dict.

        Unknown priorities are read as medium, which is what the notice
        form defaults to.
        """
        created_at = data["createdAt"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)

        try:
            priority = NoticePriority(data.get("priority", "medium"))
        except ValueError:
            priority = NoticePriority.MEDIUM

        return cls(
            id=int(data["id"]),
            title=data["title"],
            content=data.get("content", ""),
            department=data["department"],
            priority=priority,
            created_at=created_at,
            author=data.get("author", ""),
        )


__all__ = ["ALL_DEPARTMENTS", "Notice", "NoticePriority"]
