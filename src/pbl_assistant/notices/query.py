"""Notice filtering by department, search text and recency."""

import logging
from datetime import UTC, datetime

from ..users import UserContext
from .models import ALL_DEPARTMENTS, Notice
from .store import NoticeStore

logger = logging.getLogger(__name__)

# Maximum notices the assistant reads out in one reply
ASSISTANT_NOTICE_LIMIT = 5

MY_DEPARTMENT = "my"


class NoticeQuery:
    """Read-only queries over a notice store."""

    def __init__(self, store: NoticeStore) -> None:
        """Initialize the query helper.

        Args:
            store: Notice store to read from.
        """
        self._store = store

    def for_department(
        self,
        department: str | None,
        limit: int = ASSISTANT_NOTICE_LIMIT,
    ) -> list[Notice]:
        """Get notices for a department, in stored order.

        A notice matches when it targets the department or all departments.
        No re-sorting happens here.

        Args:
            department: Department code, or None for no department.
            limit: Maximum number of notices to return.

        Returns:
            At most ``limit`` matching notices.

        Raises:
            StoreError: If the store cannot be read.
        """
        notices = self._store.list_notices()
        matching = [
            n for n in notices if n.department == ALL_DEPARTMENTS or n.department == department
        ]
        logger.debug(
            f"{len(matching)} of {len(notices)} notices match department {department!r}"
        )
        return matching[:limit]

    def browse(
        self,
        user: UserContext | None,
        department_filter: str = ALL_DEPARTMENTS,
        search: str = "",
    ) -> list[Notice]:
        """Get notices for the notice board, newest first.

        Args:
            user: Signed-in user. Anonymous users see nothing.
            department_filter: "all", "my", or a department code.
            search: Case-insensitive text matched against title, content
                    and author.

        Returns:
            Matching notices sorted by creation time, newest first.
        """
        if user is None:
            return []

        notices = self._store.list_notices()

        if department_filter == MY_DEPARTMENT:
            target = user.department
        elif department_filter != ALL_DEPARTMENTS:
            target = department_filter
        else:
            target = None

        if target is not None:
            notices = [
                n for n in notices if n.department == ALL_DEPARTMENTS or n.department == target
            ]

        if search:
            term = search.lower()
            notices = [
                n
                for n in notices
                if term in n.title.lower()
                or term in n.content.lower()
                or term in n.author.lower()
            ]

        return sorted(notices, key=lambda n: n.created_at, reverse=True)


def format_relative_date(timestamp: datetime, now: datetime | None = None) -> str:
    """Format a timestamp relative to now.

    Args:
        timestamp: Time to format. Naive values are taken as UTC.
        now: Reference time, defaults to the current time.

    Returns:
        "Just now", "5m ago", "3h ago", "2d ago", or "Oct 12, 2026" for
        anything a week or older.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    seconds = (now - timestamp).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"

    local = timestamp.astimezone(now.tzinfo)
    return f"{local.strftime('%b')} {local.day}, {local.year}"


__all__ = [
    "ASSISTANT_NOTICE_LIMIT",
    "MY_DEPARTMENT",
    "NoticeQuery",
    "format_relative_date",
]
