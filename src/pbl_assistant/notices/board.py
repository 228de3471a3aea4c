"""Notice board: browsing for everyone, publishing and deleting for admins."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from ..assistant.departments import DepartmentDirectory
from ..errors import PermissionDeniedError
from ..users import UserContext, UserProvider, is_admin
from .models import ALL_DEPARTMENTS, Notice, NoticePriority
from .query import MY_DEPARTMENT, NoticeQuery, format_relative_date
from .store import WritableNoticeStore

logger = logging.getLogger(__name__)

NO_NOTICES_FOUND = "No notices found."


class NoticeBoard:
    """Notice board actions on behalf of the current user."""

    def __init__(
        self,
        store: WritableNoticeStore,
        user_provider: UserProvider,
        clock: Callable[[], datetime] | None = None,
        directory: DepartmentDirectory | None = None,
    ) -> None:
        """Initialize the board.

        Args:
            store: Notice store to read and write.
            user_provider: Source of the acting user.
            clock: Returns the publication time, defaults to now in UTC.
            directory: Department directory used to check codes.
        """
        self._store = store
        self._users = user_provider
        self._clock = clock or (lambda: datetime.now(UTC))
        self._directory = directory or DepartmentDirectory()
        self._query = NoticeQuery(store)

    def current_user(self) -> UserContext | None:
        return self._users.current_user()

    def browse(self, department_filter: str = ALL_DEPARTMENTS, search: str = "") -> list[Notice]:
        """List notices for the current user, newest first.

        Args:
            department_filter: "all", "my", or a department code in any
                               capitalization.
            search: Text matched against title, content and author.
        """
        if department_filter not in (ALL_DEPARTMENTS, MY_DEPARTMENT):
            department_filter = self._department_code(department_filter)
        return self._query.browse(self.current_user(), department_filter, search)

    def publish(
        self,
        title: str,
        content: str,
        department: str = ALL_DEPARTMENTS,
        priority: NoticePriority = NoticePriority.MEDIUM,
    ) -> Notice:
        """Publish a notice as the current user.

        Returns:
            The stored notice.

        Raises:
            PermissionDeniedError: If nobody is signed in or the user is
                                   not an admin.
            ValueError: If the title or content is empty, or the
                        department is unknown.
            StoreError: If the store cannot be written.
        """
        user = self.current_user()
        if user is None:
            raise PermissionDeniedError("User not authenticated")
        if not is_admin(user):
            raise PermissionDeniedError("Only admin users can create notices")

        title, content = title.strip(), content.strip()
        if not title or not content:
            raise ValueError("A notice needs both a title and content")

        if department.lower() != ALL_DEPARTMENTS:
            department = self._department_code(department)
        else:
            department = ALL_DEPARTMENTS

        created_at = self._clock()
        notice = Notice(
            id=self._next_id(created_at),
            title=title,
            content=content,
            department=department,
            priority=priority,
            created_at=created_at,
            author=user.display_name or user.email or "Admin",
        )
        self._store.add(notice)
        logger.info(f"{notice.author} published notice {notice.id} for {department}")
        return notice

    def delete(self, notice_id: int) -> bool:
        """Delete a notice.

        Returns:
            True if a notice was removed, False if none had that id.

        Raises:
            PermissionDeniedError: If the current user is not an admin.
        """
        if not is_admin(self.current_user()):
            raise PermissionDeniedError("Only admin users can delete notices")
        removed = self._store.delete(notice_id)
        if not removed:
            logger.debug(f"No notice with id {notice_id}")
        return removed

    def _department_code(self, code: str) -> str:
        canonical = self._directory.canonical(code)
        if canonical is None:
            raise ValueError(
                f"Unknown department {code!r}. Use one of: {', '.join(self._directory.codes)}"
            )
        return canonical

    def _next_id(self, created_at: datetime) -> int:
        # Millisecond ids like the reminders, kept above every stored id
        taken = [n.id for n in self._store.list_notices()]
        return max(int(created_at.timestamp() * 1000), max(taken, default=0) + 1)


def format_board(notices: list[Notice], now: datetime | None = None) -> str:
    """Render notices as console text, one block per notice."""
    if not notices:
        return NO_NOTICES_FOUND

    lines = [f"📢 Notice board ({len(notices)}):"]
    for notice in notices:
        marker = "🔴 " if notice.is_high_priority else ""
        when = format_relative_date(notice.created_at, now)
        lines.append(f"#{notice.id} [{notice.department}] {marker}{notice.title}")
        lines.append(f"   {notice.content}")
        lines.append(f"   {notice.author}, {when}")
    return "\n".join(lines)


__all__ = ["NO_NOTICES_FOUND", "NoticeBoard", "format_board"]
