"""Notice stores.

Notices are kept newest first: publishing a notice puts it at the front of
the list, and readers get the list in stored order.
"""

import json
import logging
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from ..errors import StoreError
from .models import ALL_DEPARTMENTS, Notice, NoticePriority

logger = logging.getLogger(__name__)


class NoticeStore(Protocol):
    """Read interface for notices."""

    def list_notices(self) -> list[Notice]:
        """Return all notices in stored order."""
        ...


class WritableNoticeStore(NoticeStore, Protocol):
    """Notice store that can also publish and delete notices."""

    def add(self, notice: Notice) -> Notice: ...

    def delete(self, notice_id: int) -> bool:
        """Remove a notice. Returns False if no notice has that id."""
        ...


class InMemoryNoticeStore:
    """Notice store backed by a Python list."""

    def __init__(self, notices: list[Notice] | None = None) -> None:
        self._notices: list[Notice] = list(notices or [])
        self._lock = threading.Lock()

    def list_notices(self) -> list[Notice]:
        with self._lock:
            return self._notices.copy()

    def add(self, notice: Notice) -> Notice:
        with self._lock:
            self._notices.insert(0, notice)
        return notice

    def delete(self, notice_id: int) -> bool:
        with self._lock:
            kept = [n for n in self._notices if n.id != notice_id]
            removed = len(kept) != len(self._notices)
            self._notices = kept
        return removed


class JSONNoticeStore:
    """Notice store backed by a JSON file holding an array of notices."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def list_notices(self) -> list[Notice]:
        """Read all notices from the file.

        Raises:
            StoreError: If the file exists but cannot be parsed.
        """
        with self._lock:
            return self._read()

    def add(self, notice: Notice) -> Notice:
        """Publish a notice at the front of the list."""
        with self._lock:
            notices = self._read()
            notices.insert(0, notice)
            self._write(notices)
        logger.info(f"Published notice {notice.id} for {notice.department}")
        return notice

    def delete(self, notice_id: int) -> bool:
        """Remove a notice by id, rewriting the file only if it changed."""
        with self._lock:
            notices = self._read()
            kept = [n for n in notices if n.id != notice_id]
            if len(kept) == len(notices):
                return False
            self._write(kept)
        logger.info(f"Deleted notice {notice_id}")
        return True

    def _read(self) -> list[Notice]:
        if not self._path.exists():
            return []

        try:
            with open(self._path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid JSON in notices file: {e}") from e
        except OSError as e:
            raise StoreError(f"Failed to read notices: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(f"Notices file holds {type(data).__name__}, expected a list")

        notices = []
        for item in data:
            try:
                notices.append(Notice.from_dict(item))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid notice: {e}")
        return notices

    def _write(self, notices: list[Notice]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w") as f:
                json.dump([n.to_dict() for n in notices], f, indent=2)
        except OSError as e:
            raise StoreError(f"Failed to save notices: {e}") from e
        logger.debug(f"Saved {len(notices)} notices to {self._path}")


def sample_notices(now: datetime | None = None) -> list[Notice]:
    """Build the welcome notices shown on a fresh install."""
    now = now or datetime.now(UTC)
    return [
        Notice(
            id=1,
            title="Welcome to PBL Season 3 - University Social Platform",
            content=(
                "Welcome all students to our new university social platform! "
                "Connect with your department, share resources, and collaborate "
                "with fellow students."
            ),
            department=ALL_DEPARTMENTS,
            priority=NoticePriority.HIGH,
            created_at=now,
            author="University Administration",
        ),
        Notice(
            id=2,
            title="CSE Department - Lab Schedule Update",
            content=(
                "Computer lab schedules for CSE students have been updated for this "
                "semester. Please check the department notice board for your lab "
                "timings and room allocations."
            ),
            department="CSE",
            priority=NoticePriority.MEDIUM,
            created_at=now,
            author="CSE Department Head",
        ),
        Notice(
            id=3,
            title="EEE Workshop on Renewable Energy Systems",
            content=(
                "There will be a workshop on renewable energy systems next Friday at "
                "3 PM in the main auditorium. All EEE students are encouraged to attend."
            ),
            department="EEE",
            priority=NoticePriority.MEDIUM,
            created_at=now,
            author="EEE Department",
        ),
    ]


def seed_sample_notices(store: WritableNoticeStore, now: datetime | None = None) -> int:
    """Publish the sample notices if the store is empty.

    Returns:
        Number of notices written.
    """
    if store.list_notices():
        return 0

    notices = sample_notices(now)
    for notice in notices:
        store.add(notice)
    logger.info(f"Seeded {len(notices)} sample notices")
    return len(notices)


__all__ = [
    "InMemoryNoticeStore",
    "JSONNoticeStore",
    "NoticeStore",
    "WritableNoticeStore",
    "sample_notices",
    "seed_sample_notices",
]
