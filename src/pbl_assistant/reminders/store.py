"""Reminder storage for assistant commands.

Reminders are append-only: the assistant creates them and never reorders,
mutates or deletes them. The store keeps them in memory and optionally
persists them to a JSON file.
"""

import json
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from ..errors import StoreError

logger = logging.getLogger(__name__)


@dataclass
class Reminder:
    """A user-created reminder.

    Attributes:
        id: Creation-time token, strictly increasing within a store.
        task: What to be reminded about.
        time: When, exactly as the user said it. Never parsed.
        completed: Completion flag, always False when created.
        created_at: When the reminder was created (UTC).
    """

    id: int
    task: str
    time: str
    completed: bool
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert reminder to a JSON-compatible dict."""
        return {
            "id": self.id,
            "task": self.task,
            "time": self.time,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Reminder":
        """Create reminder from a stored dict."""
        created_at = data["createdAt"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=int(data["id"]),
            task=data["task"],
            time=data["time"],
            completed=bool(data.get("completed", False)),
            created_at=created_at,
        )


class ReminderSink(Protocol):
    """Protocol for the one mutation the assistant performs."""

    def append_reminder(self, task: str, time: str) -> Reminder: ...


class IdAllocator:
    """Allocates millisecond-based ids that never go backwards."""

    def __init__(self, clock_ms: Callable[[], int] | None = None) -> None:
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._last = 0

    def observe(self, used_id: int) -> None:
        """Record an id that is already taken."""
        self._last = max(self._last, used_id)

    def next_id(self) -> int:
        """Return a new id greater than every id seen so far."""
        candidate = max(self._clock_ms(), self._last + 1)
        self._last = candidate
        return candidate


class ReminderStore:
    """Append-only reminder list with optional JSON persistence.

    Appends are serialized with a lock so insertion order matches call
    order within one process.
    """

    FILE_VERSION = 1

    def __init__(
        self,
        persistence_path: Path | str | None = None,
        id_allocator: IdAllocator | None = None,
    ) -> None:
        """Initialize the reminder store.

        Args:
            persistence_path: Path to JSON file for persistence. If None,
                              reminders are stored in memory only.
            id_allocator: Source of reminder ids.

        Raises:
            StoreError: If the persistence file exists but cannot be read.
        """
        self._reminders: list[Reminder] = []
        self._lock = threading.Lock()
        self._ids = id_allocator or IdAllocator()
        self._persistence_path: Path | None = (
            Path(persistence_path).expanduser() if persistence_path else None
        )

        if self._persistence_path:
            self._load()

    def append_reminder(self, task: str, time: str) -> Reminder:
        """Append a new reminder.

        Args:
            task: Reminder task text.
            time: Free-form time text.

        Returns:
            The created Reminder.

        Raises:
            StoreError: If the reminder cannot be persisted. The reminder is
                not kept in memory in that case.
        """
        with self._lock:
            reminder = Reminder(
                id=self._ids.next_id(),
                task=task,
                time=time,
                completed=False,
                created_at=datetime.now(UTC),
            )
            self._reminders.append(reminder)
            try:
                self._save()
            except StoreError:
                self._reminders.pop()
                raise

        logger.info(f"Added reminder {reminder.id}: {task!r} at {time!r}")
        return reminder

    def list_all(self) -> list[Reminder]:
        """List all reminders in insertion order."""
        with self._lock:
            return self._reminders.copy()

    def __len__(self) -> int:
        return len(self._reminders)

    def _save(self) -> None:
        """Save reminders to JSON file."""
        if not self._persistence_path:
            return

        data = {
            "version": self.FILE_VERSION,
            "reminders": [r.to_dict() for r in self._reminders],
        }

        try:
            self._persistence_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._persistence_path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StoreError(f"Failed to save reminders: {e}") from e

        logger.debug(f"Saved {len(self._reminders)} reminders to {self._persistence_path}")

    def _load(self) -> None:
        """Load reminders from JSON file."""
        if not self._persistence_path or not self._persistence_path.exists():
            return

        try:
            with open(self._persistence_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid JSON in reminders file: {e}") from e
        except OSError as e:
            raise StoreError(f"Failed to load reminders: {e}") from e

        # Older files hold a bare list of reminders
        if isinstance(data, list):
            items = data
        elif isinstance(data, dict):
            version = data.get("version", self.FILE_VERSION)
            if version != self.FILE_VERSION:
                logger.warning(f"Unknown reminders file version: {version}")
            items = data.get("reminders", [])
        else:
            raise StoreError(f"Reminders file holds {type(data).__name__}, expected an object")

        if not isinstance(items, list):
            raise StoreError("Reminders file 'reminders' entry is not a list")

        for item in items:
            try:
                reminder = Reminder.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid reminder: {e}")
                continue
            self._reminders.append(reminder)
            self._ids.observe(reminder.id)

        logger.info(f"Loaded {len(self._reminders)} reminders from {self._persistence_path}")


__all__ = ["IdAllocator", "Reminder", "ReminderSink", "ReminderStore"]
