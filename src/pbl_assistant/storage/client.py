"""MongoDB storage client for the campus assistant.

Provides connection management, retry logic, and the notice and reminder
repositories.
"""

import logging
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime
from functools import wraps
from typing import Any, TypeVar

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from ..errors import StoreError
from ..notices.models import Notice
from ..reminders.store import IdAllocator, Reminder

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_connection_failure(
    max_retries: int = 3,
    base_delay: float = 0.5,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for exponential backoff retry on connection failures.

    Args:
        max_retries: Maximum number of attempts.
        base_delay: Base delay in seconds (doubles each retry).

    Returns:
        Decorated function with retry logic.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                    if attempt == max_retries - 1:
                        logger.error(
                            "Connection failed after %d attempts: %s",
                            max_retries,
                            str(e),
                        )
                        raise
                    delay = base_delay * (2**attempt)
                    logger.warning(
                        "Connection failed (attempt %d/%d), retrying in %.1fs: %s",
                        attempt + 1,
                        max_retries,
                        delay,
                        str(e),
                    )
                    time.sleep(delay)
            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator


def wrap_store_errors(func: Callable[..., T]) -> Callable[..., T]:
    """Re-raise pymongo failures as StoreError."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except PyMongoError as e:
            raise StoreError(f"MongoDB operation {func.__name__} failed: {e}") from e

    return wrapper


def _as_utc(value: datetime) -> datetime:
    # MongoDB hands back naive datetimes holding UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class MongoNoticeRepository:
    """Notice store backed by a MongoDB collection."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for notices.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        self._collection.create_index([("createdAt", DESCENDING)])
        self._collection.create_index("department")

    @wrap_store_errors
    @retry_on_connection_failure()
    def list_notices(self) -> list[Notice]:
        """Return all notices, newest first."""
        cursor = self._collection.find({}, {"_id": 0}).sort("createdAt", DESCENDING)
        notices = []
        for doc in cursor:
            try:
                notices.append(Notice.from_dict(doc))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid notice document: {e}")
        return notices

    @wrap_store_errors
    @retry_on_connection_failure()
    def add(self, notice: Notice) -> Notice:
        """Publish a notice."""
        doc = notice.to_dict()
        doc["createdAt"] = notice.created_at
        self._collection.insert_one(doc)
        logger.debug(f"Stored notice {notice.id} for {notice.department}")
        return notice

    @wrap_store_errors
    @retry_on_connection_failure()
    def delete(self, notice_id: int) -> bool:
        """Delete a notice by id."""
        result = self._collection.delete_one({"id": notice_id})
        return result.deleted_count > 0


class MongoReminderRepository:
    """Append-only reminder store backed by a MongoDB collection.

    Ids come from an IdAllocator seeded with the largest stored id, so
    sorting by id gives insertion order.
    """

    def __init__(
        self,
        collection: Collection[dict[str, Any]],
        id_allocator: IdAllocator | None = None,
    ) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for reminders.
            id_allocator: Source of reminder ids.
        """
        self._collection = collection
        self._ids = id_allocator or IdAllocator()
        self._lock = threading.Lock()
        self._ensure_indexes()
        self._observe_existing()

    def _ensure_indexes(self) -> None:
        self._collection.create_index([("id", ASCENDING)], unique=True)

    @wrap_store_errors
    def _observe_existing(self) -> None:
        last = self._collection.find_one({}, {"id": 1}, sort=[("id", DESCENDING)])
        if last is not None:
            self._ids.observe(int(last["id"]))

    @wrap_store_errors
    @retry_on_connection_failure()
    def append_reminder(self, task: str, time: str) -> Reminder:
        """Append a new reminder.

        Raises:
            StoreError: If the insert fails.
        """
        with self._lock:
            reminder = Reminder(
                id=self._ids.next_id(),
                task=task,
                time=time,
                completed=False,
                created_at=datetime.now(UTC),
            )
            doc = reminder.to_dict()
            doc["createdAt"] = reminder.created_at
            self._collection.insert_one(doc)

        logger.info(f"Added reminder {reminder.id}: {task!r} at {time!r}")
        return reminder

    @wrap_store_errors
    @retry_on_connection_failure()
    def list_all(self) -> list[Reminder]:
        """List all reminders in insertion order."""
        cursor = self._collection.find({}, {"_id": 0}).sort("id", ASCENDING)
        reminders = []
        for doc in cursor:
            reminder = Reminder.from_dict(doc)
            reminder.created_at = _as_utc(reminder.created_at)
            reminders.append(reminder)
        return reminders

    def __len__(self) -> int:
        return self._collection.count_documents({})


class MongoStorageClient:
    """High-level MongoDB storage client.

    Manages the connection and provides access to repositories.
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database_name: str = "pbl",
        timeout_ms: int = 5000,
        client: MongoClient[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the storage client.

        Args:
            uri: MongoDB connection URI.
            database_name: Name of the database to use.
            timeout_ms: Connect and server selection timeout in milliseconds.
            client: Pre-built client (tests pass a mongomock client).
        """
        self._uri = uri
        self._database_name = database_name
        self._timeout_ms = timeout_ms
        self._client = client
        self._db: Database[dict[str, Any]] | None = None
        self._notices: MongoNoticeRepository | None = None
        self._reminders: MongoReminderRepository | None = None
        self._connected = False

    def connect(self) -> None:
        """Connect to MongoDB.

        Raises:
            StoreError: If the server cannot be reached.
        """
        if self._connected:
            return

        try:
            if self._client is None:
                self._client = MongoClient(
                    self._uri,
                    connectTimeoutMS=self._timeout_ms,
                    serverSelectionTimeoutMS=self._timeout_ms,
                )

            # Verify connection
            self._client.admin.command("ping")

            self._db = self._client[self._database_name]
            self._notices = MongoNoticeRepository(self._db["notices"])
            self._reminders = MongoReminderRepository(self._db["reminders"])
            self._connected = True

            logger.info("Connected to MongoDB at %s", self._uri)

        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB: %s", str(e))
            self._connected = False
            raise StoreError(f"Cannot connect to MongoDB at {self._uri}: {e}") from e

    def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            self._notices = None
            self._reminders = None
            self._connected = False
            logger.info("Disconnected from MongoDB")

    def is_connected(self) -> bool:
        return self._connected

    @property
    def notices(self) -> MongoNoticeRepository:
        """Get the notices repository.

        Raises:
            RuntimeError: If not connected.
        """
        if self._notices is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._notices

    @property
    def reminders(self) -> MongoReminderRepository:
        """Get the reminders repository.

        Raises:
            RuntimeError: If not connected.
        """
        if self._reminders is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._reminders

    def __enter__(self) -> "MongoStorageClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.disconnect()


__all__ = [
    "MongoNoticeRepository",
    "MongoReminderRepository",
    "MongoStorageClient",
    "retry_on_connection_failure",
    "wrap_store_errors",
]
