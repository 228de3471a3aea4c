"""MongoDB storage module for the campus assistant.

Provides MongoDB-backed notice and reminder stores with the same
interfaces as the JSON file stores.
"""

from .client import (
    MongoNoticeRepository,
    MongoReminderRepository,
    MongoStorageClient,
    retry_on_connection_failure,
)

__all__ = [
    "MongoNoticeRepository",
    "MongoReminderRepository",
    "MongoStorageClient",
    "retry_on_connection_failure",
]
