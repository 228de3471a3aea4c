"""Notices module for the campus assistant.

Provides the notice entity, notice stores, and department/recency queries.
"""

from pbl_assistant.notices.models import ALL_DEPARTMENTS, Notice, NoticePriority
from pbl_assistant.notices.query import (
    ASSISTANT_NOTICE_LIMIT,
    MY_DEPARTMENT,
    NoticeQuery,
    format_relative_date,
)
from pbl_assistant.notices.store import (
    InMemoryNoticeStore,
    JSONNoticeStore,
    NoticeStore,
    WritableNoticeStore,
    sample_notices,
    seed_sample_notices,
)

__all__ = [
    # Models
    "ALL_DEPARTMENTS",
    "Notice",
    "NoticePriority",
    # Query
    "ASSISTANT_NOTICE_LIMIT",
    "MY_DEPARTMENT",
    "NoticeQuery",
    "format_relative_date",
    # Stores
    "InMemoryNoticeStore",
    "JSONNoticeStore",
    "NoticeStore",
    "WritableNoticeStore",
    "sample_notices",
    "seed_sample_notices",
]
