"""Reminders module for the campus assistant.

Provides the append-only reminder list written by the reminder command.
"""

from pbl_assistant.reminders.store import (
    IdAllocator,
    Reminder,
    ReminderSink,
    ReminderStore,
)

__all__ = [
    "IdAllocator",
    "Reminder",
    "ReminderSink",
    "ReminderStore",
]
