"""Presentation sinks for assistant messages.

The assistant produces plain text; rendering and escaping belong to whoever
implements the sink.
"""

import sys
from enum import Enum
from typing import Protocol, TextIO


class Role(Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageSink(Protocol):
    """Interface for displaying chat messages."""

    def emit(self, text: str, role: Role) -> None:
        """Display one message.

        Args:
            text: Message text.
            role: Who the message is from.
        """
        ...


class ConsoleSink:
    """Writes assistant messages to a text stream.

    User messages are not echoed since the user just typed them.
    """

    def __init__(self, stream: TextIO | None = None, echo_user: bool = False) -> None:
        self._stream = stream or sys.stdout
        self._echo_user = echo_user

    def emit(self, text: str, role: Role) -> None:
        if role == Role.USER and not self._echo_user:
            return
        prefix = "you" if role == Role.USER else "assistant"
        self._stream.write(f"{prefix}> {text}\n")
        self._stream.flush()


class ListSink:
    """Collects messages in memory, for tests and embedding."""

    def __init__(self) -> None:
        self._messages: list[tuple[str, Role]] = []

    def emit(self, text: str, role: Role) -> None:
        self._messages.append((text, role))

    @property
    def messages(self) -> list[tuple[str, Role]]:
        """Get all emitted messages in order."""
        return self._messages.copy()

    @property
    def assistant_texts(self) -> list[str]:
        """Get the text of assistant messages only."""
        return [text for text, role in self._messages if role == Role.ASSISTANT]

    def clear(self) -> None:
        """Forget all messages."""
        self._messages.clear()


__all__ = ["ConsoleSink", "ListSink", "MessageSink", "Role"]
