"""Speech player protocol and text cleanup.

A player holds at most one utterance at a time. Speaking something new
always cancels whatever is still playing.
"""

import re
from collections.abc import Callable
from typing import Protocol

# Anything other than word characters, whitespace and plain punctuation
_DECORATION = re.compile(r"[^\w\s.,!?;:()\-]")


class SpeechPlayer(Protocol):
    """Interface for text-to-speech playback."""

    def set_error_callback(self, on_error: Callable[[str], None]) -> None:
        """Register a callback for playback failures."""
        ...

    def speak(self, text: str) -> None:
        """Start speaking text without waiting for it to finish.

        Raises:
            RuntimeError: If playback cannot start.
        """
        ...

    def cancel(self) -> None:
        """Stop the current utterance, if any."""
        ...


def clean_for_speech(text: str) -> str:
    """Prepare display text for speech synthesis.

    Drops emoji and other decoration, then turns line breaks into
    sentence breaks.

    Args:
        text: Reply text as displayed.

    Returns:
        Text suitable for a speech engine.
    """
    return _DECORATION.sub("", text).replace("\n", ". ")


__all__ = ["SpeechPlayer", "clean_for_speech"]
