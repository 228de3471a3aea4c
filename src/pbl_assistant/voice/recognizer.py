"""Speech recognizer protocol.

Defines the interface for one-shot speech capture. A recognizer listens
once per ``start()`` call and reports back through three callbacks.
"""

from collections.abc import Callable
from typing import Protocol

ResultCallback = Callable[[str], None]
ErrorCallback = Callable[[str], None]
EndCallback = Callable[[], None]


class SpeechRecognizer(Protocol):
    """Interface for speech-to-text capture.

    Implementations call ``on_result`` with the transcript, ``on_error``
    with a reason string on failure, and ``on_end`` whenever capture
    finishes for any reason.
    """

    def set_callbacks(
        self,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> None:
        """Register the capture callbacks."""
        ...

    def start(self) -> None:
        """Begin listening.

        Raises:
            RuntimeError: If capture cannot start (e.g., no microphone).
        """
        ...

    def stop(self) -> None:
        """Request that capture stop. Completion is reported via on_end."""
        ...


__all__ = ["EndCallback", "ErrorCallback", "ResultCallback", "SpeechRecognizer"]
