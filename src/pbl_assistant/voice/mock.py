"""Mock speech backends for testing.

Provides controllable recognizer and player implementations for unit and
integration testing.
"""

from collections.abc import Callable

from .recognizer import EndCallback, ErrorCallback, ResultCallback


class MockRecognizer:
    """Mock recognizer for testing.

    Nothing is captured. Tests drive the callbacks directly with
    ``deliver_result``, ``deliver_error`` and ``deliver_end``.
    """

    def __init__(self) -> None:
        """Initialize mock recognizer."""
        self._on_result: ResultCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._on_end: EndCallback | None = None
        self._start_count: int = 0
        self._stop_count: int = 0
        self._start_error: str | None = None
        self._active: bool = False

    def set_callbacks(
        self,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> None:
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    def set_start_error(self, message: str | None) -> None:
        """Make the next ``start()`` calls raise RuntimeError."""
        self._start_error = message

    def start(self) -> None:
        """Record a start request."""
        self._start_count += 1
        if self._start_error:
            raise RuntimeError(self._start_error)
        self._active = True

    def stop(self) -> None:
        """Record a stop request. Does not call on_end by itself."""
        self._stop_count += 1
        self._active = False

    def deliver_result(self, transcript: str) -> None:
        """Simulate a final transcript."""
        if self._on_result:
            self._on_result(transcript)

    def deliver_error(self, reason: str) -> None:
        """Simulate a recognition failure."""
        self._active = False
        if self._on_error:
            self._on_error(reason)

    def deliver_end(self) -> None:
        """Simulate the end of capture."""
        self._active = False
        if self._on_end:
            self._on_end()

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def start_count(self) -> int:
        """Get number of start calls."""
        return self._start_count

    @property
    def stop_count(self) -> int:
        """Get number of stop calls."""
        return self._stop_count


class MockPlayer:
    """Mock player for testing.

    Records what would have been spoken and how often playback was
    cancelled.
    """

    def __init__(self) -> None:
        """Initialize mock player."""
        self._spoken: list[str] = []
        self._cancel_count: int = 0
        self._current: str | None = None
        self._error_message: str | None = None
        self._on_error: Callable[[str], None] | None = None

    def set_error_callback(self, on_error: Callable[[str], None]) -> None:
        self._on_error = on_error

    def set_error(self, message: str | None) -> None:
        """Make the next ``speak()`` calls raise RuntimeError."""
        self._error_message = message

    def speak(self, text: str) -> None:
        """Record an utterance."""
        if self._error_message:
            raise RuntimeError(self._error_message)
        self._spoken.append(text)
        self._current = text

    def cancel(self) -> None:
        """Record a cancel request."""
        self._cancel_count += 1
        self._current = None

    def fail_playback(self, reason: str) -> None:
        """Simulate an asynchronous playback failure."""
        self._current = None
        if self._on_error:
            self._on_error(reason)

    @property
    def spoken_texts(self) -> list[str]:
        """Get list of spoken texts."""
        return self._spoken.copy()

    @property
    def current(self) -> str | None:
        """Get the utterance currently playing."""
        return self._current

    @property
    def cancel_count(self) -> int:
        """Get number of cancel calls."""
        return self._cancel_count

    def clear(self) -> None:
        """Reset mock state."""
        self._spoken.clear()
        self._cancel_count = 0
        self._current = None


__all__ = ["MockPlayer", "MockRecognizer"]
