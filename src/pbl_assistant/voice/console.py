"""Console recognizer: a typed line stands in for speech.

Lets the command-line app drive the voice session without a microphone.
While listening, the next line the user enters is delivered as the
transcript.
"""

import logging
import threading

from .recognizer import EndCallback, ErrorCallback, ResultCallback

logger = logging.getLogger(__name__)


class ConsoleRecognizer:
    """Recognizer fed by ``submit()`` calls from the console loop."""

    def __init__(self) -> None:
        self._on_result: ResultCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._on_end: EndCallback | None = None
        self._listening = False
        self._lock = threading.Lock()

    def set_callbacks(
        self,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> None:
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    @property
    def is_listening(self) -> bool:
        with self._lock:
            return self._listening

    def start(self) -> None:
        with self._lock:
            if self._listening:
                raise RuntimeError("recognition already started")
            self._listening = True
        logger.debug("Console recognizer listening")

    def stop(self) -> None:
        with self._lock:
            was_listening = self._listening
            self._listening = False
        if was_listening and self._on_end:
            self._on_end()

    def submit(self, line: str) -> bool:
        """Deliver a typed line as the transcript.

        Returns:
            True if the line was consumed, False if not listening.
        """
        with self._lock:
            if not self._listening:
                return False
            self._listening = False

        transcript = line.strip()
        if not transcript:
            if self._on_error:
                self._on_error("no-speech")
        elif self._on_result:
            self._on_result(transcript)

        if self._on_end:
            self._on_end()
        return True


__all__ = ["ConsoleRecognizer"]
