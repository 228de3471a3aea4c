"""Voice session: speech in, assistant reply out, reply spoken back.

One session belongs to one chat window. It owns the recognizer and player
for that window and is not shared between users.

State machine::

    IDLE --start()--> LISTENING --result/error/end/stop()--> IDLE

Speaking runs beside the state machine: every reply starts a new
utterance that cancels the previous one.
"""

import logging
import threading
from enum import Enum, auto

from ..assistant.dispatcher import AssistantDispatcher
from ..errors import RecognitionError, StoreError
from ..sink import MessageSink, Role
from .player import SpeechPlayer, clean_for_speech
from .recognizer import SpeechRecognizer

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = (
    "Voice recognition is not supported in this environment. "
    "Please type your command instead."
)
LISTENING_MESSAGE = "🎤 Listening... Speak now!"
START_FAILED_MESSAGE = "Error starting voice recognition. Please check microphone permissions."
RECOGNITION_FAILED_MESSAGE = (
    "Sorry, I encountered an error with voice recognition. Please try typing instead."
)
DISPATCH_FAILED_MESSAGE = "Sorry, something went wrong while handling that request. Please try again."

# Preset commands behind the quick-action buttons
QUICK_COMMANDS: dict[str, str] = {
    "reminder": "set reminder for tomorrow 10am study session",
    "notices": "show latest notices from my department",
    "assignments": "what assignments do I have this week",
    "help": "help",
}


class VoiceState(Enum):
    """Listening state of a voice session."""

    IDLE = auto()
    LISTENING = auto()


class VoiceSession:
    """Connects a recognizer and a player to the assistant dispatcher.

    Either backend may be missing. Without a recognizer, ``start()`` only
    reports that voice input is unsupported; without a player, replies are
    shown but not spoken. Typed input works in every case.
    """

    def __init__(
        self,
        dispatcher: AssistantDispatcher,
        sink: MessageSink,
        recognizer: SpeechRecognizer | None = None,
        player: SpeechPlayer | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            dispatcher: Answers commands.
            sink: Receives every user and assistant message.
            recognizer: Speech capture backend, if available.
            player: Speech playback backend, if available.
        """
        self._dispatcher = dispatcher
        self._sink = sink
        self._recognizer = recognizer
        self._player = player
        self._state = VoiceState.IDLE
        self._last_error: RecognitionError | None = None
        self._lock = threading.Lock()

        if recognizer is not None:
            recognizer.set_callbacks(self.on_result, self.on_error, self.on_end)
        if player is not None:
            player.set_error_callback(self._on_speak_error)

    @property
    def state(self) -> VoiceState:
        """Get current listening state."""
        return self._state

    @property
    def last_error(self) -> RecognitionError | None:
        """Get the most recent recognition failure, cleared by start()."""
        return self._last_error

    @property
    def is_listening(self) -> bool:
        return self._state == VoiceState.LISTENING

    @property
    def supports_recognition(self) -> bool:
        return self._recognizer is not None

    @property
    def supports_speech(self) -> bool:
        return self._player is not None

    def start(self) -> None:
        """Start listening, or stop if already listening."""
        if self._recognizer is None:
            self._sink.emit(UNSUPPORTED_MESSAGE, Role.ASSISTANT)
            return

        if self.is_listening:
            self.stop()
            return

        # Threaded recognizers may report before start() returns
        with self._lock:
            self._state = VoiceState.LISTENING
            self._last_error = None

        try:
            self._recognizer.start()
        except Exception as e:
            logger.error(f"Error starting speech recognition: {e}")
            with self._lock:
                self._state = VoiceState.IDLE
            self._sink.emit(START_FAILED_MESSAGE, Role.ASSISTANT)
            return

        self._sink.emit(LISTENING_MESSAGE, Role.ASSISTANT)

    def stop(self) -> None:
        """Stop listening without waiting for the recognizer to confirm."""
        with self._lock:
            was_listening = self._state == VoiceState.LISTENING
            self._state = VoiceState.IDLE

        if was_listening and self._recognizer is not None:
            self._recognizer.stop()

    def close(self) -> None:
        """Release the session, stopping capture if it is active."""
        if self.is_listening:
            self.stop()
        if self._player is not None:
            self._player.cancel()

    def on_result(self, transcript: str) -> None:
        """Handle a final transcript from the recognizer."""
        if not self.is_listening:
            logger.debug(f"Ignoring transcript received while idle: {transcript!r}")
            return

        self._sink.emit(transcript, Role.USER)
        self._respond(transcript)

    def on_error(self, reason: str) -> None:
        """Handle a recognizer failure."""
        error = RecognitionError(reason)
        logger.error(str(error))
        with self._lock:
            self._state = VoiceState.IDLE
            self._last_error = error
        self._sink.emit(RECOGNITION_FAILED_MESSAGE, Role.ASSISTANT)

    def on_end(self) -> None:
        """Handle the end of capture."""
        with self._lock:
            self._state = VoiceState.IDLE

    def send_text(self, text: str) -> str | None:
        """Handle a typed command.

        Returns:
            The reply, or None for blank input.
        """
        text = text.strip()
        if not text:
            return None

        self._sink.emit(text, Role.USER)
        return self._respond(text)

    def quick_command(self, name: str) -> str | None:
        """Run one of the preset quick-action commands.

        Returns:
            The reply, or None if the preset does not exist.
        """
        command = QUICK_COMMANDS.get(name)
        if command is None:
            logger.warning(f"Unknown quick command: {name}")
            return None
        return self.send_text(command)

    def read_notices_aloud(self) -> str:
        """Announce where to find the latest notices, out loud."""
        user = self._dispatcher.current_user()
        department = (user.department if user else None) or "your"
        message = (
            f"Reading latest notices from {department} department. "
            "Check the notices page for complete details."
        )
        self._sink.emit(message, Role.ASSISTANT)
        self.speak(message)
        return message

    def speak(self, text: str) -> None:
        """Speak text, cutting off anything still being spoken."""
        if self._player is None:
            return

        try:
            self._player.cancel()
            self._player.speak(clean_for_speech(text))
        except (RuntimeError, OSError) as e:
            logger.error(f"Speech synthesis error: {e}")

    def _respond(self, text: str) -> str:
        try:
            reply = self._dispatcher.handle(text)
        except StoreError as e:
            logger.error(f"Failed to handle command {text!r}: {e}")
            self._sink.emit(DISPATCH_FAILED_MESSAGE, Role.ASSISTANT)
            return DISPATCH_FAILED_MESSAGE

        self._sink.emit(reply, Role.ASSISTANT)
        self.speak(reply)
        return reply

    def _on_speak_error(self, reason: str) -> None:
        logger.error(f"Speech synthesis error: {reason}")


__all__ = [
    "QUICK_COMMANDS",
    "VoiceSession",
    "VoiceState",
]
