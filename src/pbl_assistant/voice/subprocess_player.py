"""Speech player using the host's command-line TTS.

Uses `say` on macOS and `espeak-ng`/`espeak` elsewhere. Each utterance is
one child process; cancelling terminates it.
"""

import logging
import shutil
import subprocess
import threading
from collections.abc import Callable
from pathlib import Path

from ..errors import UnsupportedCapabilityError

logger = logging.getLogger(__name__)

# Words per minute at rate 1.0 for both engines
BASE_WORDS_PER_MINUTE = 175

ENGINES = ("say", "espeak-ng", "espeak")


def find_engine(names: tuple[str, ...] = ENGINES) -> str | None:
    """Return the path of the first TTS command found on PATH."""
    for name in names:
        path = shutil.which(name)
        if path:
            return path
    return None


class SubprocessPlayer:
    """Single-slot player around a TTS command.

    Attributes mirror browser speech settings: ``rate`` 1.0 is normal speed,
    ``pitch`` 1.0 is the engine default, ``volume`` ranges 0.0 to 1.0.
    """

    def __init__(
        self,
        engine_path: str | None = None,
        language: str = "en-US",
        rate: float = 0.9,
        pitch: float = 1.0,
        volume: float = 0.8,
    ) -> None:
        """Initialize the player.

        Args:
            engine_path: TTS command to run. Detected when omitted.
            language: BCP 47 language tag.
            rate: Speed multiplier (0.5 to 2.0).
            pitch: Pitch multiplier (0.0 to 2.0).
            volume: Volume (0.0 to 1.0).

        Raises:
            UnsupportedCapabilityError: If no TTS command is installed.
        """
        self._engine = engine_path or find_engine()
        if self._engine is None:
            raise UnsupportedCapabilityError("synthesis", "No say/espeak command found")

        self._language = language
        self._rate = max(0.5, min(2.0, rate))
        self._pitch = max(0.0, min(2.0, pitch))
        self._volume = max(0.0, min(1.0, volume))
        self._process: subprocess.Popen[bytes] | None = None
        self._lock = threading.Lock()
        self._on_error: Callable[[str], None] | None = None

    @property
    def engine(self) -> str:
        return self._engine

    def set_error_callback(self, on_error: Callable[[str], None]) -> None:
        self._on_error = on_error

    def build_command(self, text: str) -> list[str]:
        """Build the argument list for one utterance."""
        words_per_minute = str(int(BASE_WORDS_PER_MINUTE * self._rate))

        if Path(self._engine).name == "say":
            return [self._engine, "-r", words_per_minute, text or " "]

        return [
            self._engine,
            "-v",
            self._language.lower(),
            "-s",
            words_per_minute,
            "-p",
            str(int(50 * self._pitch)),
            "-a",
            str(int(100 * self._volume)),
            text or " ",
        ]

    def speak(self, text: str) -> None:
        """Start speaking, replacing any utterance in progress.

        Raises:
            RuntimeError: If the TTS command cannot be started.
        """
        self.cancel()
        try:
            process = subprocess.Popen(
                self.build_command(text),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to start TTS: {e}") from e

        with self._lock:
            self._process = process

        watcher = threading.Thread(target=self._watch, args=(process,), daemon=True)
        watcher.start()

    def cancel(self) -> None:
        """Terminate the current utterance, if any."""
        with self._lock:
            process = self._process
            self._process = None

        if process is not None and process.poll() is None:
            process.terminate()
            logger.debug("Cancelled utterance")

    def _watch(self, process: "subprocess.Popen[bytes]") -> None:
        """Wait for an utterance and report failures."""
        _, stderr = process.communicate()

        with self._lock:
            cancelled = self._process is not process
            if not cancelled:
                self._process = None

        if cancelled or process.returncode == 0:
            return

        reason = (stderr or b"").decode(errors="replace").strip() or f"exit {process.returncode}"
        logger.warning(f"TTS process failed: {reason}")
        if self._on_error:
            self._on_error(reason)


__all__ = ["ENGINES", "SubprocessPlayer", "find_engine"]
