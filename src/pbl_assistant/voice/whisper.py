"""Microphone recognizer using PyAudio capture and faster-whisper.

Each ``start()`` opens the microphone and records on a background thread
until the speaker pauses, the time limit is reached, or ``stop()`` is
called. The recording is then transcribed and reported through the
recognizer callbacks. Failure reasons use the browser speech API names
("no-speech", "audio-capture", "aborted") so the session treats both
backends alike.
"""

import importlib.util
import logging
import struct
import threading
import time
from typing import Any, Protocol

from ..errors import UnsupportedCapabilityError
from .recognizer import EndCallback, ErrorCallback, ResultCallback

logger = logging.getLogger(__name__)

SAMPLE_RATE = 16000
SAMPLE_WIDTH = 2


class AudioSource(Protocol):
    """A mono 16-bit PCM input that is opened once per capture."""

    def open(self) -> None: ...

    def read(self, frames: int) -> bytes: ...

    def close(self) -> None: ...


def calculate_energy(audio_data: bytes) -> float:
    """Calculate the RMS energy of 16-bit little-endian PCM audio."""
    num_samples = len(audio_data) // SAMPLE_WIDTH
    if num_samples == 0:
        return 0.0
    samples = struct.unpack(f"<{num_samples}h", audio_data[: num_samples * SAMPLE_WIDTH])
    return float((sum(s * s for s in samples) / num_samples) ** 0.5)


class MicrophoneSource:
    """PyAudio input stream on the default or a named device."""

    def __init__(
        self,
        device_name: str = "default",
        sample_rate: int = SAMPLE_RATE,
        chunk_size: int = 1024,
    ) -> None:
        if importlib.util.find_spec("pyaudio") is None:
            raise UnsupportedCapabilityError(
                "recognition", "PyAudio not available. Install with: pip install pyaudio"
            )
        self._device_name = device_name
        self._sample_rate = sample_rate
        self._chunk_size = chunk_size
        self._pa: Any = None
        self._stream: Any = None

    def _device_index(self) -> int | None:
        if self._device_name == "default":
            return None
        for i in range(self._pa.get_device_count()):
            info = self._pa.get_device_info_by_index(i)
            if self._device_name.lower() in info["name"].lower() and info["maxInputChannels"] > 0:
                return i
        logger.warning(f"Input device {self._device_name!r} not found, using default")
        return None

    def open(self) -> None:
        """Open the input stream.

        Raises:
            OSError: If the device cannot be opened.
        """
        import pyaudio

        self._pa = pyaudio.PyAudio()
        try:
            self._stream = self._pa.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self._sample_rate,
                input=True,
                input_device_index=self._device_index(),
                frames_per_buffer=self._chunk_size,
            )
        except OSError:
            self._pa.terminate()
            self._pa = None
            raise

    def read(self, frames: int) -> bytes:
        return self._stream.read(frames, exception_on_overflow=False)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.stop_stream()
            self._stream.close()
            self._stream = None
        if self._pa is not None:
            self._pa.terminate()
            self._pa = None


class WhisperRecognizer:
    """One-shot recognizer: record one utterance, transcribe it, report."""

    def __init__(
        self,
        source: AudioSource | None = None,
        model: Any = None,
        model_size: str = "base.en",
        device: str = "cpu",
        compute_type: str = "int8",
        language: str = "en-US",
        chunk_size: int = 1024,
        max_seconds: float = 8.0,
        silence_ms: int = 1200,
        energy_threshold: float = 500.0,
    ) -> None:
        """Initialize the recognizer.

        Args:
            source: Audio input, defaults to the microphone.
            model: A loaded faster-whisper model. Loaded on first use
                   when omitted.
            model_size: Whisper model size (tiny.en, base.en, small.en...)
            device: Device to run on ("cpu", "cuda", "auto")
            compute_type: Computation type ("int8", "float16", "float32")
            language: BCP 47 tag; only the language part is passed on.
            chunk_size: Frames per read.
            max_seconds: Longest recording per capture.
            silence_ms: Pause after speech that ends the capture.
            energy_threshold: RMS level that counts as speech.

        Raises:
            UnsupportedCapabilityError: If faster-whisper or PyAudio is
                                        not installed.
        """
        if model is None and importlib.util.find_spec("faster_whisper") is None:
            raise UnsupportedCapabilityError(
                "recognition",
                "faster-whisper not available. Install with: pip install faster-whisper",
            )

        self._source = source or MicrophoneSource(chunk_size=chunk_size)
        self._model = model
        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type
        self._language = language.split("-")[0].lower() or "en"
        self._chunk_size = chunk_size
        self._max_seconds = max_seconds
        self._silence_ms = silence_ms
        self._energy_threshold = energy_threshold

        self._on_result: ResultCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._on_end: EndCallback | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
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
            return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Open the microphone and begin one capture.

        Raises:
            RuntimeError: If a capture is running or the microphone
                          cannot be opened.
        """
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                raise RuntimeError("recognition already started")

            try:
                self._source.open()
            except OSError as e:
                raise RuntimeError(f"Cannot open microphone: {e}") from e

            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()
        logger.debug("Whisper recognizer listening")

    def stop(self) -> None:
        """Abandon the current capture; on_end follows from the worker."""
        self._stop_event.set()

    def wait(self, timeout: float | None = None) -> None:
        """Block until the current capture has been reported."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def _run(self) -> None:
        try:
            audio = self._record()
            if self._stop_event.is_set():
                logger.debug("Capture stopped before transcription")
            elif audio is None:
                self._report_error("no-speech")
            else:
                self._transcribe_and_report(audio)
        except OSError as e:
            logger.warning(f"Audio capture failed: {e}")
            self._report_error("audio-capture")
        finally:
            if self._on_end:
                self._on_end()

    def _record(self) -> bytes | None:
        """Read until a pause after speech, the time limit, or stop().

        Returns:
            The recorded audio, or None if nothing loud enough was heard.
        """
        chunk_ms = self._chunk_size * 1000 / SAMPLE_RATE
        max_chunks = int(self._max_seconds * 1000 / chunk_ms)
        frames: list[bytes] = []
        heard_speech = False
        quiet_ms = 0.0

        try:
            for _ in range(max_chunks):
                if self._stop_event.is_set():
                    break
                chunk = self._source.read(self._chunk_size)
                frames.append(chunk)

                if calculate_energy(chunk) >= self._energy_threshold:
                    heard_speech = True
                    quiet_ms = 0.0
                elif heard_speech:
                    quiet_ms += chunk_ms
                    if quiet_ms >= self._silence_ms:
                        break
        finally:
            self._source.close()

        return b"".join(frames) if heard_speech else None

    def _ensure_model_loaded(self) -> None:
        if self._model is not None:
            return

        from faster_whisper import WhisperModel

        logger.info(
            f"Loading Whisper model: {self._model_size} "
            f"(device={self._device}, compute={self._compute_type})"
        )
        start = time.time()
        self._model = WhisperModel(
            self._model_size,
            device=self._device,
            compute_type=self._compute_type,
        )
        logger.info(f"Whisper model loaded in {(time.time() - start) * 1000:.0f}ms")

    def transcribe(self, audio: bytes) -> str:
        """Transcribe 16 kHz mono 16-bit PCM audio to text."""
        import numpy as np

        self._ensure_model_loaded()
        start = time.time()

        samples = np.frombuffer(audio, dtype=np.int16).astype(np.float32) / 32768.0
        segments, _ = self._model.transcribe(
            samples,
            language=self._language,
            beam_size=1,
            vad_filter=True,
        )
        text = " ".join(segment.text.strip() for segment in segments).strip()

        logger.debug(f"Transcribed in {(time.time() - start) * 1000:.0f}ms: {text[:50]!r}")
        return text

    def _transcribe_and_report(self, audio: bytes) -> None:
        try:
            text = self.transcribe(audio)
        except (RuntimeError, ValueError) as e:
            logger.error(f"Transcription failed: {e}")
            self._report_error("aborted")
            return

        if not text:
            self._report_error("no-speech")
        elif self._on_result:
            self._on_result(text)

    def _report_error(self, reason: str) -> None:
        if self._on_error:
            self._on_error(reason)


__all__ = ["AudioSource", "MicrophoneSource", "WhisperRecognizer", "calculate_energy"]
