"""Voice module for the campus assistant.

Provides the voice session state machine and speech backends:
- Console recognizer: a typed line stands in for speech
- Whisper recognizer: microphone capture transcribed by faster-whisper
- Subprocess player: `say` on macOS, `espeak-ng`/`espeak` elsewhere
- Mock recognizer/player for tests
"""

import logging
from typing import TYPE_CHECKING

from ..errors import UnsupportedCapabilityError
from .console import ConsoleRecognizer
from .mock import MockPlayer, MockRecognizer
from .player import SpeechPlayer, clean_for_speech
from .recognizer import SpeechRecognizer
from .session import QUICK_COMMANDS, VoiceSession, VoiceState
from .subprocess_player import ENGINES, SubprocessPlayer, find_engine

if TYPE_CHECKING:
    from ..config import VoiceConfig

logger = logging.getLogger(__name__)

PLAYER_ENGINES: dict[str, tuple[str, ...]] = {
    "auto": ENGINES,
    "say": ("say",),
    "espeak": ("espeak-ng", "espeak"),
}


def create_recognizer(
    config: "VoiceConfig | None" = None,
    use_mock: bool = False,
) -> SpeechRecognizer | None:
    """Create the configured speech recognizer.

    Args:
        config: Voice configuration (optional)
        use_mock: If True, return a mock recognizer for testing

    Returns:
        A recognizer, or None when voice input is disabled.

    Raises:
        UnsupportedCapabilityError: If ``recognizer: whisper`` is set but
            faster-whisper or PyAudio is not installed.
        ValueError: If the recognizer name is unknown.
    """
    if use_mock:
        return MockRecognizer()

    if config is None:
        return ConsoleRecognizer()

    if not config.enabled or config.recognizer == "none":
        logger.info("Voice: recognition disabled")
        return None

    if config.recognizer == "console":
        return ConsoleRecognizer()

    if config.recognizer == "whisper":
        from .whisper import MicrophoneSource, WhisperRecognizer

        recognizer = WhisperRecognizer(
            source=MicrophoneSource(device_name=config.input_device),
            model_size=config.whisper_model,
            device=config.whisper_device,
            compute_type=config.whisper_compute_type,
            language=config.language,
            max_seconds=config.listen_max_seconds,
            silence_ms=config.listen_silence_ms,
            energy_threshold=config.listen_energy_threshold,
        )
        logger.info(f"Voice: using Whisper {config.whisper_model} for speech input")
        return recognizer

    raise ValueError(f"Unknown voice recognizer: {config.recognizer!r}")


def create_player(
    config: "VoiceConfig | None" = None,
    use_mock: bool = False,
) -> SpeechPlayer | None:
    """Create the speech player for this host.

    Args:
        config: Voice configuration (optional)
        use_mock: If True, return a mock player for testing

    Returns:
        A player, or None when speech output is disabled or, with
        ``player: auto``, when no TTS command is installed.

    Raises:
        UnsupportedCapabilityError: If a specific player was requested but
            its command is not installed.
    """
    if use_mock:
        return MockPlayer()

    choice = "auto"
    language, rate, pitch, volume = "en-US", 0.9, 1.0, 0.8
    if config is not None:
        if not config.enabled:
            return None
        choice = config.player
        language, rate, pitch, volume = config.language, config.rate, config.pitch, config.volume

    if choice == "none":
        logger.info("Voice: speech output disabled")
        return None

    if choice not in PLAYER_ENGINES:
        raise ValueError(f"Unknown voice player: {choice!r}")

    engine = find_engine(PLAYER_ENGINES[choice])
    if engine is None:
        if choice != "auto":
            raise UnsupportedCapabilityError("synthesis", f"TTS command {choice!r} not found")
        logger.warning("Voice: no TTS command found, speech output disabled")
        return None

    logger.info(f"Voice: using {engine} for speech output")
    return SubprocessPlayer(
        engine_path=engine,
        language=language,
        rate=rate,
        pitch=pitch,
        volume=volume,
    )


__all__ = [
    "ConsoleRecognizer",
    "MockPlayer",
    "MockRecognizer",
    "QUICK_COMMANDS",
    "SpeechPlayer",
    "SpeechRecognizer",
    "SubprocessPlayer",
    "VoiceSession",
    "VoiceState",
    "clean_for_speech",
    "create_player",
    "create_recognizer",
]
