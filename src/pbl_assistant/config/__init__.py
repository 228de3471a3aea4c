"""Configuration module for the campus assistant.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class StorageConfig:
    """Where notices and reminders live.

    ``backend`` is "json" (files under ``data_dir``) or "mongodb".
    """

    backend: str = "json"
    data_dir: str = "~/.pbl"
    notices_file: str = "notices.json"
    reminders_file: str = "reminders.json"
    mongodb_uri: str = "mongodb://localhost:27017"
    database: str = "pbl"
    timeout_ms: int = 5000


@dataclass
class VoiceConfig:
    """Speech input/output configuration.

    ``recognizer`` is "console" (typed lines), "whisper" (microphone plus
    faster-whisper) or "none"; ``player`` is "auto", "say", "espeak" or
    "none". The ``whisper_*`` and ``listen_*`` settings only apply to the
    whisper recognizer.
    """

    enabled: bool = True
    recognizer: str = "console"
    player: str = "auto"
    language: str = "en-US"
    rate: float = 0.9
    pitch: float = 1.0
    volume: float = 0.8
    whisper_model: str = "base.en"
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"
    input_device: str = "default"
    listen_max_seconds: float = 8.0
    listen_silence_ms: int = 1200
    listen_energy_threshold: float = 500.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class UserConfig:
    """Who is using the assistant.

    A session file, when given, wins over the fixed name and department.
    """

    display_name: str | None = None
    department: str | None = None
    email: str | None = None
    is_admin: bool = False
    session_file: str | None = None


@dataclass
class AssistantConfig:
    """Main campus assistant configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    voice: VoiceConfig = field(default_factory=VoiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    user: UserConfig = field(default_factory=UserConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> AssistantConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> AssistantConfig:
        """Load configuration by profile name (dev, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


# Public API
__all__ = [
    "AssistantConfig",
    "ConfigLoader",
    "LoggingConfig",
    "StorageConfig",
    "UserConfig",
    "VoiceConfig",
]
