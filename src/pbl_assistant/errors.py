"""Error types for the campus assistant.

Custom exceptions for configuration, storage, permission and voice
capability failures.
"""


class AssistantError(Exception):
    """Base exception for assistant-related errors."""

    pass


class UnsupportedCapabilityError(AssistantError):
    """Raised when a speech backend is not available on this host."""

    def __init__(self, capability: str, message: str | None = None) -> None:
        """Initialize capability error.

        Args:
            capability: Name of the missing capability (e.g., "recognition").
            message: Optional detail message.
        """
        super().__init__(message or f"Speech {capability} is not supported here")
        self.capability = capability


class RecognitionError(AssistantError):
    """Raised when the speech recognizer reports a failure."""

    def __init__(self, reason: str) -> None:
        """Initialize recognition error.

        Args:
            reason: Platform-reported failure reason.
        """
        super().__init__(f"Speech recognition failed: {reason}")
        self.reason = reason


class ConfigError(AssistantError, ValueError):
    """Raised when a configuration file is malformed."""

    pass


class PermissionDeniedError(AssistantError):
    """Raised when the acting user may not perform a notice board action."""

    pass


class StoreError(AssistantError):
    """Raised when a notice or reminder store cannot be read or written."""

    pass


__all__ = [
    "AssistantError",
    "ConfigError",
    "PermissionDeniedError",
    "RecognitionError",
    "StoreError",
    "UnsupportedCapabilityError",
]
