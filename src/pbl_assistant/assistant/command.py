"""Command value passed from the dispatcher to the generator."""

from dataclasses import dataclass

from ..users import UserContext


@dataclass(frozen=True)
class Command:
    """A single user command.

    Attributes:
        text: Raw text as typed or transcribed.
        user: Acting user, or None for anonymous use.
    """

    text: str
    user: UserContext | None = None

    @property
    def lowered(self) -> str:
        return self.text.lower()


__all__ = ["Command"]
