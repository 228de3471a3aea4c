"""User context for assistant commands.

The assistant never authenticates anyone. It only reads who is signed in,
through a small provider interface.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from .errors import StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserContext:
    """The acting user, as far as the assistant is concerned.

    Attributes:
        display_name: Name used in greetings.
        department: Department code (e.g., "CSE"), if known.
        email: Account email, if known.
        is_admin: Whether the account may publish notices.
    """

    display_name: str | None = None
    department: str | None = None
    email: str | None = None
    is_admin: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserContext":
        """Create a user context from a stored session record.

        Accepts both the stored camelCase keys (``fullName``, ``isAdmin``)
        and snake_case keys.
        """
        return cls(
            display_name=data.get("fullName") or data.get("display_name"),
            department=data.get("department"),
            email=data.get("email"),
            is_admin=bool(data.get("isAdmin", data.get("is_admin", False))),
        )


class UserProvider(Protocol):
    """Protocol for looking up the current user."""

    def current_user(self) -> UserContext | None: ...


class StaticUserProvider:
    """Provider that always returns the same user (or nobody)."""

    def __init__(self, user: UserContext | None = None) -> None:
        self._user = user

    def current_user(self) -> UserContext | None:
        return self._user

    def set_user(self, user: UserContext | None) -> None:
        """Replace the current user."""
        self._user = user


class SessionFileUserProvider:
    """Provider that reads the signed-in user from a JSON session file.

    The file holds a single user record, or ``null`` when nobody is signed
    in. A missing file also means nobody is signed in.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    def current_user(self) -> UserContext | None:
        if not self._path.exists():
            return None

        try:
            with open(self._path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read session file {self._path}: {e}") from e

        if not isinstance(data, dict):
            return None
        return UserContext.from_dict(data)


def is_admin(user: UserContext | None) -> bool:
    """Check whether a user may publish and delete notices."""
    if user is None:
        return False
    return user.is_admin or "admin" in (user.email or "")


__all__ = [
    "SessionFileUserProvider",
    "StaticUserProvider",
    "UserContext",
    "UserProvider",
    "is_admin",
]
