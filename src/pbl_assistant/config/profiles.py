"""Configuration profile selection."""

import os
from enum import Enum

PROFILE_ENV_VAR = "PBL_PROFILE"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    TEST = "test"


def detect_profile() -> Profile:
    """Detect the configuration profile.

    Uses the PBL_PROFILE environment variable, falling back to dev.

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get(PROFILE_ENV_VAR, "").lower()
    for profile in Profile:
        if profile.value == env_profile:
            return profile
    return Profile.DEV


__all__ = ["PROFILE_ENV_VAR", "Profile", "detect_profile"]
