"""
Profile management for different environments.

Supports development, staging and production profiles.
"""

import os
from typing import Literal, Optional, get_args

ProfileType = Literal["development", "staging", "production"]

PROFILE_ENV_VAR = "NOVA_CLIENT_ENV"


def get_env_file_path(profile: Optional[ProfileType] = None) -> str:
    """
    Get .env file path for profile.

    Args:
        profile: Profile name (development/staging/production)

    Returns:
        Path to .env file

    Example:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)
        '.env'
    """
    if profile is None:
        profile = detect_profile()

    if profile is None:
        return ".env"

    return f".env.{profile}"


def detect_profile() -> Optional[ProfileType]:
    """
    Current profile from NOVA_CLIENT_ENV.

    Unknown values are ignored (default .env is used).

    Example:
        >>> os.environ["NOVA_CLIENT_ENV"] = "staging"
        >>> detect_profile()
        'staging'
    """
    env = os.getenv(PROFILE_ENV_VAR)
    if env in get_args(ProfileType):
        return env
    return None


class ProfileConfig:
    """
    Profile-based settings loader.

    Example:
        >>> settings = ProfileConfig(profile="production").load()
    """

    def __init__(self, profile: Optional[ProfileType] = None):
        self.profile = profile or detect_profile()
        self.env_file = get_env_file_path(self.profile)

    def load(self) -> "NovaClientSettings":
        """Load settings from the profile-specific .env file."""
        from .validator import NovaClientSettings

        return NovaClientSettings(_env_file=self.env_file)

    def __repr__(self) -> str:
        return f"ProfileConfig(profile={self.profile!r}, env_file={self.env_file!r})"
