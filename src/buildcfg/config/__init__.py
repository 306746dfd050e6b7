"""Platform profiles and analysis settings for buildcfg."""

from .platform_profile import (
    PLATFORM_PROFILES,
    PlatformFileError,
    PlatformProfile,
    PlatformType,
    UnsupportedPlatformError,
    default_platform_type,
    get_platform_profile,
    load_platform_file,
    select_profile,
)
from .settings import Settings

__all__ = [
    "PLATFORM_PROFILES",
    "PlatformFileError",
    "PlatformProfile",
    "PlatformType",
    "UnsupportedPlatformError",
    "default_platform_type",
    "get_platform_profile",
    "load_platform_file",
    "select_profile",
    "Settings",
]
