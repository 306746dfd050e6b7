"""buildcfg - compile configurations from build descriptors."""

from .config import PlatformProfile, PlatformType, Settings
from .project import FileSettings, import_project

__version__ = "0.1.0"

__all__ = [
    "PlatformProfile",
    "PlatformType",
    "Settings",
    "FileSettings",
    "import_project",
]
