"""
Analysis settings.

Settings is the explicit context that importers and the analysis share: the
active platform profile and the ordered collection of imported per-file
compile configurations. Select or load the platform first, then import.

Usage:
    settings = Settings()
    settings.select_platform("unix64")
    settings.import_project(Path("compile_commands.json"))
    for fs in settings.file_settings:
        print(fs.filename, fs.defines_string)
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

from .platform_profile import (
    PlatformFileError,
    PlatformProfile,
    PlatformType,
    UnsupportedPlatformError,
    default_platform_type,
    get_platform_profile,
    load_platform_file,
    select_profile,
)

if TYPE_CHECKING:
    from buildcfg.project.condition import ConditionEvaluator
    from buildcfg.project.file_settings import FileSettings

logger = logging.getLogger(__name__)


class Settings:
    """Active platform profile plus imported compile configurations."""

    def __init__(self, platform_type: Optional[PlatformType] = None):
        """
        Initialize settings.

        Args:
            platform_type: Initial platform (default: the analysis host's platform)

        Raises:
            UnsupportedPlatformError: If platform_type has no built-in profile (CUSTOM)
        """
        platform_type = platform_type or default_platform_type()
        profile = get_platform_profile(platform_type)
        if profile is None:
            raise UnsupportedPlatformError(f"No built-in profile for {platform_type.value}")
        self.platform: PlatformProfile = profile
        self.file_settings: List["FileSettings"] = []

    def select_platform(self, name: Union[str, PlatformType]) -> bool:
        """
        Make a compiled-in platform profile the active one.

        Args:
            name: Platform name (e.g., 'win32A', 'unix64') or PlatformType

        Returns:
            True on success, False for an unknown name (active profile unchanged)
        """
        selected, self.platform = select_profile(name, self.platform)
        if not selected:
            logger.warning(f"Unsupported platform: {name}")
        return selected

    def load_platform_file(self, path: Union[str, Path]) -> bool:
        """
        Override the active profile from a platform XML file.

        Args:
            path: Path to the platform file

        Returns:
            True on success, False if the file is unreadable or malformed
            (active profile unchanged)
        """
        try:
            self.platform = load_platform_file(Path(path), self.platform)
        except PlatformFileError as e:
            logger.warning(str(e))
            return False
        return True

    def import_project(
        self, path: Union[str, Path], evaluator: Optional["ConditionEvaluator"] = None
    ) -> List["FileSettings"]:
        """
        Import a build descriptor and append its configurations.

        Args:
            path: compile_commands.json or .vcxproj file
            evaluator: Condition evaluator for vcxproj files (optional)

        Returns:
            The FileSettings added by this import
        """
        from buildcfg.project.importer import import_project

        imported = import_project(path, evaluator)
        self.file_settings.extend(imported)
        return imported
