"""
Per-file compile configuration.

A FileSettings holds everything a preprocessor needs to handle one source file
for one build variant: defines, undefines, include search paths and the target
platform. Importers create them, nothing modifies them afterwards.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, Iterator, Optional, Tuple

from buildcfg.config.platform_profile import (
    PlatformProfile,
    PlatformType,
    get_platform_profile,
)

if TYPE_CHECKING:
    from buildcfg.config.settings import Settings


DEFINE_SEPARATOR = ";"


def from_native_separators(path: str) -> str:
    """Convert Windows path separators to forward slashes."""
    return path.replace("\\", "/")


@dataclass(frozen=True)
class FileSettings:
    """Compile configuration of a single source file."""

    filename: str
    defines: Tuple[str, ...] = ()  # 'NAME' or 'NAME=VALUE', in order, duplicates kept
    undefs: FrozenSet[str] = field(default_factory=frozenset)
    include_paths: Tuple[str, ...] = ()
    platform_type: Optional[PlatformType] = None  # None inherits the active profile

    @property
    def defines_string(self) -> str:
        """
        Render defines the way the preprocessor consumes them.

        Returns:
            Defines each suffixed with ';' (e.g., 'FOO=1;BAR;')
        """
        return "".join(define + DEFINE_SEPARATOR for define in self.defines)

    def define_pairs(self) -> Iterator[Tuple[str, Optional[str]]]:
        """
        Split defines into name and optional value.

        Example:
            For defines ('DEBUG', 'VERSION=2') yields
            ('DEBUG', None), ('VERSION', '2')
        """
        for define in self.defines:
            name, sep, value = define.partition("=")
            yield name, (value if sep else None)

    def resolve_platform(self, settings: "Settings") -> PlatformProfile:
        """
        Get the concrete platform profile for this file.

        Args:
            settings: Analysis settings holding the active profile

        Returns:
            The profile for platform_type, or the active profile when unset
        """
        if self.platform_type is None or self.platform_type == settings.platform.platform_type:
            return settings.platform
        return get_platform_profile(self.platform_type) or settings.platform

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "file": self.filename,
            "defines": list(self.defines),
            "undefs": sorted(self.undefs),
            "include_paths": list(self.include_paths),
            "platform": self.platform_type.value if self.platform_type else None,
        }
