"""
Target platform ABI profiles.

This module centralizes the primitive type layout (byte widths, bits per char,
plain char signedness) of the platforms code can be analyzed for. Analysis
must follow the data layout of the target, not the host running the analysis,
so profiles can be selected by name or overridden from a platform XML file.

Example platform file:
    <?xml version="1.0"?>
    <platform>
      <char_bit>8</char_bit>
      <default-sign>u</default-sign>
      <sizeof>
        <int>2</int>
        <pointer>2</pointer>
      </sizeof>
    </platform>
"""

import ctypes
import dataclasses
import logging
import platform as host_platform
import sys
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class PlatformFileError(Exception):
    """Exception raised when a platform file cannot be read or is malformed."""

    pass


class UnsupportedPlatformError(Exception):
    """Exception raised for platform names that have no profile."""

    pass


class PlatformType(Enum):
    """Identity of a platform profile."""

    UNSPECIFIED = "unspecified"
    NATIVE = "native"
    WIN32A = "win32A"
    WIN32W = "win32W"
    WIN64 = "win64"
    UNIX32 = "unix32"
    UNIX64 = "unix64"
    CUSTOM = "custom"

    @classmethod
    def from_name(cls, name: str) -> "PlatformType":
        """
        Look up a platform type by its command-line name.

        Args:
            name: Platform name (e.g., 'win64', 'unix32'), case-insensitive

        Returns:
            Matching PlatformType

        Raises:
            UnsupportedPlatformError: If the name is unknown
        """
        wanted = name.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise UnsupportedPlatformError(f"Unsupported platform: {name}")


@dataclass(frozen=True)
class PlatformProfile:
    """Primitive type layout of a target platform."""

    platform_type: PlatformType
    sizeof_bool: int
    sizeof_short: int
    sizeof_int: int
    sizeof_long: int
    sizeof_long_long: int
    sizeof_float: int
    sizeof_double: int
    sizeof_long_double: int
    sizeof_wchar_t: int
    sizeof_size_t: int
    sizeof_pointer: int
    default_sign: str = ""  # 's', 'u' or '' when unspecified
    char_bit: int = 8

    @property
    def short_bit(self) -> int:
        return self.char_bit * self.sizeof_short

    @property
    def int_bit(self) -> int:
        return self.char_bit * self.sizeof_int

    @property
    def long_bit(self) -> int:
        return self.char_bit * self.sizeof_long

    @property
    def long_long_bit(self) -> int:
        return self.char_bit * self.sizeof_long_long

    @property
    def name(self) -> str:
        """Command-line name of this profile."""
        return self.platform_type.value


# Machine prefixes where plain char is unsigned in the usual (SysV) ABI
_UNSIGNED_CHAR_MACHINES = ("arm", "aarch64", "ppc", "powerpc", "s390", "riscv")


def _host_char_sign() -> str:
    """Detect plain char signedness of the analysis host."""
    machine = host_platform.machine().lower()
    if sys.platform in ("win32", "darwin"):
        return "s"
    if machine.startswith(_UNSIGNED_CHAR_MACHINES):
        return "u"
    return "s"


def _host_profile(platform_type: PlatformType, default_sign: str) -> PlatformProfile:
    """Build a profile from the primitive sizes of the analysis host."""
    return PlatformProfile(
        platform_type=platform_type,
        sizeof_bool=ctypes.sizeof(ctypes.c_bool),
        sizeof_short=ctypes.sizeof(ctypes.c_short),
        sizeof_int=ctypes.sizeof(ctypes.c_int),
        sizeof_long=ctypes.sizeof(ctypes.c_long),
        sizeof_long_long=ctypes.sizeof(ctypes.c_longlong),
        sizeof_float=ctypes.sizeof(ctypes.c_float),
        sizeof_double=ctypes.sizeof(ctypes.c_double),
        sizeof_long_double=ctypes.sizeof(ctypes.c_longdouble),
        sizeof_wchar_t=ctypes.sizeof(ctypes.c_wchar),
        sizeof_size_t=ctypes.sizeof(ctypes.c_size_t),
        sizeof_pointer=ctypes.sizeof(ctypes.c_void_p),
        default_sign=default_sign,
    )


def _windows_profile(platform_type: PlatformType, sizeof_pointer: int) -> PlatformProfile:
    return PlatformProfile(
        platform_type=platform_type,
        sizeof_bool=1,  # 4 in Visual C++ 4.2
        sizeof_short=2,
        sizeof_int=4,
        sizeof_long=4,
        sizeof_long_long=8,
        sizeof_float=4,
        sizeof_double=8,
        sizeof_long_double=8,
        sizeof_wchar_t=2,
        sizeof_size_t=sizeof_pointer,
        sizeof_pointer=sizeof_pointer,
    )


PLATFORM_PROFILES: Dict[PlatformType, PlatformProfile] = {
    PlatformType.UNSPECIFIED: _host_profile(PlatformType.UNSPECIFIED, ""),
    PlatformType.NATIVE: _host_profile(PlatformType.NATIVE, _host_char_sign()),
    PlatformType.WIN32A: _windows_profile(PlatformType.WIN32A, 4),
    PlatformType.WIN32W: _windows_profile(PlatformType.WIN32W, 4),
    PlatformType.WIN64: _windows_profile(PlatformType.WIN64, 8),
    PlatformType.UNIX32: PlatformProfile(
        platform_type=PlatformType.UNIX32,
        sizeof_bool=1,
        sizeof_short=2,
        sizeof_int=4,
        sizeof_long=4,
        sizeof_long_long=8,
        sizeof_float=4,
        sizeof_double=8,
        sizeof_long_double=12,
        sizeof_wchar_t=4,
        sizeof_size_t=4,
        sizeof_pointer=4,
    ),
    PlatformType.UNIX64: PlatformProfile(
        platform_type=PlatformType.UNIX64,
        sizeof_bool=1,
        sizeof_short=2,
        sizeof_int=4,
        sizeof_long=8,
        sizeof_long_long=8,
        sizeof_float=4,
        sizeof_double=8,
        sizeof_long_double=16,
        sizeof_wchar_t=4,
        sizeof_size_t=8,
        sizeof_pointer=8,
    ),
}


def default_platform_type() -> PlatformType:
    """
    Get the platform the analysis defaults to.

    Windows hosts default to the matching Windows ABI, everything else to the
    native layout of the host.

    Returns:
        PlatformType for the analysis host
    """
    if sys.platform == "win32":
        if ctypes.sizeof(ctypes.c_void_p) == 8:
            return PlatformType.WIN64
        return PlatformType.WIN32A
    return PlatformType.NATIVE


def get_platform_profile(name: Union[str, PlatformType]) -> Optional[PlatformProfile]:
    """
    Get a compiled-in platform profile.

    Args:
        name: Platform name (e.g., 'win64') or PlatformType

    Returns:
        PlatformProfile if known, None otherwise
    """
    if isinstance(name, PlatformType):
        return PLATFORM_PROFILES.get(name)
    try:
        return PLATFORM_PROFILES.get(PlatformType.from_name(name))
    except UnsupportedPlatformError:
        return None


def select_profile(
    name: Union[str, PlatformType], current: PlatformProfile
) -> Tuple[bool, PlatformProfile]:
    """
    Select a named profile in place of the current one.

    Args:
        name: Platform name or PlatformType
        current: Profile that stays active when the name is unknown

    Returns:
        (True, selected profile) on success, (False, current) otherwise
    """
    profile = get_platform_profile(name)
    if profile is None:
        return False, current
    return True, profile


# <sizeof> child element -> PlatformProfile field
SIZEOF_FIELDS = {
    "bool": "sizeof_bool",
    "short": "sizeof_short",
    "int": "sizeof_int",
    "long": "sizeof_long",
    "long-long": "sizeof_long_long",
    "float": "sizeof_float",
    "double": "sizeof_double",
    "long-double": "sizeof_long_double",
    "pointer": "sizeof_pointer",
    "size_t": "sizeof_size_t",
    "wchar_t": "sizeof_wchar_t",
}


def _parse_int(element: ET.Element, path: Path) -> Optional[int]:
    """Decimal value of an element, None (with a warning) if it has none."""
    text = (element.text or "").strip()
    try:
        return int(text, 10)
    except ValueError:
        logger.warning(f"Ignoring invalid value for <{element.tag}> in {path}: '{text}'")
        return None


def load_platform_file(path: Path, base: PlatformProfile) -> PlatformProfile:
    """
    Load a platform XML file on top of an existing profile.

    Only the fields present in the file are overwritten, everything else keeps
    the value from ``base``. Derived bit widths follow the new char_bit.
    Fields with a blank or non-numeric value, and a default-sign other than
    s/u, are skipped with a warning.

    Args:
        path: Path to the platform XML file
        base: Profile supplying values for fields the file does not set

    Returns:
        New PlatformProfile with platform_type CUSTOM

    Raises:
        PlatformFileError: If the file cannot be read, is not valid XML or has
            no <platform> root
    """
    path = Path(path)
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        raise PlatformFileError(f"Failed to read platform file {path}: {e}") from e

    if root.tag != "platform":
        raise PlatformFileError(
            f"Expected <platform> root in {path}, found <{root.tag}>"
        )

    overrides: Dict[str, Union[int, str]] = {}
    for node in root:
        if node.tag == "default-sign":
            sign = (node.text or "").strip()[:1]
            if sign in ("s", "u"):
                overrides["default_sign"] = sign
            else:
                logger.warning(
                    f"Ignoring invalid value for <default-sign> in {path}: '{node.text}'"
                )
        elif node.tag == "char_bit":
            value = _parse_int(node, path)
            if value is not None:
                overrides["char_bit"] = value
        elif node.tag == "sizeof":
            for size_node in node:
                field_name = SIZEOF_FIELDS.get(size_node.tag)
                if not field_name:
                    continue
                value = _parse_int(size_node, path)
                if value is not None:
                    overrides[field_name] = value

    return dataclasses.replace(base, platform_type=PlatformType.CUSTOM, **overrides)
