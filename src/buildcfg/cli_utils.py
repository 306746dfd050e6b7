"""CLI utility functions for buildcfg.

This module provides common utilities used across CLI commands including:
- Formatting of compile configurations and platform profiles
- Error handling and formatting
- Path validation
"""

import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from buildcfg.config import PlatformProfile
from buildcfg.project import FileSettings


def configure_logging(verbose: bool = False) -> None:
    """Route buildcfg log records to stderr.

    Args:
        verbose: Show debug records instead of warnings only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class SettingsFormatter:
    """Renders imported compile configurations and platform profiles."""

    @staticmethod
    def format_file_settings(file_settings: FileSettings) -> str:
        """Format one compile configuration as an indented text block.

        Args:
            file_settings: Configuration to format

        Returns:
            Multi-line string
        """
        platform = (
            file_settings.platform_type.value if file_settings.platform_type else "(active)"
        )
        lines = [
            file_settings.filename,
            f"  platform: {platform}",
            f"  defines:  {file_settings.defines_string}",
        ]
        if file_settings.undefs:
            lines.append(f"  undefs:   {', '.join(sorted(file_settings.undefs))}")
        for include_path in file_settings.include_paths:
            lines.append(f"  include:  {include_path}")
        return "\n".join(lines)

    @staticmethod
    def format_json(file_settings: Iterable[FileSettings]) -> str:
        """Format compile configurations as a JSON array."""
        return json.dumps([fs.to_dict() for fs in file_settings], indent=2)

    @staticmethod
    def format_profile(profile: PlatformProfile, active: bool = False) -> str:
        """Format a platform profile as a single table row.

        Args:
            profile: Profile to format
            active: Mark the row as the active profile

        Returns:
            Table row string
        """
        marker = "*" if active else " "
        sign = profile.default_sign or "-"
        return (
            f"{marker} {profile.name:<12} "
            f"short={profile.short_bit:<3} int={profile.int_bit:<3} "
            f"long={profile.long_bit:<3} long long={profile.long_long_bit:<3} "
            f"pointer={profile.sizeof_pointer} sign={sign}"
        )

    @staticmethod
    def format_profiles(profiles: List[PlatformProfile], active: PlatformProfile) -> str:
        return "\n".join(
            SettingsFormatter.format_profile(p, p.platform_type == active.platform_type)
            for p in profiles
        )


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Unsupported platform")
            message: Error message details
        """
        print(file=sys.stderr)
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        print(file=sys.stderr)
        print(message, file=sys.stderr)
        print(file=sys.stderr)

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message.

        Args:
            message: Warning message
        """
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}", file=sys.stderr)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Import interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)

        sys.exit(1)


class PathValidator:
    """Validates descriptor and platform file paths."""

    @staticmethod
    def validate_file(path: Path) -> None:
        """Validate that a path exists and is a regular file.

        Args:
            path: Path to validate

        Raises:
            SystemExit: If path doesn't exist or isn't a file
        """
        if not path.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {path}{ErrorFormatter.RESET}",
                file=sys.stderr,
            )
            sys.exit(2)
        if not path.is_file():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a file: {path}{ErrorFormatter.RESET}",
                file=sys.stderr,
            )
            sys.exit(2)
