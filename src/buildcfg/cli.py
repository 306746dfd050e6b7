"""
Command-line interface for buildcfg.

This module provides the `buildcfg` CLI tool for inspecting the compile
configurations imported from a build descriptor.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from buildcfg import __version__
from buildcfg.cli_utils import (
    ErrorFormatter,
    PathValidator,
    SettingsFormatter,
    configure_logging,
)
from buildcfg.config import PLATFORM_PROFILES, Settings


@dataclass
class ImportArgs:
    """Arguments for the import command."""

    descriptor: Path
    platform: Optional[str] = None
    platform_file: Optional[Path] = None
    json: bool = False
    verbose: bool = False


@dataclass
class PlatformsArgs:
    """Arguments for the platforms command."""

    platform: Optional[str] = None
    platform_file: Optional[Path] = None
    verbose: bool = False


def _apply_platform(settings: Settings, platform: Optional[str], platform_file: Optional[Path]) -> None:
    """Select and/or load the platform profile, exiting on failure."""
    if platform and not settings.select_platform(platform):
        names = ", ".join(p.name for p in PLATFORM_PROFILES.values())
        ErrorFormatter.print_error(
            "Unsupported platform", f"'{platform}' is not one of: {names}"
        )
        sys.exit(1)
    if platform_file and not settings.load_platform_file(platform_file):
        ErrorFormatter.print_error(
            "Invalid platform file", f"Failed to load platform file: {platform_file}"
        )
        sys.exit(1)


def import_command(args: ImportArgs) -> None:
    """Import a build descriptor and print its compile configurations.

    Examples:
        buildcfg import compile_commands.json
        buildcfg import app.vcxproj --json
        buildcfg import app.vcxproj --platform unix64
        buildcfg import compile_commands.json --platform-file avr8.xml
    """
    try:
        settings = Settings()
        _apply_platform(settings, args.platform, args.platform_file)

        file_settings = settings.import_project(args.descriptor)

        if args.json:
            print(SettingsFormatter.format_json(file_settings))
        else:
            for fs in file_settings:
                print(SettingsFormatter.format_file_settings(fs))
            if not file_settings:
                ErrorFormatter.print_warning(f"No files found in {args.descriptor}")
        sys.exit(0)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def platforms_command(args: PlatformsArgs) -> None:
    """List the built-in platform profiles.

    Examples:
        buildcfg platforms
        buildcfg platforms --platform win64
    """
    settings = Settings()
    _apply_platform(settings, args.platform, args.platform_file)

    profiles = list(PLATFORM_PROFILES.values())
    if settings.platform.platform_type not in PLATFORM_PROFILES:
        profiles.append(settings.platform)
    print(SettingsFormatter.format_profiles(profiles, settings.platform))
    sys.exit(0)


def _add_platform_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p",
        "--platform",
        default=None,
        help="Target platform profile (e.g., win32A, win64, unix32, unix64, native)",
    )
    parser.add_argument(
        "--platform-file",
        type=Path,
        default=None,
        help="Platform XML file overriding the selected profile",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """buildcfg - compile configurations from build descriptors."""
    parser = argparse.ArgumentParser(
        prog="buildcfg",
        description="Import compile configurations from compile_commands.json and .vcxproj files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"buildcfg {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Import command
    import_parser = subparsers.add_parser(
        "import",
        help="Import a build descriptor",
    )
    import_parser.add_argument(
        "descriptor",
        type=Path,
        help="compile_commands.json or .vcxproj file",
    )
    import_parser.add_argument(
        "--json",
        action="store_true",
        help="Print configurations as JSON",
    )
    _add_platform_arguments(import_parser)

    # Platforms command
    platforms_parser = subparsers.add_parser(
        "platforms",
        help="List platform profiles",
    )
    _add_platform_arguments(platforms_parser)

    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    configure_logging(parsed_args.verbose)

    if parsed_args.command == "import":
        PathValidator.validate_file(parsed_args.descriptor)
        import_command(
            ImportArgs(
                descriptor=parsed_args.descriptor,
                platform=parsed_args.platform,
                platform_file=parsed_args.platform_file,
                json=parsed_args.json,
                verbose=parsed_args.verbose,
            )
        )
    elif parsed_args.command == "platforms":
        platforms_command(
            PlatformsArgs(
                platform=parsed_args.platform,
                platform_file=parsed_args.platform_file,
                verbose=parsed_args.verbose,
            )
        )


if __name__ == "__main__":
    main()
