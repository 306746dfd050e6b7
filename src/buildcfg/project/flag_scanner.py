"""Compiler command-line flag scanning.

This module extracts single-character flags (-D, /D, -I, ...) from a raw
compiler invocation string.

Design:
    - A flag starts with '/' or '-' directly after a space
    - The next character is the flag kind, the rest of the token up to the
      next space is its argument
    - A token cut off by the end of the string ends there
    - Nothing here raises: tokens that are not flags are skipped
"""

from enum import Enum
from typing import List, Tuple

FLAG_PREFIXES = ("/", "-")


class ScanState(Enum):
    """States of the flag scanner."""

    SEEK_SPACE = "seek_space"  # looking for the space that starts a token
    FLAG_PREFIX = "flag_prefix"  # first character of a token
    FLAG_KIND = "flag_kind"  # character after '/' or '-'
    ARGUMENT = "argument"  # collecting the flag argument


class FlagScanner:
    """Single-character lookahead scanner over a compiler command.

    Usage:
        flags = FlagScanner("gcc -DFOO=1 -Iinc a.c").scan()
        # [('D', 'FOO=1'), ('I', 'inc')]
    """

    def __init__(self, command: str):
        self.command = command
        self.state = ScanState.SEEK_SPACE
        self._kind = ""
        self._argument: List[str] = []
        self._flags: List[Tuple[str, str]] = []

    def scan(self) -> List[Tuple[str, str]]:
        """Scan the command.

        Returns:
            List of (kind, argument) tuples in encounter order
        """
        self.state = ScanState.SEEK_SPACE
        self._flags = []
        for char in self.command:
            self._step(char)
        if self.state == ScanState.ARGUMENT:
            self._emit()
        return self._flags

    def _step(self, char: str) -> None:
        if self.state == ScanState.SEEK_SPACE:
            if char == " ":
                self.state = ScanState.FLAG_PREFIX
        elif self.state == ScanState.FLAG_PREFIX:
            if char in FLAG_PREFIXES:
                self.state = ScanState.FLAG_KIND
            elif char != " ":
                self.state = ScanState.SEEK_SPACE
        elif self.state == ScanState.FLAG_KIND:
            self._kind = char
            self._argument = []
            # A space as flag kind also starts the next token
            self.state = ScanState.FLAG_PREFIX if char == " " else ScanState.ARGUMENT
        elif self.state == ScanState.ARGUMENT:
            if char == " ":
                self._emit()
                self.state = ScanState.FLAG_PREFIX
            else:
                self._argument.append(char)

    def _emit(self) -> None:
        self._flags.append((self._kind, "".join(self._argument)))


def scan_command_flags(command: str) -> List[Tuple[str, str]]:
    """Extract (kind, argument) flag tuples from a compiler command.

    Args:
        command: Raw compiler invocation

    Returns:
        List of (kind, argument) tuples; arguments may be empty

    Example:
        >>> scan_command_flags('cl.exe /DWIN32 /Iinclude -UNDEBUG x.c')
        [('D', 'WIN32'), ('I', 'include'), ('U', 'NDEBUG')]
    """
    return FlagScanner(command).scan()
