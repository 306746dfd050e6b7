"""
compile_commands.json importer.

A compilation database is a JSON array of records:
    [
      {"directory": "/src", "file": "a.c", "command": "gcc -DFOO=1 -Iinc -c a.c"}
    ]

Each record with a file and a command becomes one FileSettings. Defines,
undefines and include paths are taken from the -D/-U/-I (or /D, /U, /I)
flags of the command. Import is best effort: a broken record or an
unparseable command never aborts the rest of the import.
"""

import json
import logging
from typing import IO, Any, Dict, List, Optional

from .file_settings import FileSettings, from_native_separators
from .flag_scanner import scan_command_flags

logger = logging.getLogger(__name__)


def _record_command(record: Dict[str, Any]) -> Optional[str]:
    """Get the command string of a record, joining the 'arguments' form."""
    command = record.get("command")
    if isinstance(command, str):
        return command
    arguments = record.get("arguments")
    if isinstance(arguments, list) and all(isinstance(arg, str) for arg in arguments):
        return " ".join(arguments)
    return None


def file_settings_from_command(filename: str, command: str) -> FileSettings:
    """
    Build the compile configuration described by one compiler invocation.

    Args:
        filename: Source file of the invocation
        command: Compiler command line

    Returns:
        FileSettings with defines, undefines and include paths of the command

    Example:
        file_settings_from_command("a.c", "gcc -DFOO=1 -Ibar a.c")
        # FileSettings(filename='a.c', defines=('FOO=1',), include_paths=('bar',))
    """
    defines = []
    undefs = set()
    include_paths = []
    for kind, argument in scan_command_flags(command):
        if not argument:
            continue
        if kind == "D":
            defines.append(argument)
        elif kind == "U":
            undefs.add(argument)
        elif kind == "I":
            include_paths.append(argument)

    return FileSettings(
        filename=from_native_separators(filename),
        defines=tuple(defines),
        undefs=frozenset(undefs),
        include_paths=tuple(include_paths),
    )


def _salvage_records(text: str) -> List[Any]:
    """
    Decode every complete JSON object of a damaged compilation database.

    Each '{' is tried as the start of a record. A record that decodes is kept
    and scanning resumes after it, so a trailing comma or a log cut off
    mid-record loses only the broken part.
    """
    decoder = json.JSONDecoder()
    records = []
    start = text.find("{")
    while start != -1:
        try:
            record, end = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        records.append(record)
        start = text.find("{", end)
    return records


def import_compile_commands(stream: IO[str]) -> List[FileSettings]:
    """
    Import a compilation database.

    Args:
        stream: Text stream with compile_commands.json content

    Returns:
        One FileSettings per record with a non-empty file and command, in
        file order. If the stream is not valid JSON, the complete records
        that can still be decoded are imported.
    """
    try:
        text = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read compilation database: {e}")
        return []

    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        records = _salvage_records(text)
        logger.warning(
            f"Failed to parse compilation database: {e}; "
            f"recovered {len(records)} complete records"
        )
    else:
        if not isinstance(records, list):
            logger.warning("Compilation database is not a JSON array")
            return []

    file_settings = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.debug(f"Skipping record {index}: not an object")
            continue
        filename = record.get("file")
        command = _record_command(record)
        if not isinstance(filename, str) or not filename or not command:
            logger.debug(f"Skipping record {index}: missing file or command")
            continue
        file_settings.append(file_settings_from_command(filename, command))

    logger.debug(f"Imported {len(file_settings)} of {len(records)} compile commands")
    return file_settings
