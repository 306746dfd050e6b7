"""Build descriptor dispatch.

Routes a descriptor file to the importer that understands it:
- compile_commands.json -> compilation database importer
- *.vcxproj             -> Visual Studio project importer
Any other file name is ignored.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .compile_commands import import_compile_commands
from .condition import ConditionEvaluator
from .file_settings import FileSettings
from .vcxproj import import_vcxproj

logger = logging.getLogger(__name__)

COMPILE_COMMANDS_NAME = "compile_commands.json"
VCXPROJ_MARKER = ".vcxproj"


def import_project(
    path: Union[str, Path], evaluator: Optional[ConditionEvaluator] = None
) -> List[FileSettings]:
    """Import compile configurations from a build descriptor.

    Args:
        path: Path to compile_commands.json or a .vcxproj file
        evaluator: Condition evaluator for vcxproj files (optional)

    Returns:
        Imported FileSettings; empty if the file cannot be opened or its
        name is not recognized
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as stream:
            if path.name == COMPILE_COMMANDS_NAME:
                return import_compile_commands(stream)
    except OSError as e:
        logger.warning(f"Cannot open build descriptor {path}: {e}")
        return []

    if VCXPROJ_MARKER in path.name:
        return import_vcxproj(path, evaluator)

    logger.debug(f"Ignoring unrecognized build descriptor: {path}")
    return []
