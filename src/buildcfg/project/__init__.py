"""Build descriptor importers for buildcfg."""

from .compile_commands import import_compile_commands
from .condition import (
    ConditionEvaluator,
    EqualityExpressionParser,
    ExpressionNode,
    ExpressionParser,
    ExpressionSyntaxError,
)
from .file_settings import FileSettings
from .flag_scanner import FlagScanner, scan_command_flags
from .importer import import_project
from .vcxproj import ItemDefinitionGroup, ProjectConfiguration, import_vcxproj

__all__ = [
    "FileSettings",
    "FlagScanner",
    "scan_command_flags",
    "import_compile_commands",
    "ConditionEvaluator",
    "EqualityExpressionParser",
    "ExpressionNode",
    "ExpressionParser",
    "ExpressionSyntaxError",
    "ProjectConfiguration",
    "ItemDefinitionGroup",
    "import_vcxproj",
    "import_project",
]
