"""
Visual Studio project (.vcxproj) importer.

This module reads the parts of a vcxproj file that matter for preprocessing:

    <Project>
      <ItemGroup Label="ProjectConfigurations">
        <ProjectConfiguration Include="Debug|Win32">
          <Configuration>Debug</Configuration>
          <Platform>Win32</Platform>
        </ProjectConfiguration>
      </ItemGroup>
      <ItemDefinitionGroup Condition="'$(Configuration)|$(Platform)'=='Debug|Win32'">
        <ClCompile>
          <PreprocessorDefinitions>WIN32;_DEBUG;%(PreprocessorDefinitions)</PreprocessorDefinitions>
          <AdditionalIncludeDirectories>include;..\\common</AdditionalIncludeDirectories>
        </ClCompile>
      </ItemDefinitionGroup>
      <ItemGroup>
        <ClCompile Include="src\\main.cpp" />
      </ItemGroup>
    </Project>

Every compiled file is emitted once per (project configuration, item
definition group) pair whose condition holds. Several matching groups give
several configurations for the same file, they are not merged.
"""

import logging
import os
import posixpath
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from buildcfg.config.platform_profile import PlatformType

from .condition import ConditionEvaluator
from .file_settings import FileSettings, from_native_separators

logger = logging.getLogger(__name__)

# vcxproj platform name -> platform profile
PLATFORM_MAP: Dict[str, PlatformType] = {
    "Win32": PlatformType.WIN32W,
    "x64": PlatformType.WIN64,
}


def _local_name(element: ET.Element) -> str:
    """Element tag without the MSBuild XML namespace."""
    return element.tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local_name(child) == name]


def split_list(value: str) -> List[str]:
    """
    Split a semicolon separated MSBuild list.

    Empty entries and inherited-value markers like %(PreprocessorDefinitions)
    are dropped.

    Example:
        split_list("WIN32;_DEBUG;%(PreprocessorDefinitions)")
        # ['WIN32', '_DEBUG']
    """
    items = []
    for item in value.split(";"):
        item = item.strip()
        if item and not item.startswith("%("):
            items.append(item)
    return items


@dataclass(frozen=True)
class ProjectConfiguration:
    """A (configuration, platform) pair, e.g. ('Debug', 'Win32')."""

    configuration: str
    platform: str

    @classmethod
    def from_element(cls, element: ET.Element) -> "ProjectConfiguration":
        configuration = ""
        platform = ""
        for child in element:
            if _local_name(child) == "Configuration":
                configuration = (child.text or "").strip()
            elif _local_name(child) == "Platform":
                platform = (child.text or "").strip()
        return cls(configuration=configuration, platform=platform)

    @property
    def platform_type(self) -> Optional[PlatformType]:
        return PLATFORM_MAP.get(self.platform)


@dataclass(frozen=True)
class ItemDefinitionGroup:
    """Compile options guarded by a condition on the build axis."""

    condition: str = ""
    preprocessor_definitions: str = ""
    additional_include_directories: str = ""

    @classmethod
    def from_element(cls, element: ET.Element) -> "ItemDefinitionGroup":
        definitions = ""
        include_directories = ""
        compile_options = _children(element, "ClCompile")
        if compile_options:
            for child in compile_options[0]:
                if _local_name(child) == "PreprocessorDefinitions":
                    definitions = child.text or ""
                elif _local_name(child) == "AdditionalIncludeDirectories":
                    include_directories = child.text or ""
        return cls(
            condition=element.get("Condition", ""),
            preprocessor_definitions=definitions,
            additional_include_directories=include_directories,
        )

    def applies_to(
        self, project_configuration: ProjectConfiguration, evaluator: ConditionEvaluator
    ) -> bool:
        """A group without condition applies to every project configuration."""
        if not self.condition.strip():
            return True
        return evaluator.is_true(self.condition, project_configuration)


class VcxprojImporter:
    """
    Importer for a single vcxproj file.

    Usage:
        importer = VcxprojImporter(Path("app.vcxproj"))
        file_settings = importer.import_file_settings()
    """

    def __init__(
        self, project_path: Union[str, Path], evaluator: Optional[ConditionEvaluator] = None
    ):
        self.project_path = Path(project_path)
        self.evaluator = evaluator or ConditionEvaluator()
        self.project_configurations: List[ProjectConfiguration] = []
        self.compile_list: List[str] = []
        self.item_definition_groups: List[ItemDefinitionGroup] = []

    def load(self) -> bool:
        """
        Parse the project file.

        Returns:
            True if the file was read, False if it is unreadable or not XML
        """
        try:
            root = ET.parse(self.project_path).getroot()
        except (OSError, ET.ParseError) as e:
            logger.warning(f"Failed to read project file {self.project_path}: {e}")
            return False

        for node in root:
            name = _local_name(node)
            if name == "ItemGroup":
                if node.get("Label") == "ProjectConfigurations":
                    for cfg in _children(node, "ProjectConfiguration"):
                        self.project_configurations.append(
                            ProjectConfiguration.from_element(cfg)
                        )
                else:
                    for compile_item in _children(node, "ClCompile"):
                        include = compile_item.get("Include")
                        if include:
                            self.compile_list.append(include)
            elif name == "ItemDefinitionGroup":
                self.item_definition_groups.append(ItemDefinitionGroup.from_element(node))

        logger.debug(
            f"{self.project_path}: {len(self.compile_list)} sources, "
            f"{len(self.project_configurations)} configurations, "
            f"{len(self.item_definition_groups)} item definition groups"
        )
        return True

    def source_path(self, source: str) -> str:
        """Path of a compiled file relative to the project file's directory."""
        project_dir = from_native_separators(os.path.dirname(str(self.project_path)))
        return posixpath.normpath(
            posixpath.join(project_dir, from_native_separators(source))
        )

    def import_file_settings(self) -> List[FileSettings]:
        """
        Build one FileSettings per compiled file and applicable configuration.

        Returns:
            List of FileSettings, empty if the project file cannot be read
        """
        if not self.load():
            return []

        file_settings = []
        for source in self.compile_list:
            filename = self.source_path(source)
            for project_configuration in self.project_configurations:
                for group in self.item_definition_groups:
                    if not group.applies_to(project_configuration, self.evaluator):
                        continue
                    file_settings.append(
                        FileSettings(
                            filename=filename,
                            defines=tuple(split_list(group.preprocessor_definitions)),
                            include_paths=tuple(
                                split_list(group.additional_include_directories)
                            ),
                            platform_type=project_configuration.platform_type,
                        )
                    )
        return file_settings


def import_vcxproj(
    project_path: Union[str, Path], evaluator: Optional[ConditionEvaluator] = None
) -> List[FileSettings]:
    """
    Import compile configurations from a vcxproj file.

    Args:
        project_path: Path to the .vcxproj file
        evaluator: Condition evaluator (default: built-in equality evaluator)

    Returns:
        List of FileSettings, empty if the file is missing or malformed
    """
    return VcxprojImporter(project_path, evaluator).import_file_settings()
