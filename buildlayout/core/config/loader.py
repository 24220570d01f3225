"""
Configuration loader — reads build.yml into a project graph.

This plays the part of the host build engine: it creates the Project
and CompileStep objects (with their default output directories) that
the coordinator later mutates. It reads YAML, validates against
Pydantic schemas, and returns typed domain objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from buildlayout.core.models.project import (
    CompileStep,
    JavaToolchain,
    LibraryExtension,
    Project,
    ProjectGraph,
)
from buildlayout.core.models.settings import LayoutSettings

logger = logging.getLogger(__name__)

# Default config filename
BUILD_CONFIG_FILE = "build.yml"


class ConfigError(Exception):
    """Raised when build configuration is invalid or missing."""


class ProjectDecl(BaseModel):
    """A project as declared in build.yml (paths still relative)."""

    name: str
    path: str = "."
    compile: list[CompileStep] = Field(default_factory=list)
    library: LibraryExtension | None = None
    java_toolchain: JavaToolchain | None = None


class BuildFile(BaseModel):
    """Schema of build.yml."""

    version: int = 1
    name: str
    path: str = "."
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    subprojects: list[ProjectDecl] = Field(default_factory=list)


@dataclass
class BuildConfig:
    """A loaded build: the project graph plus its layout settings."""

    graph: ProjectGraph
    settings: LayoutSettings
    config_path: Path

    @property
    def base_dir(self) -> Path:
        return self.config_path.parent.resolve()


def find_build_file(start_dir: Path | None = None) -> Path | None:
    """Search for build.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to build.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / BUILD_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_build_file(path: Path) -> BuildFile:
    """Read and validate build.yml without building the graph.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading build config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return BuildFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid build configuration: {e}") from e


def build_graph(build: BuildFile, base_dir: Path) -> ProjectGraph:
    """Create the project graph, resolving paths against ``base_dir``."""
    root = Project(name=build.name, path=(base_dir / build.path).resolve())

    subprojects = [
        Project(
            name=decl.name,
            path=(base_dir / decl.path).resolve(),
            compile_steps=[step.model_copy() for step in decl.compile],
            library=decl.library.model_copy() if decl.library else None,
            java_toolchain=decl.java_toolchain.model_copy() if decl.java_toolchain else None,
        )
        for decl in build.subprojects
    ]

    return ProjectGraph(root=root, subprojects=subprojects)


def load_build(path: Path | None = None) -> BuildConfig:
    """Load build.yml and build the project graph.

    Args:
        path: Explicit path to build.yml. If None, searches upward.

    Returns:
        BuildConfig with a fresh graph and the layout settings.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_build_file()

    if path is None:
        raise ConfigError(
            f"No {BUILD_CONFIG_FILE} found. Create one or specify --config."
        )

    build = read_build_file(path)
    graph = build_graph(build, path.parent.resolve())

    logger.info("Loaded build '%s' with %d subprojects", build.name, len(graph.subprojects))
    return BuildConfig(graph=graph, settings=build.layout, config_path=path)
