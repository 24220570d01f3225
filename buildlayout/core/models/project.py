"""
Project model — the build units the coordinator configures.

A Project is created by the configuration loader (standing in for the
host build engine) before the coordinator runs. The coordinator only
mutates attributes: output directory, compile target versions,
toolchain version, library namespace and repositories.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Default build directory name inside a project
DEFAULT_BUILD_DIR = "build"


class Capability(str, Enum):
    """Capabilities a project may carry, depending on applied plugins."""

    LIBRARY_EXTENSION = "library-extension"
    JAVA_COMPILE = "java-compile"
    KOTLIN_COMPILE = "kotlin-compile"
    JAVA_TOOLCHAIN = "java-toolchain"


class CompileStep(BaseModel):
    """A single compile task belonging to one project."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    kind: Literal["java", "kotlin"] = "java"
    target_version: str | None = None


class LibraryExtension(BaseModel):
    """Library plugin extension. Only the namespace is of interest here."""

    namespace: str | None = None


class JavaToolchain(BaseModel):
    """Java plugin toolchain settings."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    language_version: str | None = None


class Project(BaseModel):
    """An independently buildable unit.

    ``output_dir`` defaults to ``<path>/build`` — the location the build
    engine would write to if nothing redirected it.
    """

    name: str
    path: Path = Path(".")
    output_dir: Path | None = None

    compile_steps: list[CompileStep] = Field(default_factory=list)
    library: LibraryExtension | None = None
    java_toolchain: JavaToolchain | None = None
    repositories: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_output_dir(self) -> Project:
        if self.output_dir is None:
            self.output_dir = self.default_output_dir
        return self

    @property
    def default_output_dir(self) -> Path:
        """The engine's own build tree for this project (never redirected)."""
        return self.path / DEFAULT_BUILD_DIR

    @property
    def capabilities(self) -> set[Capability]:
        caps: set[Capability] = set()
        if self.library is not None:
            caps.add(Capability.LIBRARY_EXTENSION)
        if self.java_toolchain is not None:
            caps.add(Capability.JAVA_TOOLCHAIN)
        for step in self.compile_steps:
            if step.kind == "java":
                caps.add(Capability.JAVA_COMPILE)
            elif step.kind == "kotlin":
                caps.add(Capability.KOTLIN_COMPILE)
        return caps

    def has_capability(self, capability: Capability) -> bool:
        """Check whether the project carries a capability."""
        return capability in self.capabilities

class EvaluationEdge(BaseModel):
    """``dependent`` is configured after ``dependency``."""

    dependent: str
    dependency: str


class ProjectGraph(BaseModel):
    """One root project plus its subprojects.

    Subproject order is preserved only so logs and reports are
    deterministic; it carries no meaning for correctness.
    """

    root: Project
    subprojects: list[Project] = Field(default_factory=list)
    evaluation_order: list[EvaluationEdge] = Field(default_factory=list)

    @property
    def projects(self) -> list[Project]:
        """Root first, then subprojects in declaration order."""
        return [self.root, *self.subprojects]

    def get_project(self, name: str) -> Project | None:
        """Look up a project (root or subproject) by name."""
        for project in self.projects:
            if project.name == name:
                return project
        return None

    @property
    def subproject_names(self) -> list[str]:
        return [p.name for p in self.subprojects]
