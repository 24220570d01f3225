"""
Domain models — Pydantic types for the build layout.

All models are re-exported here for convenient access:

    from buildlayout.core.models import Project, ProjectGraph, LayoutSettings
"""

from buildlayout.core.models.project import (
    Capability,
    CompileStep,
    EvaluationEdge,
    JavaToolchain,
    LibraryExtension,
    Project,
    ProjectGraph,
)
from buildlayout.core.models.settings import LayoutSettings
from buildlayout.core.models.state import LayoutState, OperationRecord, ProjectLayout

__all__ = [
    # project.py
    "Capability",
    "CompileStep",
    "EvaluationEdge",
    "JavaToolchain",
    # settings.py
    "LayoutSettings",
    # state.py
    "LayoutState",
    "LibraryExtension",
    "OperationRecord",
    "Project",
    "ProjectGraph",
    "ProjectLayout",
]
