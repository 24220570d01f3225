"""
Configure use case — apply the build layout and persist the result.

Loads build.yml, runs the coordinator over the graph, saves the
resolved layout to .state/layout.json and writes an audit entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from buildlayout.core.config.loader import BuildConfig, ConfigError, load_build
from buildlayout.core.engine.coordinator import (
    BuildLayoutCoordinator,
    LayoutError,
    LayoutReport,
    generate_operation_id,
)
from buildlayout.core.models.project import Project, ProjectGraph
from buildlayout.core.models.state import LayoutState, ProjectLayout
from buildlayout.core.persistence.audit import AuditEntry, AuditWriter
from buildlayout.core.persistence.state_file import default_state_path, load_state, save_state

logger = logging.getLogger(__name__)


@dataclass
class ConfigureResult:
    """Result of a configure run."""

    operation_id: str = ""
    build: BuildConfig | None = None
    report: LayoutReport | None = None
    state_saved: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None

    def to_dict(self) -> dict:
        result: dict = {"operation_id": self.operation_id}
        if self.error:
            result["error"] = self.error
            return result

        if self.report:
            result.update(self.report.to_dict())
        if self.build:
            result["projects"] = {
                p.name: _project_layout(p).model_dump() for p in self.build.graph.subprojects
            }
        result["state_saved"] = self.state_saved
        return result


def _project_layout(project: Project) -> ProjectLayout:
    return ProjectLayout(
        name=project.name,
        output_dir=str(project.output_dir) if project.output_dir else "",
        target_versions={s.name: s.target_version for s in project.compile_steps},
        namespace=project.library.namespace if project.library else None,
    )


def _layout_state(state: LayoutState, graph: ProjectGraph, report: LayoutReport) -> None:
    state.project_name = report.project_name
    state.output_root = str(report.output_root) if report.output_root else ""
    state.toolchain_version = report.toolchain_version
    state.evaluation_sequence = list(report.evaluation_sequence)
    state.projects = {p.name: _project_layout(p) for p in graph.subprojects}


def configure_build(
    config_path: Path | None = None,
    save: bool = True,
    coordinator: BuildLayoutCoordinator | None = None,
) -> ConfigureResult:
    """Apply the layout described by build.yml.

    Args:
        config_path: Optional explicit path to build.yml.
        save: Persist state and audit entry (default True).
        coordinator: Optional pre-built coordinator.

    Returns:
        ConfigureResult. Configuration and layout failures are reported
        in ``error``, never raised.
    """
    result = ConfigureResult(operation_id=generate_operation_id())

    try:
        build = load_build(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.build = build

    coordinator = coordinator or BuildLayoutCoordinator()
    audit = AuditWriter(base_dir=build.base_dir)

    try:
        result.report = coordinator.apply(build.graph, build.settings)
    except LayoutError as e:
        logger.error("Layout failed for '%s': %s", build.graph.root.name, e)
        result.error = str(e)
        if save:
            audit.write(
                AuditEntry(
                    operation_id=result.operation_id,
                    operation_type="configure",
                    project_name=build.graph.root.name,
                    status="failed",
                    errors=[str(e)],
                )
            )
        return result

    if not save:
        return result

    state_path = default_state_path(build.base_dir)
    state = load_state(state_path)
    _layout_state(state, build.graph, result.report)
    state.record_operation(result.operation_id, "configure", "ok")
    try:
        save_state(state, state_path)
    except OSError as e:
        logger.error("Failed to save layout state to %s: %s", state_path, e)
        result.error = f"Cannot save layout state: {e}"
        audit.write(
            AuditEntry(
                operation_id=result.operation_id,
                operation_type="configure",
                project_name=result.report.project_name,
                status="failed",
                errors=[result.error],
            )
        )
        return result
    result.state_saved = True

    audit.write(
        AuditEntry(
            operation_id=result.operation_id,
            operation_type="configure",
            project_name=result.report.project_name,
            projects_affected=build.graph.subproject_names,
            output_root=str(result.report.output_root),
            status="ok",
            context={"toolchain_version": result.report.toolchain_version},
        )
    )
    return result
