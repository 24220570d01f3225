"""
Clean use case — delete the redirected output root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from buildlayout.core.config.loader import ConfigError, load_build
from buildlayout.core.engine.coordinator import (
    BuildLayoutCoordinator,
    LayoutError,
    generate_operation_id,
)
from buildlayout.core.persistence.audit import AuditEntry, AuditWriter
from buildlayout.core.persistence.state_file import default_state_path, load_state, save_state

logger = logging.getLogger(__name__)


@dataclass
class CleanResult:
    """Result of a clean run."""

    operation_id: str = ""
    project_name: str = ""
    output_root: Path | None = None
    existed: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "project_name": self.project_name,
            "output_root": str(self.output_root) if self.output_root else None,
            "existed": self.existed,
            "ok": self.ok,
            "error": self.error,
        }


def run_clean(
    config_path: Path | None = None,
    coordinator: BuildLayoutCoordinator | None = None,
) -> CleanResult:
    """Delete the output root configured in build.yml.

    The root is resolved the same way ``configure`` resolves it, so
    nothing outside it is touched.
    """
    result = CleanResult(operation_id=generate_operation_id())

    try:
        build = load_build(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    coordinator = coordinator or BuildLayoutCoordinator()
    result.project_name = build.graph.root.name

    try:
        result.output_root = coordinator.redirect_output_root(
            build.graph.root, build.settings.output_root
        )
        result.existed = result.output_root.exists()
        coordinator.clean(result.output_root)
    except LayoutError as e:
        logger.error("Clean failed for '%s': %s", result.project_name, e)
        result.error = str(e)

    status = "ok" if result.ok else "failed"
    AuditWriter(base_dir=build.base_dir).write(
        AuditEntry(
            operation_id=result.operation_id,
            operation_type="clean",
            project_name=result.project_name,
            output_root=str(result.output_root) if result.output_root else "",
            status=status,
            errors=[result.error] if result.error else [],
        )
    )

    state_path = default_state_path(build.base_dir)
    if state_path.is_file():
        state = load_state(state_path)
        state.record_operation(result.operation_id, "clean", status, error=result.error)
        try:
            save_state(state, state_path)
        except OSError as e:
            # The clean itself is done; only the bookkeeping is lost
            logger.warning("Failed to record clean in %s: %s", state_path, e)

    return result
