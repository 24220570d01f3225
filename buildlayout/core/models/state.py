"""
LayoutState — the last resolved build layout.

Serialized to .state/layout.json after every configure run. It is
disposable: delete it and the next ``configure`` regenerates it from
build.yml.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ProjectLayout(BaseModel):
    """Resolved layout for one project."""

    name: str
    output_dir: str = ""
    target_versions: dict[str, str | None] = Field(default_factory=dict)
    namespace: str | None = None


class OperationRecord(BaseModel):
    """Summary of the last operation."""

    operation_id: str = ""
    operation: str = ""     # configure, clean
    ended_at: str = ""
    status: str = ""        # ok, failed
    error: str | None = None


class LayoutState(BaseModel):
    """Root state model — serialized to .state/layout.json."""

    schema_version: int = 1

    project_name: str = ""
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)

    output_root: str = ""
    toolchain_version: str = ""
    projects: dict[str, ProjectLayout] = Field(default_factory=dict)
    evaluation_sequence: list[str] = Field(default_factory=list)

    last_operation: OperationRecord = Field(default_factory=OperationRecord)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now_iso()

    def record_operation(
        self,
        operation_id: str,
        operation: str,
        status: str,
        error: str | None = None,
    ) -> None:
        """Replace the last-operation summary."""
        self.last_operation = OperationRecord(
            operation_id=operation_id,
            operation=operation,
            ended_at=_now_iso(),
            status=status,
            error=error,
        )
