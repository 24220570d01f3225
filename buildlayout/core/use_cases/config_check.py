"""
Config check use case — validate build.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath, PureWindowsPath

from buildlayout.core.config.loader import (
    BuildFile,
    ConfigError,
    find_build_file,
    read_build_file,
)


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    build: BuildFile | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "project_name": self.build.name if self.build else None,
            "subproject_count": len(self.build.subprojects) if self.build else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate build configuration and report issues.

    Args:
        config_path: Optional explicit path to build.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_build_file()

    if config_path is None:
        result.errors.append("No build.yml found.")
        return result

    result.config_path = config_path

    try:
        build = read_build_file(config_path)
        result.build = build
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    names = [p.name for p in build.subprojects]
    dupes = {n for n in names if names.count(n) > 1}
    if dupes:
        result.errors.append(f"Duplicate subproject names: {', '.join(sorted(dupes))}")

    for name in names:
        if "/" in name or "\\" in name or name in ("", ".", ".."):
            result.errors.append(f"Subproject name '{name}' cannot be used as a directory name")

    layout = build.layout
    if PurePosixPath(layout.output_root).is_absolute() or PureWindowsPath(layout.output_root).is_absolute():
        result.errors.append(f"layout.output_root must be relative, got '{layout.output_root}'")

    if layout.evaluation_anchor and layout.evaluation_anchor not in (build.name, *names):
        result.errors.append(
            f"Evaluation anchor '{layout.evaluation_anchor}' is not a declared project"
        )

    if not build.subprojects:
        result.warnings.append("No subprojects defined. Only the root output will be redirected.")

    base_dir = config_path.parent
    for decl in build.subprojects:
        if not (base_dir / decl.path).exists():
            result.warnings.append(f"Subproject '{decl.name}' path does not exist: {decl.path}")
        if not decl.compile:
            result.warnings.append(
                f"Subproject '{decl.name}' has no compile steps; toolchain pinning skips it"
            )

    result.valid = len(result.errors) == 0
    return result
