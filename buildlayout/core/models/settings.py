"""
Layout settings — the knobs read from the ``layout:`` section of build.yml.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_OUTPUT_ROOT = "../../build"
DEFAULT_TOOLCHAIN_VERSION = "17"
DEFAULT_EVALUATION_ANCHOR = "app"
DEFAULT_NAMESPACE_PREFIX = "dev.flutter.plugins"


class LayoutSettings(BaseModel):
    """How the coordinator lays out a build."""

    # `toolchain_version: 17` in YAML arrives as an int
    model_config = ConfigDict(coerce_numbers_to_str=True)

    output_root: str = DEFAULT_OUTPUT_ROOT
    toolchain_version: str = DEFAULT_TOOLCHAIN_VERSION
    evaluation_anchor: str | None = DEFAULT_EVALUATION_ANCHOR
    repositories: list[str] = Field(default_factory=lambda: ["google", "mavenCentral"])

    # Legacy library plugins may ship without a namespace
    namespace_prefix: str = DEFAULT_NAMESPACE_PREFIX
    default_namespaces: bool = True
