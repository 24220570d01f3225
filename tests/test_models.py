"""
Tests for domain models — defaults, capabilities, lookups.
"""

import json
from pathlib import Path

from buildlayout.core.models import (
    Capability,
    CompileStep,
    JavaToolchain,
    LayoutSettings,
    LayoutState,
    LibraryExtension,
    Project,
    ProjectGraph,
)


class TestProject:
    """Project model tests."""

    def test_default_output_dir(self):
        p = Project(name="lib", path=Path("/work/plugins/lib"))
        assert p.output_dir == Path("/work/plugins/lib/build")
        assert p.default_output_dir == Path("/work/plugins/lib/build")

    def test_explicit_output_dir_kept(self):
        p = Project(name="lib", path=Path("/work/lib"), output_dir=Path("/out/lib"))
        assert p.output_dir == Path("/out/lib")
        assert p.default_output_dir == Path("/work/lib/build")

    def test_output_dir_is_mutable(self):
        p = Project(name="lib")
        p.output_dir = Path("/elsewhere")
        assert p.output_dir == Path("/elsewhere")

    def test_no_capabilities(self):
        assert Project(name="bare").capabilities == set()

    def test_capabilities(self):
        p = Project(
            name="full",
            library=LibraryExtension(),
            java_toolchain=JavaToolchain(),
            compile_steps=[
                CompileStep(name="compileJava", kind="java"),
                CompileStep(name="compileKotlin", kind="kotlin"),
            ],
        )
        assert p.capabilities == {
            Capability.LIBRARY_EXTENSION,
            Capability.JAVA_TOOLCHAIN,
            Capability.JAVA_COMPILE,
            Capability.KOTLIN_COMPILE,
        }
        assert p.has_capability(Capability.KOTLIN_COMPILE)


class TestProjectGraph:
    """ProjectGraph lookups."""

    def _graph(self) -> ProjectGraph:
        return ProjectGraph(
            root=Project(name="android"),
            subprojects=[Project(name="app"), Project(name="camera")],
        )

    def test_projects_root_first(self):
        assert [p.name for p in self._graph().projects] == ["android", "app", "camera"]

    def test_get_project(self):
        g = self._graph()
        assert g.get_project("android") is g.root
        assert g.get_project("camera").name == "camera"
        assert g.get_project("missing") is None

    def test_subproject_names(self):
        assert self._graph().subproject_names == ["app", "camera"]


class TestSettings:
    def test_defaults(self):
        s = LayoutSettings()
        assert s.output_root == "../../build"
        assert s.toolchain_version == "17"
        assert s.evaluation_anchor == "app"
        assert s.repositories == ["google", "mavenCentral"]
        assert s.namespace_prefix == "dev.flutter.plugins"
        assert s.default_namespaces is True


class TestLayoutState:
    def test_record_operation(self):
        state = LayoutState(project_name="android")
        state.record_operation("op-1", "clean", "failed", error="denied")
        assert state.last_operation.operation == "clean"
        assert state.last_operation.error == "denied"
        assert state.last_operation.ended_at

    def test_serializes_to_json(self):
        state = LayoutState(project_name="android", output_root="/repo/build")
        data = json.loads(json.dumps(state.model_dump(mode="json")))
        assert data["project_name"] == "android"
        assert data["schema_version"] == 1
