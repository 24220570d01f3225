"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from buildlayout.core.models import CompileStep, Project, ProjectGraph

SAMPLE_BUILD_YML = textwrap.dedent("""\
    version: 1
    name: android
    path: android

    layout:
      output_root: ../../build
      toolchain_version: "17"
      evaluation_anchor: app

    subprojects:
      - name: app
        path: android/app
        compile:
          - name: compileDebugKotlin
            kind: kotlin
          - name: compileDebugJavaWithJavac
            kind: java
      - name: camera-plugin
        path: plugins/camera/android
        library: {}
        java_toolchain: {}
        compile:
          - name: compileDebugJavaWithJavac
            kind: java
      - name: url_launcher
        path: plugins/url_launcher/android
        library:
          namespace: io.flutter.plugins.urllauncher
""")


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """A repository checkout with android/ and plugins/ directories."""
    repo = tmp_path / "repo"
    for sub in ("android/app", "plugins/camera/android", "plugins/url_launcher/android"):
        (repo / sub).mkdir(parents=True)
    return repo


@pytest.fixture
def build_yml(repo_dir: Path) -> Path:
    """Write the sample build.yml into the repository."""
    path = repo_dir / "build.yml"
    path.write_text(SAMPLE_BUILD_YML)
    return path


@pytest.fixture
def make_graph(tmp_path: Path):
    """Factory: root project under <tmp>/anchor/<root_dir> plus named subprojects."""

    def _make(
        root_name: str = "app",
        subprojects: list[str] | None = None,
        root_dir: str = "android",
    ) -> ProjectGraph:
        anchor = tmp_path / "anchor"
        root = Project(name=root_name, path=anchor / root_dir)
        subs = [
            Project(
                name=name,
                path=anchor / "plugins" / name,
                compile_steps=[
                    CompileStep(name="compileJava", kind="java"),
                    CompileStep(name="compileKotlin", kind="kotlin"),
                ],
            )
            for name in (subprojects if subprojects is not None else ["pluginA", "pluginB"])
        ]
        return ProjectGraph(root=root, subprojects=subs)

    return _make


@pytest.fixture
def anchor_dir(tmp_path: Path) -> Path:
    """The anchor directory used by ``make_graph``."""
    return tmp_path / "anchor"
