"""
Build layout coordinator — output redirection and toolchain enforcement.

The coordinator takes a ProjectGraph built by the host engine (here,
the build.yml loader) and mutates attributes on it:

    repositories → namespaces → output root → subproject outputs
                 → evaluation order → toolchain version

It never creates or destroys projects or compile steps, and it never
writes to disk except in ``clean``. Every pass is idempotent, so a
failed run can be resumed by running the whole pass again.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import networkx as nx

from buildlayout.core.models.project import (
    Capability,
    EvaluationEdge,
    Project,
    ProjectGraph,
)
from buildlayout.core.models.settings import LayoutSettings

logger = logging.getLogger(__name__)


class LayoutError(Exception):
    """Base class for layout configuration failures."""


class PathResolutionError(LayoutError):
    """A configured path cannot be resolved to a usable location."""


class DuplicateProjectNameError(LayoutError):
    """Two subprojects in a graph share a name."""


class CycleError(LayoutError):
    """An evaluation-order edge would make the order cyclic."""


class UnknownProjectError(LayoutError):
    """A project name does not exist in the graph."""


class CleanError(LayoutError, OSError):
    """Deleting the output root failed."""


@dataclass
class LayoutReport:
    """Result of applying a full layout pass to a graph."""

    project_name: str = ""
    output_root: Path | None = None
    outputs: dict[str, Path] = field(default_factory=dict)
    evaluation_order: list[EvaluationEdge] = field(default_factory=list)
    evaluation_sequence: list[str] = field(default_factory=list)
    toolchain_version: str = ""
    repositories: list[str] = field(default_factory=list)
    namespaces_defaulted: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "project_name": self.project_name,
            "output_root": str(self.output_root) if self.output_root else None,
            "outputs": {name: str(path) for name, path in self.outputs.items()},
            "evaluation_order": [e.model_dump() for e in self.evaluation_order],
            "evaluation_sequence": self.evaluation_sequence,
            "toolchain_version": self.toolchain_version,
            "repositories": self.repositories,
            "namespaces_defaulted": self.namespaces_defaulted,
        }


class BuildLayoutCoordinator:
    """Applies the build layout to a project graph.

    Holds no state of its own: the graph and target paths are passed
    explicitly to every operation.
    """

    # ── Output directories ──────────────────────────────────────

    def redirect_output_root(self, root: Project, relative_path: str | Path) -> Path:
        """Resolve ``relative_path`` against the root's default build tree.

        The result becomes the root project's output directory. Nothing is
        created on disk; the build engine creates it on first write.

        Raises:
            PathResolutionError: If the path is absolute, cannot be
                resolved, lands inside the root's own build tree, or
                overlaps the root's project directory.
        """
        rel = Path(relative_path)
        if rel.is_absolute():
            raise PathResolutionError(
                f"Output root must be relative to '{root.name}', got absolute path {rel}"
            )

        default_tree = root.default_output_dir
        try:
            project_dir = root.path.resolve()
            default_resolved = default_tree.resolve()
            resolved = (default_tree / rel).resolve()
        except (OSError, RuntimeError) as e:
            raise PathResolutionError(
                f"Cannot resolve '{rel}' against {default_tree}: {e}"
            ) from e

        if resolved == default_resolved or resolved.is_relative_to(default_resolved):
            raise PathResolutionError(
                f"Output root {resolved} lies inside the default build tree of '{root.name}'"
            )
        if project_dir.is_relative_to(resolved):
            raise PathResolutionError(
                f"Output root {resolved} would contain the project directory of '{root.name}'"
            )
        if resolved.is_relative_to(project_dir):
            raise PathResolutionError(
                f"Output root {resolved} lies inside the project directory of '{root.name}'"
            )

        root.output_dir = resolved
        logger.info("Output root for '%s' → %s", root.name, resolved)
        return resolved

    def assign_subproject_outputs(self, graph: ProjectGraph, shared_root: Path) -> None:
        """Give every subproject its own directory ``shared_root/<name>``.

        Raises:
            DuplicateProjectNameError: If subproject names are not unique.
                Checked before any attribute is touched.
            PathResolutionError: If a name is not a single path component.
        """
        names = graph.subproject_names
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise DuplicateProjectNameError(f"Duplicate subproject names: {', '.join(dupes)}")

        for name in names:
            if name in ("", ".", "..") or Path(name).name != name:
                raise PathResolutionError(
                    f"Subproject name '{name}' cannot be used as a directory name"
                )

        shared_root = Path(shared_root)
        for project in graph.subprojects:
            project.output_dir = shared_root / project.name
            logger.debug("Output for '%s' → %s", project.name, project.output_dir)

    # ── Evaluation order ────────────────────────────────────────

    def declare_evaluation_order(
        self,
        graph: ProjectGraph,
        dependent: Project | str,
        dependency: Project | str,
    ) -> None:
        """Record that ``dependent`` is configured after ``dependency``.

        This is a hint for the engine's scheduler; nothing is executed.

        Raises:
            UnknownProjectError: If either project is not in the graph.
            CycleError: If the edge would create a cycle (including a
                project depending on itself).
        """
        dependent_name = self._project_name(graph, dependent)
        dependency_name = self._project_name(graph, dependency)

        if dependent_name == dependency_name:
            raise CycleError(f"Project '{dependent_name}' cannot depend on itself")

        dag = self._order_graph(graph)
        if dag.has_edge(dependent_name, dependency_name):
            return

        if dag.has_node(dependency_name) and dag.has_node(dependent_name):
            if nx.has_path(dag, dependency_name, dependent_name):
                path = nx.shortest_path(dag, dependency_name, dependent_name)
                cycle = " -> ".join([dependent_name, *path])
                raise CycleError(f"Evaluation order would contain a cycle: {cycle}")

        graph.evaluation_order.append(
            EvaluationEdge(dependent=dependent_name, dependency=dependency_name)
        )
        logger.debug("'%s' evaluates after '%s'", dependent_name, dependency_name)

    def evaluation_sequence(self, graph: ProjectGraph) -> list[str]:
        """All project names in an order that honours every declared edge.

        Ties are broken by declaration order (root first).
        """
        position = {p.name: i for i, p in enumerate(graph.projects)}
        dag = nx.DiGraph()
        dag.add_nodes_from(position)
        for edge in graph.evaluation_order:
            dag.add_edge(edge.dependency, edge.dependent)
        return list(
            nx.lexicographical_topological_sort(dag, key=lambda n: position.get(n, len(position)))
        )

    # ── Toolchain ───────────────────────────────────────────────

    def pin_toolchain_version(self, graph: ProjectGraph, version: str) -> None:
        """Set ``version`` on every compile step and Java toolchain.

        Last write wins. Projects without compile steps are untouched.
        """
        for project in graph.projects:
            for step in project.compile_steps:
                step.target_version = version
            if project.has_capability(Capability.JAVA_TOOLCHAIN):
                assert project.java_toolchain is not None
                project.java_toolchain.language_version = version
        logger.info("Toolchain pinned to %s across %d projects", version, len(graph.projects))

    # ── Repositories & namespaces ───────────────────────────────

    def declare_repositories(self, graph: ProjectGraph, repositories: list[str]) -> None:
        """Add repositories to every project, keeping order and skipping dupes."""
        for project in graph.projects:
            for repo in repositories:
                if repo not in project.repositories:
                    project.repositories.append(repo)

    def default_namespaces(self, graph: ProjectGraph, prefix: str) -> dict[str, str]:
        """Fill in missing library namespaces as ``<prefix>.<name>``.

        Hyphens in the project name become underscores. Returns the
        namespaces that were assigned, keyed by project name.
        """
        assigned: dict[str, str] = {}
        for project in graph.subprojects:
            if not project.has_capability(Capability.LIBRARY_EXTENSION):
                continue
            assert project.library is not None
            if project.library.namespace:
                continue
            namespace = f"{prefix}.{project.name.replace('-', '_')}"
            project.library.namespace = namespace
            assigned[project.name] = namespace
            logger.info("Defaulted namespace for '%s' → %s", project.name, namespace)
        return assigned

    # ── Cleanup ─────────────────────────────────────────────────

    def clean(self, output_root: Path) -> None:
        """Delete ``output_root``: a directory tree or a single file.

        A missing root is not an error. The first deletion failure is
        raised as-is; nothing is retried.

        Raises:
            CleanError: If the root is a symlink or filesystem root, or
                deletion fails.
        """
        target = Path(output_root)

        if target.is_symlink():
            raise CleanError(f"Refusing to clean symlinked output root: {target}")

        if not target.exists():
            logger.info("Output root %s does not exist — nothing to clean", target)
            return

        if target.resolve().parent == target.resolve():
            raise CleanError(f"Refusing to clean filesystem root: {target}")

        logger.info("Cleaning %s", target)
        try:
            if target.is_file():
                target.unlink()
            else:
                shutil.rmtree(target)
        except OSError as e:
            raise CleanError(f"Cannot delete {e.filename or target}: {e.strerror or e}") from e

    # ── Full pass ───────────────────────────────────────────────

    def apply(self, graph: ProjectGraph, settings: LayoutSettings) -> LayoutReport:
        """Run every layout pass over ``graph`` with ``settings``.

        Every subproject other than the evaluation anchor is ordered
        after the anchor.

        Raises:
            LayoutError: From whichever pass fails first. Passes already
                applied stay applied.
        """
        logger.info(
            "Applying layout to '%s' (%d subprojects)", graph.root.name, len(graph.subprojects)
        )
        report = LayoutReport(project_name=graph.root.name)

        self.declare_repositories(graph, settings.repositories)
        report.repositories = list(settings.repositories)

        if settings.default_namespaces:
            report.namespaces_defaulted = self.default_namespaces(graph, settings.namespace_prefix)

        output_root = self.redirect_output_root(graph.root, settings.output_root)
        self.assign_subproject_outputs(graph, output_root)
        report.output_root = output_root
        report.outputs = {p.name: p.output_dir for p in graph.subprojects if p.output_dir}

        anchor = settings.evaluation_anchor
        if anchor:
            if graph.get_project(anchor) is None:
                raise UnknownProjectError(f"Evaluation anchor '{anchor}' is not in the graph")
            for project in graph.subprojects:
                if project.name != anchor:
                    self.declare_evaluation_order(graph, project, anchor)
        report.evaluation_order = list(graph.evaluation_order)
        report.evaluation_sequence = self.evaluation_sequence(graph)

        self.pin_toolchain_version(graph, settings.toolchain_version)
        report.toolchain_version = settings.toolchain_version

        return report

    # ── Helpers ─────────────────────────────────────────────────

    @staticmethod
    def _project_name(graph: ProjectGraph, project: Project | str) -> str:
        name = project.name if isinstance(project, Project) else project
        if graph.get_project(name) is None:
            raise UnknownProjectError(f"Project '{name}' is not in the graph")
        return name

    @staticmethod
    def _order_graph(graph: ProjectGraph) -> nx.DiGraph:
        dag = nx.DiGraph()
        for edge in graph.evaluation_order:
            dag.add_edge(edge.dependent, edge.dependency)
        return dag


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
