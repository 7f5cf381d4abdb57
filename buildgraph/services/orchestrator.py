"""Orchestrator facade: wires the output root, the project graph and cleanup."""
from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from buildgraph.application.project_graph import DeclarationLike, ProjectGraph
from buildgraph.config import Settings
from buildgraph.domain.events import (
    DomainEventPublisher,
    GraphBuilt,
    OutputCleaned,
    UnsafeLinkSkipped,
)
from buildgraph.domain.path_policy import resolve_root
from buildgraph.schemas.results import CleanResult
from buildgraph.storage.filesystem import FilesystemCleaner
from buildgraph.storage.interface import OutputCleaner

logger = logging.getLogger(__name__)


class Orchestrator:
    """Holds the one project graph of a run and exposes ``clean``.

    Create it with :meth:`initialize` (or :meth:`from_settings`); there is
    no module-level instance. The caller keeps it for the lifetime of the
    process and simply drops it at exit, nothing is persisted.
    """

    def __init__(
        self,
        graph: ProjectGraph,
        cleaner: OutputCleaner,
        publisher: DomainEventPublisher,
        passthrough: Mapping[str, Any] | None = None,
    ) -> None:
        self._graph = graph
        self._cleaner = cleaner
        self._publisher = publisher
        self._passthrough = MappingProxyType(dict(passthrough or {}))

    @classmethod
    def initialize(
        cls,
        root_config: str | Path,
        declarations: Iterable[DeclarationLike],
        *,
        anchor: str | Path | None = None,
        primary: str | None = None,
        passthrough: Mapping[str, Any] | None = None,
        cleaner: OutputCleaner | None = None,
        publisher: DomainEventPublisher | None = None,
    ) -> Orchestrator:
        """
        Resolve the output root and build the project graph.

        Args:
            root_config: Output root, absolute or relative to ``anchor``
            declarations: Ordered project declarations
            anchor: Directory a relative root is resolved against
            primary: Project every other project is evaluated after
            passthrough: Opaque plugin/repository configuration
            cleaner: Cleanup implementation (filesystem by default)
            publisher: Event publisher for audit handlers

        Raises:
            GraphError: If the graph violates any invariant
        """
        root = resolve_root(root_config, anchor)
        graph = ProjectGraph.build(root, declarations, primary=primary)

        publisher = publisher or DomainEventPublisher()
        publisher.publish(
            GraphBuilt(
                aggregate_id=str(graph.root),
                projects=graph.identities(),
                evaluation_order=graph.evaluation_order(),
            )
        )
        return cls(graph, cleaner or FilesystemCleaner(), publisher, passthrough)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        declarations: Iterable[DeclarationLike],
        *,
        primary: str | None = None,
        dry_run: bool = False,
        publisher: DomainEventPublisher | None = None,
    ) -> Orchestrator:
        return cls.initialize(
            settings.OUTPUT_ROOT,
            declarations,
            anchor=settings.project_dir(),
            primary=primary if primary is not None else settings.PRIMARY_PROJECT,
            passthrough=settings.PASSTHROUGH,
            cleaner=FilesystemCleaner(dry_run=dry_run),
            publisher=publisher,
        )

    @property
    def graph(self) -> ProjectGraph:
        return self._graph

    @property
    def root(self) -> Path:
        return self._graph.root

    @property
    def passthrough(self) -> Mapping[str, Any]:
        return self._passthrough

    def clean(self) -> CleanResult:
        """Sweep the whole output root; failures come back as data."""
        result = self._cleaner.clean(self._graph.root)

        for link in result.warnings:
            self._publisher.publish(
                UnsafeLinkSkipped(aggregate_id=str(result.root), path=str(link.path), target=link.target)
            )
        self._publisher.publish(
            OutputCleaned(
                aggregate_id=str(result.root),
                removed=result.removed,
                failed=[str(path) for path in result.failed_paths],
                dry_run=result.dry_run,
            )
        )
        return result
