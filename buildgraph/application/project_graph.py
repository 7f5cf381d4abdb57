"""Project graph: output path assignment and evaluation ordering."""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from buildgraph.application.graph_validation_service import GraphValidationService
from buildgraph.domain.entities import ProjectDeclaration, ProjectNode
from buildgraph.domain.errors import InvalidDeclaration, ProjectNotFound, UnknownDependency
from buildgraph.domain.path_policy import compute_output_path, validate_root

logger = logging.getLogger(__name__)

DeclarationLike = Union[ProjectDeclaration, Mapping, Sequence]


class GraphState(str, Enum):
    unvalidated = "unvalidated"
    ready = "ready"


def as_declaration(item: DeclarationLike) -> ProjectDeclaration:
    """Accept a declaration, a ``{"name", "depends_on"}`` mapping or a pair."""
    if isinstance(item, ProjectDeclaration):
        return item
    try:
        if isinstance(item, Mapping):
            return ProjectDeclaration.model_validate(item)
        if isinstance(item, str):
            raise InvalidDeclaration(item, "expected a (name, dependencies) pair")
        try:
            name, depends_on = item
        except (TypeError, ValueError):
            raise InvalidDeclaration(item, "expected a (name, dependencies) pair") from None
        if isinstance(depends_on, str):
            raise InvalidDeclaration(item, "dependencies must be a list of names, not a string")
        try:
            depends_on = list(depends_on)
        except TypeError:
            raise InvalidDeclaration(item, "dependencies must be a list of names") from None
        return ProjectDeclaration(name=name, depends_on=depends_on)
    except PydanticValidationError as e:
        raise InvalidDeclaration(item, str(e)) from e


class ProjectGraph:
    """Owns every ProjectNode of one orchestration run.

    Use :meth:`build`; a graph is only ever handed out in the ``ready``
    state, after paths are assigned and ordering is validated. Ready
    graphs are not mutated, so concurrent readers need no locking.
    """

    def __init__(self, root: Path, nodes: Dict[str, ProjectNode]) -> None:
        self._root = root
        self._nodes = nodes
        self._state = GraphState.unvalidated
        self._order: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        root: str | Path,
        declarations: Iterable[DeclarationLike],
        primary: str | None = None,
        validator: GraphValidationService | None = None,
    ) -> ProjectGraph:
        """Construct and validate a graph.

        Args:
            root: Absolute, normalized output root
            declarations: Ordered ``(identity, dependencies)`` declarations
            primary: Project every other project is evaluated after
            validator: Validation service, mainly for tests

        Returns:
            A graph in the ``ready`` state

        Raises:
            GraphError: On any invariant violation; no graph is returned
        """
        validator = validator or GraphValidationService()
        root_path = validate_root(root)
        declared = [as_declaration(item) for item in declarations]

        constructed = [ProjectNode.from_declaration(declaration) for declaration in declared]
        validator.check_duplicate_identities(declared)
        nodes: Dict[str, ProjectNode] = {node.identity: node for node in constructed}

        if primary is not None:
            if primary not in nodes:
                raise UnknownDependency("<primary>", primary)
            nodes = {
                identity: node if identity == primary
                else ProjectNode(identity, node.evaluation_dependencies | {primary})
                for identity, node in nodes.items()
            }

        for identity, node in nodes.items():
            node.assign_output_path(compute_output_path(root_path, identity))

        validator.check_known_dependencies(nodes)
        validator.check_acyclic(nodes)

        graph = cls(root_path, nodes)
        graph._order = tuple(validator.evaluation_order(nodes))
        graph._state = GraphState.ready
        logger.debug(f"Project graph ready: {len(nodes)} projects under {root_path}")
        return graph

    @property
    def root(self) -> Path:
        return self._root

    @property
    def state(self) -> GraphState:
        return self._state

    def evaluation_order(self) -> List[str]:
        """Identities in an order where each follows all its dependencies."""
        return list(self._order)

    def output_path_of(self, identity: str) -> Path:
        node = self._nodes.get(identity)
        if node is None:
            raise ProjectNotFound(identity)
        return node.output_path

    def output_paths(self) -> Dict[str, Path]:
        return {identity: node.output_path for identity, node in self._nodes.items()}

    def identities(self) -> List[str]:
        """Identities in declaration order."""
        return list(self._nodes)

    def dependencies_of(self, identity: str) -> frozenset[str]:
        node = self._nodes.get(identity)
        if node is None:
            raise ProjectNotFound(identity)
        return node.evaluation_dependencies

    def dependents_of(self, identity: str) -> List[str]:
        """Projects that directly depend on ``identity``, in declaration order."""
        if identity not in self._nodes:
            raise ProjectNotFound(identity)
        return [
            other for other, node in self._nodes.items()
            if identity in node.evaluation_dependencies
        ]

    def __contains__(self, identity: object) -> bool:
        return identity in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __repr__(self) -> str:
        return f"ProjectGraph(root={str(self._root)!r}, projects={len(self._nodes)}, state={self._state.value})"
