"""Service for project graph validation logic."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

import networkx as nx

from buildgraph.domain.entities import ProjectDeclaration, ProjectNode
from buildgraph.domain.errors import (
    CyclicDependency,
    DuplicateIdentity,
    UnknownDependency,
)


class GraphValidationService:
    """Validates declared projects and derives their evaluation order.

    ``nodes`` arguments are mappings from identity to node whose iteration
    order is the declaration order.
    """

    def check_duplicate_identities(self, declarations: Iterable[ProjectDeclaration]) -> None:
        """Check that no identity is declared twice."""
        seen: set[str] = set()
        for declaration in declarations:
            if declaration.name in seen:
                raise DuplicateIdentity(declaration.name)
            seen.add(declaration.name)

    def check_known_dependencies(self, nodes: Mapping[str, ProjectNode]) -> None:
        """Check that every dependency names a declared project."""
        position = _positions(nodes)
        for identity, node in nodes.items():
            for dependency in _ordered_dependencies(node, position):
                if dependency not in nodes:
                    raise UnknownDependency(identity, dependency)

    def dependency_graph(self, nodes: Mapping[str, ProjectNode]) -> nx.DiGraph:
        """Directed graph with an edge from each dependency to its dependent.

        Nodes and edges are inserted in declaration order, so traversals
        over the graph are deterministic.
        """
        position = _positions(nodes)
        graph = nx.DiGraph()
        graph.add_nodes_from(nodes)
        for identity, node in nodes.items():
            for dependency in _ordered_dependencies(node, position):
                graph.add_edge(dependency, identity)
        return graph

    def find_cycle(self, nodes: Mapping[str, ProjectNode]) -> List[str] | None:
        """Return the first dependency cycle found, or None.

        The search starts from each project in declaration order and walks
        from a project to the projects it depends on. The returned walk
        repeats its first member at the end, e.g. ``["a", "b", "a"]``.
        """
        graph = self.dependency_graph(nodes)
        if nx.is_directed_acyclic_graph(graph):
            return None
        try:
            edges = nx.find_cycle(graph.reverse(copy=False), source=list(nodes))
        except nx.NetworkXNoCycle:
            return None
        return [edge[0] for edge in edges] + [edges[0][0]]

    def check_acyclic(self, nodes: Mapping[str, ProjectNode]) -> None:
        cycle = self.find_cycle(nodes)
        if cycle is not None:
            raise CyclicDependency(cycle)

    def evaluation_order(self, nodes: Mapping[str, ProjectNode]) -> List[str]:
        """Topological order; ready projects are taken in declaration order.

        Expects a relation already checked by ``check_known_dependencies``.
        """
        position = _positions(nodes)
        graph = self.dependency_graph(nodes)
        try:
            return list(nx.lexicographical_topological_sort(graph, key=position.__getitem__))
        except nx.NetworkXUnfeasible:
            self.check_acyclic(nodes)
            raise


def _positions(nodes: Mapping[str, ProjectNode]) -> Dict[str, int]:
    return {identity: index for index, identity in enumerate(nodes)}


def _ordered_dependencies(node: ProjectNode, position: Mapping[str, int]) -> List[str]:
    # declared projects in declaration order, undeclared names last
    return sorted(
        node.evaluation_dependencies,
        key=lambda name: (name not in position, position.get(name, 0), name),
    )
