"""Internal domain entities for the project graph."""
from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Iterable, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from buildgraph.domain.errors import AlreadyAssigned, EmptyIdentity


class ProjectDeclaration(BaseModel):
    """One entry of the declared project set."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Project identity, unique within the graph")
    depends_on: List[str] = Field(
        default_factory=list,
        alias="evaluation_dependencies",
        description="Projects that must be evaluated before this one",
    )

    @field_validator("depends_on")
    @classmethod
    def _dedupe(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class ProjectNode:
    """One project in the graph: identity, ordering constraints, output path.

    ``identity`` and ``evaluation_dependencies`` are fixed at construction.
    ``output_path`` is derived and may be written exactly once.
    """

    __slots__ = ("_identity", "_dependencies", "_output_path")

    def __init__(self, identity: str, evaluation_dependencies: Iterable[str] = ()) -> None:
        if identity is None or not identity.strip():
            raise EmptyIdentity()
        self._identity = identity
        self._dependencies: FrozenSet[str] = frozenset(evaluation_dependencies)
        self._output_path: Path | None = None

    @classmethod
    def from_declaration(cls, declaration: ProjectDeclaration) -> ProjectNode:
        return cls(declaration.name, declaration.depends_on)

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def evaluation_dependencies(self) -> FrozenSet[str]:
        return self._dependencies

    @property
    def output_path(self) -> Path | None:
        return self._output_path

    @property
    def is_assigned(self) -> bool:
        return self._output_path is not None

    def assign_output_path(self, path: Path) -> None:
        """Set the output path; fails if it was already set."""
        if self._output_path is not None:
            raise AlreadyAssigned(self._identity, self._output_path)
        self._output_path = Path(path)

    def __repr__(self) -> str:
        deps = ", ".join(sorted(self._dependencies))
        return f"ProjectNode({self._identity!r}, deps=[{deps}], output_path={self._output_path})"
