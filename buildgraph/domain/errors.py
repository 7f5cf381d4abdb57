"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence


class DomainError(Exception):
    """Base for all domain errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Invalid input or state."""


class ConflictError(DomainError):
    """Resource conflict (e.g., duplicate name)."""


class GraphError(DomainError):
    """Raised when a project graph cannot be constructed.

    Every construction failure derives from this class, so callers can
    abort initialization with a single ``except GraphError``.
    """


class InvalidRoot(GraphError, ValidationError):
    """Output root is not an absolute, normalized path."""

    def __init__(self, root: str | Path, reason: str) -> None:
        self.root = str(root)
        super().__init__(f"Invalid output root '{self.root}': {reason}")


class InvalidIdentifier(GraphError, ValidationError):
    """Project identity would escape the output root."""

    def __init__(self, identity: str, reason: str) -> None:
        self.identity = identity
        super().__init__(f"Invalid project identity '{identity}': {reason}")


class EmptyIdentity(GraphError, ValidationError):
    """Project identity is blank."""

    def __init__(self) -> None:
        super().__init__("Project identity is required and cannot be empty")


class InvalidDeclaration(GraphError, ValidationError):
    """A declared project is not a name with a list of dependencies."""

    def __init__(self, declaration: object, reason: str) -> None:
        self.declaration = declaration
        super().__init__(f"Invalid project declaration {declaration!r}: {reason}")


class DuplicateIdentity(GraphError, ConflictError):
    """Two declarations share the same identity."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"Project '{identity}' is declared more than once")


class UnknownDependency(GraphError, ValidationError):
    """A project depends on an identity that was never declared."""

    def __init__(self, identity: str, dependency: str) -> None:
        self.identity = identity
        self.dependency = dependency
        super().__init__(
            f"Project '{identity}' depends on undeclared project '{dependency}'"
        )


class CyclicDependency(GraphError, ConflictError):
    """Evaluation dependencies form a cycle.

    ``cycle`` is the closed walk (first member repeated at the end) and
    ``members`` the distinct identities in walk order.
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        self.members = self.cycle[:-1] if len(self.cycle) > 1 else list(self.cycle)
        super().__init__(
            "Cyclic evaluation dependency: " + " -> ".join(self.cycle)
        )


class AlreadyAssigned(GraphError, ConflictError):
    """Output path of a project was already computed."""

    def __init__(self, identity: str, current: Path) -> None:
        self.identity = identity
        self.current = current
        super().__init__(
            f"Output path of project '{identity}' is already assigned to {current}"
        )


class ProjectNotFound(NotFoundError):
    """No project with the given identity exists in the graph."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"Project not found: {identity}")


class DeclarationError(ValidationError):
    """Declared project set could not be read."""
