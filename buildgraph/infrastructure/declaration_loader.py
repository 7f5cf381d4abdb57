"""Adapter reading the declared project set from a JSON file."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, NamedTuple, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from buildgraph.domain.entities import ProjectDeclaration
from buildgraph.domain.errors import DeclarationError

logger = logging.getLogger(__name__)


class _ProjectsDocument(BaseModel):
    projects: List[ProjectDeclaration] = Field(default_factory=list)
    primary: Optional[str] = None


class DeclaredProjects(NamedTuple):
    """Projects read from a declaration file."""

    declarations: List[ProjectDeclaration]
    primary: Optional[str]


def load_declarations(path: Path) -> DeclaredProjects:
    """
    Read project declarations.

    The file holds either a list of ``{"name", "depends_on"}`` objects or
    an object with a ``projects`` list and an optional ``primary`` name.

    Args:
        path: JSON declaration file

    Returns:
        DeclaredProjects in file order
    """
    try:
        with Path(path).open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except FileNotFoundError:
        raise DeclarationError(f"Project declaration file not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise DeclarationError(f"Could not read project declarations from {path}: {e}")

    if isinstance(raw, list):
        raw = {"projects": raw}
    try:
        document = _ProjectsDocument.model_validate(raw)
    except PydanticValidationError as e:
        raise DeclarationError(f"Invalid project declarations in {path}: {e}")

    logger.debug(f"Loaded {len(document.projects)} project declarations from {path}")
    return DeclaredProjects(document.projects, document.primary)
