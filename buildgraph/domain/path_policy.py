"""Output path policy: where each project writes its build artifacts.

Every project gets ``<root>/<identity>``. Identities are validated so that
no project can escape the shared output root.
"""
from __future__ import annotations

import os
from pathlib import Path

from buildgraph.domain.errors import InvalidIdentifier, InvalidRoot

PARENT_REFERENCE = ".."

_SEPARATORS = {"/", "\\", os.sep}
if os.altsep:
    _SEPARATORS.add(os.altsep)


def resolve_root(path: str | Path, anchor: str | Path | None = None) -> Path:
    """Resolve a configured output root to an absolute, normalized path.

    Relative roots are anchored at ``anchor`` (the current working
    directory when omitted). Symbolic links are not resolved and the
    filesystem is not touched.
    """
    raw = os.fspath(path)
    if not raw or not raw.strip():
        raise InvalidRoot(raw, "path is empty")
    if not os.path.isabs(raw):
        base = os.fspath(anchor) if anchor is not None else os.getcwd()
        raw = os.path.join(base, raw)
    return Path(os.path.normpath(os.path.abspath(raw)))


def validate_root(root: str | Path) -> Path:
    """Check that ``root`` is absolute and already normalized."""
    raw = os.fspath(root)
    if not raw:
        raise InvalidRoot(raw, "path is empty")
    if not os.path.isabs(raw):
        raise InvalidRoot(raw, "path must be absolute")
    normalized = os.path.normpath(raw)
    if normalized not in (raw, raw.rstrip("/\\")):
        raise InvalidRoot(raw, "path must be normalized")
    return Path(normalized)


def validate_identity(identity: str) -> str:
    """Reject identities that are not a single, plain path component."""
    if not identity:
        raise InvalidIdentifier(identity, "identity is empty")
    if "\x00" in identity:
        raise InvalidIdentifier(identity, "identity contains a NUL character")
    for separator in _SEPARATORS:
        if separator in identity:
            raise InvalidIdentifier(identity, f"identity contains separator '{separator}'")
    if PARENT_REFERENCE in identity:
        raise InvalidIdentifier(identity, "identity contains a parent reference")
    if identity == os.curdir:
        raise InvalidIdentifier(identity, "identity refers to the root itself")
    return identity


def compute_output_path(root: str | Path, identity: str) -> Path:
    """Return the output directory of project ``identity`` under ``root``.

    Args:
        root: Absolute, normalized output root
        identity: Project name, a single path component

    Returns:
        ``root / identity``, guaranteed to lie strictly inside ``root``

    Raises:
        InvalidRoot: If ``root`` is relative or not normalized
        InvalidIdentifier: If ``identity`` contains separators or ``..``
    """
    root_path = validate_root(root)
    validate_identity(identity)

    output = Path(os.path.normpath(os.path.join(root_path, identity)))
    if output == root_path or root_path not in output.parents:
        raise InvalidIdentifier(identity, "output path escapes the output root")
    return output
