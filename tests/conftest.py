"""
Test configuration and fixtures for buildgraph tests.
"""
import os
from pathlib import Path

import pytest

from buildgraph.domain.entities import ProjectDeclaration
from buildgraph.domain.events import (
    DomainEventPublisher,
    GraphBuilt,
    OutputCleaned,
    UnsafeLinkSkipped,
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep settings away from the developer's environment and .env file."""
    for key in list(os.environ):
        if key.upper().startswith("BUILDGRAPH_"):
            monkeypatch.delenv(key)
    workdir = tmp_path / "workdir"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield workdir


@pytest.fixture
def output_root(tmp_path):
    """Absolute output root that does not exist yet."""
    return tmp_path / "build"


@pytest.fixture
def populated_tree(output_root):
    """Create a small output tree resembling two built projects.

    build/
    ├── app/
    │   ├── locked.bin
    │   ├── out.txt
    │   └── classes/A.class
    └── lib/
        ├── lib.jar
        └── tmp/
    """
    app = output_root / "app"
    (app / "classes").mkdir(parents=True)
    (app / "locked.bin").write_bytes(b"\x00\x01")
    (app / "out.txt").write_text("output")
    (app / "classes" / "A.class").write_bytes(b"\xca\xfe\xba\xbe")

    lib = output_root / "lib"
    (lib / "tmp").mkdir(parents=True)
    (lib / "lib.jar").write_bytes(b"PK")
    return output_root


@pytest.fixture
def declarations():
    """Declared projects: lib, app after lib, feature after app, util alone."""
    return [
        ProjectDeclaration(name="lib"),
        ProjectDeclaration(name="app", depends_on=["lib"]),
        ProjectDeclaration(name="feature", depends_on=["app"]),
        ProjectDeclaration(name="util"),
    ]


@pytest.fixture
def publisher():
    """Publisher that records every event it sees."""
    publisher = DomainEventPublisher()
    publisher.seen = []

    def record(event):
        publisher.seen.append(event)

    for event_type in (GraphBuilt, OutputCleaned, UnsafeLinkSkipped):
        publisher.subscribe(event_type, record)
    return publisher


@pytest.fixture
def unlink_failing_for(monkeypatch):
    """Make ``os.unlink`` fail with EACCES for the given paths."""
    real_unlink = os.unlink

    def install(*blocked: Path):
        blocked_paths = {Path(path) for path in blocked}

        def flaky_unlink(path, *args, **kwargs):
            if Path(path) in blocked_paths:
                raise PermissionError(13, "Permission denied", str(path))
            return real_unlink(path, *args, **kwargs)

        monkeypatch.setattr(os, "unlink", flaky_unlink)

    return install
