"""Tests for the orchestrator facade."""
from __future__ import annotations

from unittest.mock import Mock

import pytest

from buildgraph.config import Settings
from buildgraph.domain.errors import CyclicDependency, DuplicateIdentity, GraphError
from buildgraph.domain.events import GraphBuilt, OutputCleaned, UnsafeLinkSkipped
from buildgraph.schemas.results import CleanResult, PathFailure, UnsafeLink
from buildgraph.services.orchestrator import Orchestrator
from buildgraph.storage.filesystem import FilesystemCleaner
from buildgraph.storage.interface import OutputCleaner


class TestInitialize:
    """Test facade construction."""

    def test_relative_root_is_anchored_one_level_up(self, tmp_path, declarations):
        """Test the ../build layout shared by every project."""
        orchestrator = Orchestrator.initialize("../build", declarations, anchor=tmp_path / "android")

        assert orchestrator.root == tmp_path / "build"
        assert orchestrator.graph.output_path_of("app") == tmp_path / "build" / "app"
        assert orchestrator.graph.evaluation_order() == ["lib", "app", "feature", "util"]

    def test_primary_is_forwarded(self, output_root):
        orchestrator = Orchestrator.initialize(
            output_root, [("wear", []), ("app", [])], primary="app"
        )

        assert orchestrator.graph.evaluation_order() == ["app", "wear"]

    def test_construction_error_propagates(self, output_root):
        """Test that initialization fails as a whole."""
        with pytest.raises(CyclicDependency) as exc_info:
            Orchestrator.initialize(output_root, [("A", ["B"]), ("B", ["A"])])

        assert set(exc_info.value.members) == {"A", "B"}

    def test_malformed_declaration_is_graph_error(self, output_root):
        with pytest.raises(GraphError):
            Orchestrator.initialize(output_root, [{"depends_on": []}])

    def test_no_event_for_failed_construction(self, output_root, publisher):
        with pytest.raises(DuplicateIdentity):
            Orchestrator.initialize(output_root, [("app", []), ("app", [])], publisher=publisher)

        assert publisher.seen == []

    def test_graph_built_event(self, output_root, declarations, publisher):
        Orchestrator.initialize(output_root, declarations, publisher=publisher)

        assert len(publisher.seen) == 1
        event = publisher.seen[0]
        assert isinstance(event, GraphBuilt)
        assert event.aggregate_id == str(output_root)
        assert event.evaluation_order == ["lib", "app", "feature", "util"]

    def test_default_cleaner_is_filesystem(self, output_root, declarations):
        orchestrator = Orchestrator.initialize(output_root, declarations)

        assert isinstance(orchestrator._cleaner, FilesystemCleaner)

    def test_passthrough_is_read_only(self, output_root, declarations):
        """Test opaque configuration is handed out unchanged."""
        config = {"repositories": ["google", "mavenCentral"]}
        orchestrator = Orchestrator.initialize(output_root, declarations, passthrough=config)

        assert orchestrator.passthrough["repositories"] == ["google", "mavenCentral"]
        with pytest.raises(TypeError):
            orchestrator.passthrough["plugins"] = []
        config["plugins"] = ["google-services"]
        assert "plugins" not in orchestrator.passthrough

    def test_instances_are_independent(self, tmp_path, declarations):
        """Test there is no shared, process-wide root."""
        first = Orchestrator.initialize(tmp_path / "one", declarations)
        second = Orchestrator.initialize(tmp_path / "two", declarations)

        assert first.root != second.root


class TestFromSettings:
    """Test building the facade from configuration."""

    def test_from_settings(self, tmp_path, declarations):
        settings = Settings(
            OUTPUT_ROOT="../out",
            PROJECT_DIR=str(tmp_path / "android"),
            PASSTHROUGH={"plugins": ["google-services"]},
        )

        orchestrator = Orchestrator.from_settings(settings, declarations)

        assert orchestrator.root == tmp_path / "out"
        assert orchestrator.passthrough == {"plugins": ["google-services"]}

    def test_primary_from_settings(self, output_root):
        settings = Settings(OUTPUT_ROOT=str(output_root), PRIMARY_PROJECT="app")

        orchestrator = Orchestrator.from_settings(settings, [("wear", []), ("app", [])])

        assert orchestrator.graph.dependencies_of("wear") == frozenset({"app"})

    def test_dry_run_cleaner(self, populated_tree, declarations):
        settings = Settings(OUTPUT_ROOT=str(populated_tree))

        result = Orchestrator.from_settings(settings, declarations, dry_run=True).clean()

        assert result.dry_run
        assert populated_tree.exists()


class TestClean:
    """Test the clean operation."""

    def test_clean_delegates_root_path(self, output_root, declarations):
        """Test the cleaner receives the root path, not a node."""
        cleaner = Mock(spec=OutputCleaner)
        cleaner.clean.return_value = CleanResult(root=output_root)
        orchestrator = Orchestrator.initialize(output_root, declarations, cleaner=cleaner)

        result = orchestrator.clean()

        cleaner.clean.assert_called_once_with(output_root)
        assert result.ok

    def test_clean_removes_tree(self, populated_tree, declarations):
        orchestrator = Orchestrator.initialize(populated_tree, declarations)

        result = orchestrator.clean()

        assert result.ok
        assert not populated_tree.exists()
        assert orchestrator.clean().removed == 0

    def test_clean_does_not_change_order(self, populated_tree, declarations):
        orchestrator = Orchestrator.initialize(populated_tree, declarations)
        before = orchestrator.graph.evaluation_order()

        orchestrator.clean()

        assert orchestrator.graph.evaluation_order() == before

    def test_clean_publishes_events(self, output_root, declarations, publisher):
        cleaner = Mock(spec=OutputCleaner)
        cleaner.clean.return_value = CleanResult(
            root=output_root,
            removed=4,
            failures=[PathFailure(path=output_root / "app" / "x", reason="Permission denied")],
            warnings=[UnsafeLink(path=output_root / "lib" / "ext", target="/elsewhere")],
        )
        orchestrator = Orchestrator.initialize(
            output_root, declarations, cleaner=cleaner, publisher=publisher
        )

        result = orchestrator.clean()

        assert not result.ok
        kinds = [type(event) for event in publisher.seen]
        assert kinds == [GraphBuilt, UnsafeLinkSkipped, OutputCleaned]
        cleaned = publisher.seen[-1]
        assert cleaned.removed == 4
        assert cleaned.failed == [str(output_root / "app" / "x")]
        assert publisher.seen[1].target == "/elsewhere"
