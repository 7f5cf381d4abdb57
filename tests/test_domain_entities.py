"""Tests for project nodes and declarations."""
from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from buildgraph.domain.entities import ProjectDeclaration, ProjectNode
from buildgraph.domain.errors import AlreadyAssigned, EmptyIdentity, GraphError


class TestProjectNode:
    """Test ProjectNode construction and write-once output path."""

    def test_node_creation(self):
        """Test node exposes identity and dependencies."""
        node = ProjectNode("feature", ["app", "lib"])

        assert node.identity == "feature"
        assert node.evaluation_dependencies == frozenset({"app", "lib"})
        assert node.output_path is None
        assert node.is_assigned is False

    @pytest.mark.parametrize("identity", ["", "   ", "\t"])
    def test_blank_identity_fails(self, identity):
        """Test that blank identities are rejected."""
        with pytest.raises(EmptyIdentity):
            ProjectNode(identity)

    def test_assign_output_path_once(self, tmp_path):
        """Test that the output path can be set exactly once."""
        node = ProjectNode("app")
        node.assign_output_path(tmp_path / "app")

        assert node.output_path == tmp_path / "app"
        assert node.is_assigned is True

    def test_reassigning_output_path_fails(self, tmp_path):
        """Test that a second assignment raises AlreadyAssigned."""
        node = ProjectNode("app")
        node.assign_output_path(tmp_path / "app")

        with pytest.raises(AlreadyAssigned) as exc_info:
            node.assign_output_path(tmp_path / "other")

        assert exc_info.value.identity == "app"
        assert exc_info.value.current == tmp_path / "app"
        assert node.output_path == tmp_path / "app"
        assert isinstance(exc_info.value, GraphError)

    def test_attributes_are_read_only(self, tmp_path):
        """Test that identity and output path cannot be set directly."""
        node = ProjectNode("app")

        with pytest.raises(AttributeError):
            node.identity = "other"
        with pytest.raises(AttributeError):
            node.output_path = tmp_path

    def test_from_declaration(self):
        """Test building a node from a declaration."""
        node = ProjectNode.from_declaration(ProjectDeclaration(name="app", depends_on=["lib"]))

        assert node.identity == "app"
        assert node.evaluation_dependencies == frozenset({"lib"})


class TestProjectDeclaration:
    """Test the declaration model."""

    def test_defaults(self):
        declaration = ProjectDeclaration(name="app")

        assert declaration.depends_on == []

    def test_duplicate_dependencies_are_dropped_in_order(self):
        """Test that repeated dependencies collapse, keeping first occurrence."""
        declaration = ProjectDeclaration(name="app", depends_on=["b", "a", "b"])

        assert declaration.depends_on == ["b", "a"]

    def test_accepts_evaluation_dependencies_alias(self):
        declaration = ProjectDeclaration.model_validate(
            {"name": "app", "evaluation_dependencies": ["lib"]}
        )

        assert declaration.depends_on == ["lib"]

    def test_declaration_is_frozen(self):
        declaration = ProjectDeclaration(name="app")

        with pytest.raises(PydanticValidationError):
            declaration.name = "other"

    def test_name_is_required(self):
        with pytest.raises(PydanticValidationError):
            ProjectDeclaration.model_validate({"depends_on": []})
