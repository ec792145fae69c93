"""Tests for ServiceDefinition and Lifecycle."""

import dataclasses

import pytest

from pidea_core.services import Lifecycle, ServiceDefinition

from .conftest import CountingFactory


class TestServiceDefinition:
    """Tests for ServiceDefinition normalisation and defaults."""

    def test_defaults(self) -> None:
        """A definition defaults to a singleton domain service without dependencies."""
        definition = ServiceDefinition(
            name="eventBus", factory=CountingFactory("eventBus")
        )

        assert definition.dependencies == ()
        assert definition.category == "domain"
        assert definition.lifecycle is Lifecycle.SINGLETON
        assert definition.is_singleton

    def test_dependency_list_normalised_to_tuple(self) -> None:
        """Dependencies given as a list are stored as a tuple."""
        definition = ServiceDefinition(
            name="commandBus",
            factory=CountingFactory("commandBus"),
            dependencies=["eventBus", "logger"],  # type: ignore[arg-type]
        )

        assert definition.dependencies == ("eventBus", "logger")

    def test_repeated_dependencies_collapsed(self) -> None:
        """Repeated dependency names keep their first position only."""
        definition = ServiceDefinition(
            name="svc",
            factory=CountingFactory("svc"),
            dependencies=("b", "a", "b"),
        )

        assert definition.dependencies == ("b", "a")

    def test_lifecycle_string_coerced(self) -> None:
        """Plain lifecycle strings are coerced to the enum."""
        definition = ServiceDefinition(
            name="request",
            factory=CountingFactory("request"),
            lifecycle="transient",  # type: ignore[arg-type]
        )

        assert definition.lifecycle is Lifecycle.TRANSIENT
        assert not definition.is_singleton

    def test_invalid_lifecycle_rejected(self) -> None:
        """Unknown lifecycles raise ValueError."""
        with pytest.raises(ValueError):
            ServiceDefinition(
                name="svc",
                factory=CountingFactory("svc"),
                lifecycle="scoped",  # type: ignore[arg-type]
            )

    def test_empty_name_rejected(self) -> None:
        """A definition must have a name."""
        with pytest.raises(ValueError, match="non-empty"):
            ServiceDefinition(name="", factory=CountingFactory(""))

    def test_definition_is_immutable(self) -> None:
        """Definitions cannot be mutated after creation."""
        definition = ServiceDefinition(name="svc", factory=CountingFactory("svc"))

        with pytest.raises(dataclasses.FrozenInstanceError):
            definition.name = "other"  # type: ignore[misc]

    def test_single_dependency_string_kept_whole(self) -> None:
        """A bare string names one dependency rather than one per character."""
        definition = ServiceDefinition(
            name="repository",
            factory=CountingFactory("repository"),
            dependencies="db",  # type: ignore[arg-type]
        )

        assert definition.dependencies == ("db",)
