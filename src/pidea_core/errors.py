"""Error types for service registration and resolution failures."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple


def format_cycle(cycle_path: Sequence[str]) -> str:
    """Render a cycle path as ``A → B → A``."""
    return " → ".join(cycle_path)


class MissingReference(NamedTuple):
    """A dependency name referenced by a service but never defined."""

    service: str
    dependency: str


class ServiceError(Exception):
    """Base exception for all service errors."""


class DependencyValidationError(ServiceError):
    """Raised when a set of service definitions fails validation.

    Every offending entry is collected so a single report covers the whole
    definition set.
    """

    def __init__(
        self,
        missing: Sequence[MissingReference] = (),
        duplicates: Sequence[str] = (),
        unknown_categories: Sequence[tuple[str, str]] = (),
    ) -> None:
        self.missing = list(missing)
        self.duplicates = list(duplicates)
        self.unknown_categories = list(unknown_categories)

        problems: list[str] = [
            f"{ref.service} → {ref.dependency} (missing)" for ref in self.missing
        ]
        problems.extend(f"{name} (duplicate definition)" for name in self.duplicates)
        problems.extend(
            f"{name} (unknown category '{category}')"
            for name, category in self.unknown_categories
        )
        super().__init__("Service definitions are invalid: " + "; ".join(problems))


class MissingDependencyError(ServiceError):
    """Raised when a service, or one of its dependencies, is not registered."""

    def __init__(self, service_name: str | None, missing_name: str) -> None:
        self.service_name = service_name
        self.missing_name = missing_name
        if service_name is None:
            message = f"Service '{missing_name}' is not registered"
        else:
            message = (
                f"Service '{service_name}' depends on '{missing_name}', "
                "which is not registered"
            )
        super().__init__(message)


class DuplicateServiceError(ServiceError):
    """Raised when a service name is registered twice."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        super().__init__(
            f"Service '{service_name}' is already registered; "
            "unregister it before registering a replacement"
        )


class CircularDependencyError(ServiceError):
    """Raised when service dependencies form a cycle."""

    def __init__(self, cycle_path: Sequence[str]) -> None:
        self.cycle_path = list(cycle_path)
        super().__init__(
            f"Circular dependency detected: {format_cycle(self.cycle_path)}"
        )


class CyclicGraphError(CircularDependencyError):
    """Raised when a dependency graph cannot be ordered because of a cycle."""


class FactoryExecutionError(ServiceError):
    """Raised when a service factory raises or produces no instance."""

    def __init__(self, service_name: str, cause: BaseException) -> None:
        self.service_name = service_name
        self.cause = cause
        super().__init__(f"Factory for service '{service_name}' failed: {cause}")


class ServiceResolutionError(ServiceError):
    """Raised when resolving a batch of services stops at a failing service."""

    def __init__(
        self,
        service_name: str,
        cause: ServiceError,
        resolved: Sequence[str] = (),
    ) -> None:
        self.service_name = service_name
        self.cause = cause
        self.resolved = list(resolved)
        super().__init__(f"Failed to resolve service '{service_name}': {cause}")
