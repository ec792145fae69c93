"""PIDEA core: service dependency resolution and injection."""

from pidea_core.errors import (
    CircularDependencyError,
    CyclicGraphError,
    DependencyValidationError,
    DuplicateServiceError,
    FactoryExecutionError,
    MissingDependencyError,
    MissingReference,
    ServiceError,
    ServiceResolutionError,
)
from pidea_core.services import (
    BaseServiceConfiguration,
    ContainerStatistics,
    DependencyGraph,
    Lifecycle,
    ResolutionResult,
    ResolutionStatistics,
    ResolverConfiguration,
    ServiceContainer,
    ServiceDefinition,
    ServiceFactory,
    ServiceOrderResolver,
)

__all__ = [
    "BaseServiceConfiguration",
    "CircularDependencyError",
    "ContainerStatistics",
    "CyclicGraphError",
    "DependencyGraph",
    "DependencyValidationError",
    "DuplicateServiceError",
    "FactoryExecutionError",
    "Lifecycle",
    "MissingDependencyError",
    "MissingReference",
    "ResolutionResult",
    "ResolutionStatistics",
    "ResolverConfiguration",
    "ServiceContainer",
    "ServiceDefinition",
    "ServiceError",
    "ServiceFactory",
    "ServiceOrderResolver",
    "ServiceResolutionError",
]
