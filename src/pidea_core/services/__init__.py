"""Service management and dependency injection infrastructure."""

from pidea_core.services.configuration import (
    BaseServiceConfiguration,
    ResolverConfiguration,
)
from pidea_core.services.container import ServiceContainer
from pidea_core.services.graph import DependencyGraph
from pidea_core.services.lifecycle import Lifecycle, ServiceDefinition
from pidea_core.services.models import (
    ContainerStatistics,
    ResolutionResult,
    ResolutionStatistics,
    StartupFailure,
    StartupReport,
)
from pidea_core.services.protocols import ServiceFactory, Startable, Stoppable
from pidea_core.services.resolver import ServiceOrderResolver

__all__ = [
    "BaseServiceConfiguration",
    "ContainerStatistics",
    "DependencyGraph",
    "Lifecycle",
    "ResolutionResult",
    "ResolutionStatistics",
    "ResolverConfiguration",
    "ServiceContainer",
    "ServiceDefinition",
    "ServiceFactory",
    "ServiceOrderResolver",
    "Startable",
    "StartupFailure",
    "StartupReport",
    "Stoppable",
]
