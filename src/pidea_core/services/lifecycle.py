"""Service lifecycle management for dependency injection."""

from dataclasses import dataclass
from enum import StrEnum

from pidea_core.services.protocols import ServiceFactory


class Lifecycle(StrEnum):
    """How long a resolved service instance lives."""

    SINGLETON = "singleton"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class ServiceDefinition:
    """Declarative description of how to construct one service.

    Attributes:
        name: Unique service name, the key for every lookup
        factory: Callable producing the instance from its resolved dependencies
        dependencies: Names of the services required at construction time
        category: Grouping tag used for diagnostics only
        lifecycle: Service lifecycle ("singleton" or "transient")

    """

    name: str
    factory: ServiceFactory
    dependencies: tuple[str, ...] = ()
    category: str = "domain"
    lifecycle: Lifecycle = Lifecycle.SINGLETON

    def __post_init__(self) -> None:
        """Normalise dependencies and lifecycle, reject empty names."""
        if not self.name:
            raise ValueError("Service name must be a non-empty string")
        dependencies = self.dependencies
        if isinstance(dependencies, str):
            dependencies = (dependencies,)
        # frozen dataclass - normalised values are written through object.__setattr__
        object.__setattr__(self, "dependencies", tuple(dict.fromkeys(dependencies)))
        object.__setattr__(self, "lifecycle", Lifecycle(self.lifecycle))

    @property
    def is_singleton(self) -> bool:
        """Whether instances of this service are cached by the container."""
        return self.lifecycle is Lifecycle.SINGLETON
