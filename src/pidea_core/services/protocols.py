"""Service protocols for dependency injection."""

from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, runtime_checkable


class ServiceFactory(Protocol):
    """Protocol for callables that construct service instances.

    The container calls the factory with the already-resolved dependency
    instances, keyed by service name, and its configuration object. The
    factory may return the instance directly or an awaitable resolving to it,
    so services that open connections during construction can be async.

    Example:
        ```python
        def event_bus_factory(deps, config):
            return EventBus()

        async def database_factory(deps, config):
            connection = DatabaseConnection(config.database_url)
            await connection.connect()
            return connection

        def command_bus_factory(deps, config):
            return CommandBus(deps["eventBus"])
        ```

    """

    def __call__(
        self, dependencies: Mapping[str, Any], config: Any, /
    ) -> Any | Awaitable[Any]:
        """Create a service instance."""
        ...


@runtime_checkable
class Startable(Protocol):
    """Service that needs to be started after construction.

    ``start()`` may be a plain method or a coroutine function.
    """

    def start(self) -> Any:
        """Start the service."""
        ...


@runtime_checkable
class Stoppable(Protocol):
    """Service that releases resources when the container shuts down.

    ``stop()`` may be a plain method or a coroutine function.
    """

    def stop(self) -> Any:
        """Stop the service."""
        ...
