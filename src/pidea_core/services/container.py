"""Service container for dependency injection."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import Counter, deque
from collections.abc import Iterable, Mapping
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

from pidea_core.errors import (
    CircularDependencyError,
    DuplicateServiceError,
    FactoryExecutionError,
    MissingDependencyError,
    ServiceError,
    ServiceResolutionError,
)
from pidea_core.services.graph import DependencyGraph
from pidea_core.services.lifecycle import ServiceDefinition
from pidea_core.services.models import (
    ContainerStatistics,
    ResolutionResult,
    StartupFailure,
    StartupReport,
)
from pidea_core.services.protocols import Startable, Stoppable
from pidea_core.services.resolver import ServiceOrderResolver

logger = logging.getLogger(__name__)

# Names currently being constructed by this task, outermost first
_resolution_chain: ContextVar[tuple[str, ...]] = ContextVar(
    "pidea_resolution_chain", default=()
)


class ServiceContainer:
    """Dependency injection container for managing service lifecycle."""

    def __init__(self, config: Any = None) -> None:
        """Initialise the service container.

        Args:
            config: Configuration object passed to every service factory.

        """
        self._config = config
        self._definitions: dict[str, ServiceDefinition] = {}
        # Insertion order is construction order, used by start_all()/shutdown()
        self._singletons: dict[str, Any] = {}
        self._pending: dict[str, asyncio.Task[Any]] = {}
        # Task -> name of the in-flight singleton it is currently awaiting
        self._waiting: dict[asyncio.Task[Any], str] = {}
        self._resolved_names: set[str] = set()
        logger.debug("ServiceContainer initialized")

    @property
    def config(self) -> Any:
        """Get the configuration object passed to factories."""
        return self._config

    @property
    def definitions(self) -> tuple[ServiceDefinition, ...]:
        """Get the registered definitions in registration order."""
        return tuple(self._definitions.values())

    def is_registered(self, name: str) -> bool:
        """Check whether a service name is registered."""
        return name in self._definitions

    def register(self, definition: ServiceDefinition) -> None:
        """Register a service with the container.

        Args:
            definition: Service definition containing name, factory and lifecycle

        Raises:
            DuplicateServiceError: If the name is already registered

        """
        if definition.name in self._definitions:
            raise DuplicateServiceError(definition.name)

        self._definitions[definition.name] = definition
        logger.debug(
            "Registered service: %s (category: %s, lifecycle: %s)",
            definition.name,
            definition.category,
            definition.lifecycle,
        )

    def register_all(self, definitions: Iterable[ServiceDefinition]) -> None:
        """Register several definitions, stopping at the first duplicate."""
        for definition in definitions:
            self.register(definition)

    def unregister(self, name: str) -> None:
        """Remove a service definition and its cached instance, if any.

        The cached instance is dropped without calling its stop hook.

        Raises:
            MissingDependencyError: If the name is not registered

        """
        if name not in self._definitions:
            raise MissingDependencyError(None, name)

        del self._definitions[name]
        self._singletons.pop(name, None)
        # A construction still running for the old definition is not joined
        self._pending.pop(name, None)
        self._resolved_names.discard(name)
        logger.debug("Unregistered service: %s", name)

    async def resolve(self, name: str) -> Any:
        """Get a service instance, constructing it and its dependencies as needed.

        Args:
            name: Name of the service to resolve

        Returns:
            Service instance

        Raises:
            MissingDependencyError: If the service or a transitive dependency
                is not registered
            CircularDependencyError: If the dependencies form a cycle
            FactoryExecutionError: If a factory raised or returned None

        """
        if name in self._singletons:
            logger.debug("Returning cached singleton service: %s", name)
            return self._singletons[name]

        if not _resolution_chain.get():
            self._check_resolvable(name)

        return await self._resolve(name)

    async def resolve_all(self, names: Iterable[str]) -> dict[str, Any]:
        """Resolve services in the given order.

        Args:
            names: Service names, typically a ServiceOrderResolver order

        Returns:
            Mapping of service name to instance

        Raises:
            ServiceResolutionError: For the first service that fails, wrapping
                the underlying error

        """
        instances: dict[str, Any] = {}
        for name in names:
            try:
                instances[name] = await self.resolve(name)
            except ServiceError as e:
                logger.error("Failed to resolve service %s: %s", name, e)
                raise ServiceResolutionError(name, e, resolved=list(instances)) from e
        return instances

    def validate_dependencies(
        self, resolver: ServiceOrderResolver | None = None
    ) -> ResolutionResult:
        """Validate the registered definitions without constructing anything."""
        resolver = resolver or ServiceOrderResolver()
        return resolver.validate(self._definitions.values())

    def get_statistics(self) -> ContainerStatistics:
        """Get registration and resolution counts."""
        by_category = Counter(d.category for d in self._definitions.values())
        return ContainerStatistics(
            registered=len(self._definitions),
            resolved=len(self._resolved_names),
            cached_singletons=len(self._singletons),
            by_category=dict(sorted(by_category.items())),
        )

    async def start_all(self) -> StartupReport:
        """Call ``start()`` on cached singletons in construction order.

        Failures are collected in the report rather than raised.
        """
        report = StartupReport()
        for name, instance in list(self._singletons.items()):
            if not isinstance(instance, Startable):
                continue
            try:
                result = instance.start()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning("Service %s failed to start: %s", name, e)
                report.failed.append(StartupFailure(service=name, error=str(e)))
            else:
                report.started.append(name)

        logger.info(
            "Service startup completed: %d started, %d failed",
            len(report.started),
            len(report.failed),
        )
        return report

    async def shutdown(self) -> None:
        """Stop cached singletons in reverse construction order and clear the cache.

        Definitions stay registered; errors from ``stop()`` are logged.
        """
        for name, instance in reversed(list(self._singletons.items())):
            if not isinstance(instance, Stoppable):
                continue
            try:
                result = instance.stop()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Service %s failed to stop", name)

        self._singletons.clear()
        self._resolved_names.clear()
        logger.debug("ServiceContainer shut down")

    def _check_resolvable(self, name: str) -> None:
        """Statically check the subgraph reachable from ``name``."""
        if name not in self._definitions:
            raise MissingDependencyError(None, name)

        reachable: dict[str, ServiceDefinition] = {}
        queue = deque([name])
        while queue:
            current = queue.popleft()
            if current in reachable or current in self._singletons:
                continue
            definition = self._definitions[current]
            reachable[current] = definition
            for dependency in definition.dependencies:
                if dependency not in self._definitions:
                    raise MissingDependencyError(current, dependency)
                queue.append(dependency)

        cycle = DependencyGraph.from_definitions(reachable.values()).detect_cycles()
        if cycle is not None:
            raise CircularDependencyError(cycle)

    async def _resolve(self, name: str) -> Any:
        chain = _resolution_chain.get()
        if name in chain:
            raise CircularDependencyError([*chain[chain.index(name) :], name])

        definition = self._definitions.get(name)
        if definition is None:
            raise MissingDependencyError(chain[-1] if chain else None, name)

        if not definition.is_singleton:
            logger.debug("Creating transient service: %s", name)
            instance = await self._construct(definition)
            self._resolved_names.add(name)
            return instance

        if name in self._singletons:
            logger.debug("Returning cached singleton service: %s", name)
            return self._singletons[name]

        task = self._pending.get(name)
        if task is None:
            logger.debug("Creating singleton service: %s", name)
            task = asyncio.create_task(self._construct_singleton(definition))
            self._pending[name] = task
        else:
            self._check_wait_cycle(name, chain)
            logger.debug("Waiting for in-flight singleton service: %s", name)

        current = asyncio.current_task()
        if current is not None:
            self._waiting[current] = name
        try:
            # Cancelling a waiter must not cancel the shared construction
            return await asyncio.shield(task)
        finally:
            if current is not None:
                self._waiting.pop(current, None)

    def _check_wait_cycle(self, name: str, chain: tuple[str, ...]) -> None:
        """Raise if the in-flight construction of ``name`` is waiting on this task.

        Factories that call ``resolve`` themselves create edges the static
        check never sees, so two concurrent constructions can end up awaiting
        each other.
        """
        current = asyncio.current_task()
        walked = [name]
        task = self._pending.get(name)
        while task is not None:
            awaited = self._waiting.get(task)
            if awaited is None or awaited in walked:
                return
            if self._pending.get(awaited) is current:
                start = chain.index(awaited) if awaited in chain else len(chain)
                raise CircularDependencyError([*chain[start:], *walked, awaited])
            walked.append(awaited)
            task = self._pending.get(awaited)

    async def _construct_singleton(self, definition: ServiceDefinition) -> Any:
        name = definition.name
        try:
            instance = await self._construct(definition)
            if self._definitions.get(name) is definition:
                self._singletons[name] = instance
                self._resolved_names.add(name)
                logger.debug("Singleton service created and cached: %s", name)
            return instance
        finally:
            if self._pending.get(name) is asyncio.current_task():
                del self._pending[name]

    async def _construct(self, definition: ServiceDefinition) -> Any:
        token = _resolution_chain.set((*_resolution_chain.get(), definition.name))
        try:
            dependencies: dict[str, Any] = {}
            for dependency in definition.dependencies:
                dependencies[dependency] = await self._resolve(dependency)
            return await self._invoke_factory(
                definition, MappingProxyType(dependencies)
            )
        finally:
            _resolution_chain.reset(token)

    async def _invoke_factory(
        self, definition: ServiceDefinition, dependencies: Mapping[str, Any]
    ) -> Any:
        name = definition.name
        try:
            instance = definition.factory(dependencies, self._config)
            if inspect.isawaitable(instance):
                instance = await instance
        except ServiceError:
            # Nested resolution failures from inside the factory keep their type
            raise
        except Exception as e:
            logger.error("Factory for %s raised %s: %s", name, type(e).__name__, e)
            raise FactoryExecutionError(name, e) from e

        if instance is None:
            logger.error("Factory for %s returned None - service unavailable", name)
            error = ValueError(
                f"Factory for {name} returned None - service unavailable"
            )
            raise FactoryExecutionError(name, error) from error

        return instance
