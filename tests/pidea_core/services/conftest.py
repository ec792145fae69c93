"""Shared test fixtures for services tests."""

from collections.abc import Mapping, Sequence
from typing import Any

from pidea_core.services import Lifecycle, ServiceDefinition


class TestService:
    """Simple test service recording the dependencies it was built with."""

    __test__ = False

    def __init__(self, name: str, dependencies: Mapping[str, Any], config: Any) -> None:
        self.name = name
        self.dependencies = dict(dependencies)
        self.config = config


class CountingFactory:
    """Factory that creates TestService instances and counts invocations.

    This factory is compliant with the ServiceFactory protocol.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.calls = 0

    def __call__(self, dependencies: Mapping[str, Any], config: Any) -> TestService:
        self.calls += 1
        return TestService(self.name, dependencies, config)


def make_definition(
    name: str,
    dependencies: Sequence[str] = (),
    *,
    category: str = "domain",
    lifecycle: Lifecycle | str = Lifecycle.SINGLETON,
    factory: Any = None,
) -> ServiceDefinition:
    """Build a definition, defaulting to a CountingFactory for the service."""
    return ServiceDefinition(
        name=name,
        factory=factory if factory is not None else CountingFactory(name),
        dependencies=tuple(dependencies),
        category=category,
        lifecycle=Lifecycle(lifecycle),
    )
