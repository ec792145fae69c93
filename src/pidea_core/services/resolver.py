"""Service order resolution.

ServiceOrderResolver turns a set of service definitions into a validated,
deterministic registration order. Expected failures (missing dependencies,
cycles, duplicate names) are returned as structured results rather than
raised, so bootstrap code can decide whether to abort or degrade.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping

from pidea_core.errors import (
    CircularDependencyError,
    DependencyValidationError,
    MissingReference,
    ServiceError,
)
from pidea_core.services.configuration import ResolverConfiguration
from pidea_core.services.graph import DependencyGraph
from pidea_core.services.lifecycle import ServiceDefinition
from pidea_core.services.models import ResolutionResult, ResolutionStatistics

logger = logging.getLogger(__name__)


class ServiceOrderResolver:
    """Derives a registration order from declared service dependencies."""

    def __init__(self, config: ResolverConfiguration | None = None) -> None:
        """Initialise resolver.

        Args:
            config: Resolver configuration. Defaults to ResolverConfiguration().

        """
        self._config = config or ResolverConfiguration()

    @property
    def config(self) -> ResolverConfiguration:
        """Get the resolver configuration."""
        return self._config

    def resolve_order(
        self, definitions: Iterable[ServiceDefinition]
    ) -> ResolutionResult:
        """Validate definitions and compute their registration order.

        Args:
            definitions: Service definitions to order.

        Returns:
            Successful result with the ordered names and statistics, or a
            failed result listing every validation error. A failed result
            never carries a partial order.

        Raises:
            TypeError: If definitions is None or holds non-definition items.

        """
        items = self._normalise(definitions)
        errors = self._collect_errors(items)
        if errors:
            self._log_failure(errors)
            return ResolutionResult(success=False, errors=errors)

        graph = DependencyGraph.from_definitions(items)
        order = graph.topological_order()
        statistics = ResolutionStatistics(
            total_services=len(order),
            max_dependency_depth=graph.max_depth(),
            category_breakdown=self._category_breakdown(items),
        )

        logger.info(
            "Resolved order for %d services (max dependency depth %d)",
            statistics.total_services,
            statistics.max_dependency_depth,
        )
        logger.debug("Service order: %s", order)
        return ResolutionResult(
            success=True, ordered_services=order, statistics=statistics
        )

    def validate(self, definitions: Iterable[ServiceDefinition]) -> ResolutionResult:
        """Run the pre-flight checks without computing an order.

        Args:
            definitions: Service definitions to validate.

        Returns:
            Result with ``success`` set and every error found.

        Raises:
            TypeError: If definitions is None or holds non-definition items.

        """
        errors = self._collect_errors(self._normalise(definitions))
        if errors:
            self._log_failure(errors)
            return ResolutionResult(success=False, errors=errors)
        return ResolutionResult(success=True)

    def services_by_category(
        self, definitions: Iterable[ServiceDefinition]
    ) -> dict[str, list[str]]:
        """Group service names by category.

        Categories follow the configured order, unknown categories follow
        alphabetically. Names within a category are sorted.
        """
        grouped: dict[str, list[str]] = {}
        for definition in self._normalise(definitions):
            grouped.setdefault(definition.category, []).append(definition.name)
        return {
            category: sorted(grouped[category])
            for category in self._order_categories(grouped)
        }

    def _normalise(
        self, definitions: Iterable[ServiceDefinition] | None
    ) -> list[ServiceDefinition]:
        if definitions is None:
            raise TypeError("definitions must be an iterable of ServiceDefinition")
        if isinstance(definitions, Mapping):
            definitions = definitions.values()
        items = list(definitions)
        for item in items:
            if not isinstance(item, ServiceDefinition):
                raise TypeError(
                    f"Expected ServiceDefinition, got {type(item).__name__}"
                )
        return items

    def _collect_errors(self, items: list[ServiceDefinition]) -> list[ServiceError]:
        errors: list[ServiceError] = []
        names = {definition.name for definition in items}

        name_counts = Counter(definition.name for definition in items)
        duplicates = sorted(name for name, count in name_counts.items() if count > 1)

        missing = [
            MissingReference(definition.name, dependency)
            for definition in items
            for dependency in definition.dependencies
            if dependency not in names
        ]

        unknown_categories: list[tuple[str, str]] = []
        if self._config.strict_categories:
            known = set(self._config.categories)
            unknown_categories = [
                (definition.name, definition.category)
                for definition in items
                if definition.category not in known
            ]

        if missing or duplicates or unknown_categories:
            errors.append(
                DependencyValidationError(
                    missing=missing,
                    duplicates=duplicates,
                    unknown_categories=unknown_categories,
                )
            )

        cycle = DependencyGraph.from_definitions(items).detect_cycles()
        if cycle is not None:
            errors.append(CircularDependencyError(cycle))

        return errors

    def _category_breakdown(self, items: list[ServiceDefinition]) -> dict[str, int]:
        counts = Counter(definition.category for definition in items)
        return {
            category: counts[category] for category in self._order_categories(counts)
        }

    def _order_categories(self, categories: Iterable[str]) -> list[str]:
        present = set(categories)
        known = [
            category for category in self._config.categories if category in present
        ]
        return known + sorted(present.difference(known))

    def _log_failure(self, errors: list[ServiceError]) -> None:
        logger.error(
            "Service dependency validation failed with %d error(s)", len(errors)
        )
        for error in errors:
            logger.error("  %s", error)
