"""Base configuration classes for services and dependency resolution.

This module provides the base configuration class that service configurations
should inherit from, and the configuration consumed by ServiceOrderResolver.
"""

from __future__ import annotations

import os
from typing import Any, Self

from pydantic import BaseModel, ConfigDict

DEFAULT_CATEGORY_ORDER: tuple[str, ...] = (
    "infrastructure",
    "repositories",
    "external",
    "strategies",
    "domain",
    "handlers",
)


class BaseServiceConfiguration(BaseModel):
    """Base class for all service configurations.

    Features:
        - Pydantic validation for type safety
        - Immutable by default (frozen) for configuration integrity
        - from_properties() factory method for dictionary-based creation
        - Strict validation (no extra fields allowed)

    Example:
        ```python
        class DatabaseConfiguration(BaseServiceConfiguration):
            url: str
            pool_size: int = 5

        config = DatabaseConfiguration.from_properties({"url": "sqlite:///pidea.db"})
        container = ServiceContainer(config=config)
        ```

    """

    model_config = ConfigDict(
        # Immutable - configuration cannot be modified after creation
        frozen=True,
        # Strict - extra fields not in the model are rejected
        extra="forbid",
        validate_assignment=True,
    )

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from properties dictionary with validation.

        Subclasses should override this method to add environment variable
        support and other preprocessing logic.

        Args:
            properties: Dictionary containing configuration properties

        Returns:
            Validated configuration instance

        Raises:
            ValidationError: If properties are invalid or missing required fields

        """
        return cls.model_validate(properties)


class ResolverConfiguration(BaseServiceConfiguration):
    """Configuration for ServiceOrderResolver.

    Attributes:
        categories: Known service categories, in the order used for reporting
        strict_categories: Reject definitions whose category is not known

    """

    categories: tuple[str, ...] = DEFAULT_CATEGORY_ORDER
    strict_categories: bool = False

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from properties, falling back to environment.

        ``PIDEA_STRICT_CATEGORIES`` is read when ``strict_categories`` is not
        given explicitly.
        """
        props = dict(properties)
        if "strict_categories" not in props:
            env_value = os.getenv("PIDEA_STRICT_CATEGORIES")
            if env_value is not None:
                props["strict_categories"] = env_value.strip().lower() in {
                    "1",
                    "true",
                    "yes",
                    "on",
                }
        return cls.model_validate(props)
