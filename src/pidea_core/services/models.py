"""Pydantic models for resolution results and service statistics."""

from pydantic import BaseModel, ConfigDict, Field

from pidea_core.errors import ServiceError


class ResolutionStatistics(BaseModel):
    """Diagnostics computed for a successfully ordered definition set."""

    model_config = ConfigDict(frozen=True)

    total_services: int
    max_dependency_depth: int
    """Length, in edges, of the longest dependency chain."""

    category_breakdown: dict[str, int] = Field(default_factory=dict)


class ResolutionResult(BaseModel):
    """Outcome of ServiceOrderResolver.resolve_order() or validate().

    On failure ``ordered_services`` is always empty and ``errors`` holds
    every validation failure found.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    ordered_services: list[str] = Field(default_factory=list)
    statistics: ResolutionStatistics | None = None
    errors: list[ServiceError] = Field(default_factory=list)


class ContainerStatistics(BaseModel):
    """Counts describing the state of a ServiceContainer."""

    model_config = ConfigDict(frozen=True)

    registered: int
    resolved: int
    """Distinct services successfully resolved at least once."""

    cached_singletons: int
    by_category: dict[str, int] = Field(default_factory=dict)


class StartupFailure(BaseModel):
    """A service whose start hook raised."""

    service: str
    error: str


class StartupReport(BaseModel):
    """Outcome of ServiceContainer.start_all()."""

    started: list[str] = Field(default_factory=list)
    failed: list[StartupFailure] = Field(default_factory=list)
