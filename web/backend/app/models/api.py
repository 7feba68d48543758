"""Pydantic models for API request/response serialization.

These models mirror the cityreg dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# City models
# ---------------------------------------------------------------------------


class CityResponse(BaseModel):
    """Mirrors cityreg.registry.models.City."""

    id: str
    name: str
    population: int
    satisfaction: int
    building_count: int
    created_at: int
    owner_address: str
    short_owner: str = ""
    encrypted_payload: str = ""
    payload_preview: str = ""


class CreateCityRequest(BaseModel):
    """Request body for registering a city.

    ``owner_address`` comes from the caller's connected wallet.
    """

    name: str
    population: int = 1000
    building_count: int = 5
    owner_address: str


class RegistryStatsResponse(BaseModel):
    """Mirrors cityreg.registry.models.RegistryStats."""

    count: int = 0
    total_population: int = 0
    total_buildings: int = 0
    average_satisfaction: float = 0.0


class CityPageResponse(BaseModel):
    """Mirrors cityreg.registry.models.CityPage, plus registry-wide stats."""

    items: list[CityResponse] = Field(default_factory=list)
    page: int = 1
    page_size: int = 5
    total_pages: int = 0
    total_count: int = 0
    has_next: bool = False
    has_previous: bool = False
    # One entry per item: population over the chart scale of the listing
    population_shares: list[float] = Field(default_factory=list)
    stats: RegistryStatsResponse = Field(default_factory=RegistryStatsResponse)


class ScoreResponse(BaseModel):
    """Satisfaction preview for a prospective city."""

    population: int
    building_count: int
    satisfaction: int


class AvailabilityResponse(BaseModel):
    available: bool
