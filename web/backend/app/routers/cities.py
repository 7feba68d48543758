"""Cities router -- listing, lookup, creation, and scoring of cities."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from cityreg.config import load_config
from cityreg.registry.errors import CityNotFound, SubstrateUnavailable, ValidationError
from cityreg.registry.models import City, CityDraft, RegistryStats
from cityreg.registry.projection import aggregate, owned_by, paginate, population_shares
from cityreg.registry.scorer import score
from cityreg.registry.store import CityRegistry, build_registry

from web.backend.app.models.api import (
    AvailabilityResponse,
    CityPageResponse,
    CityResponse,
    CreateCityRequest,
    RegistryStatsResponse,
    ScoreResponse,
)

router = APIRouter(prefix="/api", tags=["cities"])


@lru_cache(maxsize=1)
def get_registry() -> CityRegistry:
    """Return the process-wide registry built from ``CITYREG_*`` settings."""
    return build_registry(load_config())


def _city_to_response(city: City) -> CityResponse:
    """Convert a City dataclass to a Pydantic response model."""
    return CityResponse(
        id=city.id,
        name=city.name,
        population=city.population,
        satisfaction=city.satisfaction,
        building_count=city.building_count,
        created_at=city.created_at,
        owner_address=city.owner_address,
        short_owner=city.short_owner,
        encrypted_payload=city.encrypted_payload,
        payload_preview=city.payload_preview,
    )


def _stats_to_response(stats: RegistryStats) -> RegistryStatsResponse:
    return RegistryStatsResponse(
        count=stats.count,
        total_population=stats.total_population,
        total_buildings=stats.total_buildings,
        average_satisfaction=stats.average_satisfaction,
    )


def _load_cities(reg: CityRegistry) -> list[City]:
    if not reg.is_available():
        raise HTTPException(status_code=503, detail="Substrate is not available")
    try:
        return reg.list_all()
    except SubstrateUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.get(
    "/availability",
    response_model=AvailabilityResponse,
    summary="Check substrate availability",
)
async def check_availability(reg: CityRegistry = Depends(get_registry)):
    """Report whether the key-value substrate is reachable."""
    return AvailabilityResponse(available=reg.is_available())


@router.get(
    "/cities",
    response_model=CityPageResponse,
    summary="List cities",
)
async def list_cities(
    page: int = Query(1, description="Page number (1-based)"),
    page_size: int = Query(5, ge=1, le=100, description="Cities per page"),
    owner: Optional[str] = Query(None, description="Only cities owned by this address"),
    reg: CityRegistry = Depends(get_registry),
):
    """List cities newest first, one page at a time, with registry-wide stats."""
    cities = _load_cities(reg)
    stats = aggregate(cities)
    if owner:
        cities = owned_by(cities, owner)

    result = paginate(cities, page, page_size)
    return CityPageResponse(
        items=[_city_to_response(c) for c in result.items],
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        total_count=result.total_count,
        has_next=result.has_next,
        has_previous=result.has_previous,
        population_shares=[share for _, share in population_shares(result.items, cities)],
        stats=_stats_to_response(stats),
    )


@router.get(
    "/cities/stats",
    response_model=RegistryStatsResponse,
    summary="Registry statistics",
)
async def registry_stats(reg: CityRegistry = Depends(get_registry)):
    """Aggregate counts and average satisfaction across all cities."""
    return _stats_to_response(aggregate(_load_cities(reg)))


@router.get(
    "/cities/score",
    response_model=ScoreResponse,
    summary="Preview a satisfaction score",
)
async def preview_score(
    population: int = Query(..., description="Number of residents"),
    building_count: int = Query(..., description="Number of buildings"),
):
    """Compute the satisfaction a city with these inputs would receive."""
    try:
        satisfaction = score(population, building_count)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ScoreResponse(
        population=population,
        building_count=building_count,
        satisfaction=satisfaction,
    )


@router.get(
    "/cities/{city_id}",
    response_model=CityResponse,
    summary="Get a city",
)
async def get_city(city_id: str, reg: CityRegistry = Depends(get_registry)):
    """Retrieve a single city by id."""
    try:
        city = reg.get(city_id)
    except CityNotFound:
        raise HTTPException(status_code=404, detail=f"City '{city_id}' not found")
    except SubstrateUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return _city_to_response(city)


@router.post(
    "/cities",
    response_model=CityResponse,
    status_code=201,
    summary="Register a city",
)
async def create_city(body: CreateCityRequest, reg: CityRegistry = Depends(get_registry)):
    """Score, encrypt, and store a new city, then add it to the index."""
    draft = CityDraft(
        name=body.name,
        population=body.population,
        building_count=body.building_count,
    )
    try:
        city = reg.create(draft, body.owner_address)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SubstrateUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return _city_to_response(city)
