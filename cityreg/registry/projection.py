"""View projection -- statistics, ordering, and pagination over cities.

All functions are pure and operate on whatever collection the store
returned; none of them touch the substrate.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from cityreg.registry.models import City, CityPage, RegistryStats

DEFAULT_PAGE_SIZE = 5
POPULATION_SCALE_FLOOR = 10000


def aggregate(cities: Sequence[City]) -> RegistryStats:
    """Reduce cities to totals and the mean satisfaction (0.0 when empty)."""
    count = len(cities)
    if count == 0:
        return RegistryStats()

    return RegistryStats(
        count=count,
        total_population=sum(c.population for c in cities),
        total_buildings=sum(c.building_count for c in cities),
        average_satisfaction=sum(c.satisfaction for c in cities) / count,
    )


def sorted_by_recency(cities: Iterable[City]) -> list[City]:
    """Newest first. Equal timestamps keep their input order."""
    return sorted(cities, key=lambda c: c.created_at, reverse=True)


def total_pages(count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    _check_page_size(page_size)
    return math.ceil(count / page_size) if count > 0 else 0


def page(cities: Sequence[City], page_number: int, page_size: int = DEFAULT_PAGE_SIZE) -> list[City]:
    """Return the 1-indexed ``page_number`` slice.

    Pages outside ``[1, total_pages]`` are empty rather than an error.
    """
    if page_number < 1 or page_number > total_pages(len(cities), page_size):
        return []
    start = (page_number - 1) * page_size
    return list(cities[start:start + page_size])


def paginate(
    cities: Iterable[City],
    page_number: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> CityPage:
    """Sort newest first and cut one page, with the metadata to page through."""
    ordered = sorted_by_recency(cities)
    return CityPage(
        items=page(ordered, page_number, page_size),
        page=page_number,
        page_size=page_size,
        total_pages=total_pages(len(ordered), page_size),
        total_count=len(ordered),
    )


def owned_by(cities: Iterable[City], address: str) -> list[City]:
    return [c for c in cities if c.is_owned_by(address)]


def population_shares(
    cities: Sequence[City],
    reference: Optional[Sequence[City]] = None,
    floor: int = POPULATION_SCALE_FLOOR,
) -> list[tuple[City, float]]:
    """Pair each city with its population as a fraction of the chart scale.

    The scale is the largest population in ``reference`` (default: ``cities``
    itself), but never less than ``floor``. Pass the whole registry as
    ``reference`` to keep bar widths comparable from page to page.
    """
    pool = cities if reference is None else reference
    scale = max(max((c.population for c in pool), default=0), floor, 1)
    return [(c, c.population / scale) for c in cities]


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
