"""Scorer -- derives a city's satisfaction from its inputs.

Satisfaction rewards buildings per thousand residents:
``min(100, floor(buildings / (population / 1000) * 10))``.
"""

from __future__ import annotations

import re

from cityreg.registry.errors import ValidationError
from cityreg.registry.models import CityDraft

MAX_SATISFACTION = 100

OWNER_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def score(population: int, building_count: int) -> int:
    """Return the satisfaction score in [0, 100].

    A non-positive population has no per-capita ratio and is rejected as an
    invalid draft rather than scored.
    """
    if population <= 0:
        raise ValidationError("Population must be greater than zero")
    if building_count < 0:
        raise ValidationError("Building count must not be negative")

    # Integer form of floor(b / (p / 1000) * 10)
    raw = (building_count * 10_000) // population
    return min(MAX_SATISFACTION, raw)


def validate_draft(draft: CityDraft) -> None:
    """Raise :class:`ValidationError` if the draft cannot be persisted."""
    if not isinstance(draft.name, str) or not draft.name.strip():
        raise ValidationError("City name must not be empty")
    for label, value in (("Population", draft.population), ("Building count", draft.building_count)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{label} must be an integer")
    if draft.population <= 0:
        raise ValidationError("Population must be greater than zero")
    if draft.building_count < 0:
        raise ValidationError("Building count must not be negative")


def validate_owner_address(address: str) -> None:
    if not address or not OWNER_ADDRESS_PATTERN.match(address):
        raise ValidationError(
            f"Owner address must be 0x followed by 40 hex characters, got {address!r}"
        )
