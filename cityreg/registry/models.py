"""Registry data models -- city records, drafts, stats, and pages."""

from __future__ import annotations

from dataclasses import dataclass, field

PAYLOAD_PREVIEW_LENGTH = 20


@dataclass(frozen=True)
class City:
    """A single city record in the registry."""

    # Identity
    id: str
    name: str

    # Inputs and derived score
    population: int
    satisfaction: int  # 0 - 100, computed at creation
    building_count: int

    # Provenance
    created_at: int  # Seconds since epoch
    owner_address: str
    encrypted_payload: str = ""

    @property
    def short_owner(self) -> str:
        """Owner address shortened for display, e.g. ``0x1234...abcd``."""
        return f"{self.owner_address[:6]}...{self.owner_address[38:]}"

    @property
    def payload_preview(self) -> str:
        return f"{self.encrypted_payload[:PAYLOAD_PREVIEW_LENGTH]}..."

    def is_owned_by(self, address: str) -> bool:
        return bool(address) and self.owner_address.lower() == address.lower()


@dataclass
class CityDraft:
    """User-supplied input for a new city, before scoring and persistence."""

    name: str = ""
    population: int = 1000
    building_count: int = 5


@dataclass
class RegistryStats:
    """Aggregate statistics over a set of cities."""

    count: int = 0
    total_population: int = 0
    total_buildings: int = 0
    average_satisfaction: float = 0.0


@dataclass
class CityPage:
    """One page of cities, newest first, plus the metadata to page through."""

    items: list[City] = field(default_factory=list)
    page: int = 1
    page_size: int = 5
    total_pages: int = 0
    total_count: int = 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return 1 < self.page <= self.total_pages
