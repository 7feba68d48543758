"""Registry error taxonomy."""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for errors surfaced by the registry layer."""


class ValidationError(RegistryError):
    """A draft (or owner address) was rejected before anything was written."""


class CityNotFound(RegistryError):
    """No decodable record is stored for the requested id."""

    def __init__(self, city_id: str):
        super().__init__(f"City '{city_id}' not found")
        self.city_id = city_id


class SubstrateUnavailable(RegistryError):
    """The key-value substrate is unreachable or a read/write failed."""
