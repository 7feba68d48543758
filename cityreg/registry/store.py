"""Substrate-backed city registry.

Composes the codec and the index manager over a get/set substrate. The store
is the only component that writes either the record keys or the index key.

Creating a city is two separate writes: the record first, then the index. If
the process dies or the substrate fails in between, the record is orphaned:
``get`` still finds it by id, but ``list_all`` never will. Nothing here
retries or rolls back.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from cityreg.config import RegistryConfig
from cityreg.crypto.encryptor import Encryptor
from cityreg.registry import codec
from cityreg.registry.errors import CityNotFound, SubstrateUnavailable
from cityreg.registry.index import IndexManager
from cityreg.registry.models import City, CityDraft
from cityreg.registry.scorer import score, validate_draft, validate_owner_address
from cityreg.substrate.base import Substrate

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 7


def generate_city_id() -> str:
    """Millisecond timestamp plus a short random base-36 suffix.

    Collisions are unlikely within one process but not ruled out across
    independent writers; ids are not checked against the index.
    """
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{millis}-{suffix}"


def _epoch_seconds() -> int:
    return int(time.time())


class CityRegistry:
    """City registry over a key-value substrate."""

    def __init__(
        self,
        substrate: Substrate,
        encryptor: Encryptor,
        *,
        clock: Optional[Callable[[], int]] = None,
        id_factory: Optional[Callable[[], str]] = None,
        fetch_workers: int = 1,
    ):
        self.substrate = substrate
        self.encryptor = encryptor
        self.index = IndexManager(substrate)
        self._clock = clock or _epoch_seconds
        self._id_factory = id_factory or generate_city_id
        self.fetch_workers = max(1, fetch_workers)

    def is_available(self) -> bool:
        try:
            return bool(self.substrate.is_available())
        except SubstrateUnavailable as e:
            logger.warning("Availability check failed: %s", e)
            return False

    def list_all(self) -> list[City]:
        """Return every indexed city that can be fetched and decoded.

        Entries that fail are logged and skipped. Results follow index
        order, which callers should not rely on; use the projection
        helpers to order them.
        """
        if not self.is_available():
            logger.warning("Substrate is not available; returning no cities")
            return []

        ids = self.index.load()
        if not ids:
            return []

        if self.fetch_workers > 1 and len(ids) > 1:
            with ThreadPoolExecutor(max_workers=min(self.fetch_workers, len(ids))) as pool:
                results = list(pool.map(self._fetch_tolerant, ids))
        else:
            results = [self._fetch_tolerant(city_id) for city_id in ids]

        cities = [c for c in results if c is not None]
        if len(cities) != len(ids):
            logger.warning("Loaded %d of %d indexed cities", len(cities), len(ids))
        return cities

    def get(self, city_id: str) -> City:
        """Fetch one city by id, indexed or not."""
        raw = self.substrate.get_data(codec.record_key(city_id))
        result = codec.decode(raw, city_id)
        if isinstance(result, codec.DecodeError):
            if raw:
                logger.warning("Undecodable city record %s", result)
            raise CityNotFound(city_id)
        return result

    def create(self, draft: CityDraft, owner_address: str) -> City:
        """Score, encrypt, and persist a new city, then index it.

        Validation happens before anything is written. Substrate write
        failures propagate unchanged.
        """
        validate_draft(draft)
        validate_owner_address(owner_address)

        if not self.is_available():
            raise SubstrateUnavailable("Substrate is not available; city not created")

        satisfaction = score(draft.population, draft.building_count)
        payload = self.encryptor.encrypt(draft)

        city = City(
            id=self._id_factory(),
            name=draft.name,
            population=draft.population,
            satisfaction=satisfaction,
            building_count=draft.building_count,
            created_at=self._clock(),
            owner_address=owner_address,
            encrypted_payload=payload,
        )

        # Record before index: the index must never name a missing record.
        self.substrate.set_data(codec.record_key(city.id), codec.encode(city))

        ids = self.index.load()
        self.index.save(self.index.append(ids, city.id))

        logger.info("Created city %s (%s) with satisfaction %d", city.id, city.name, satisfaction)
        return city

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fetch_tolerant(self, city_id: str) -> City | None:
        logger.debug("Fetching city %s", city_id)
        try:
            raw = self.substrate.get_data(codec.record_key(city_id))
        except SubstrateUnavailable as e:
            logger.warning("Error loading city %s: %s", city_id, e)
            return None

        if not raw:
            logger.warning("Indexed city %s has no stored record", city_id)
            return None

        result = codec.decode(raw, city_id)
        if isinstance(result, codec.DecodeError):
            logger.warning("Skipping city %s", result)
            return None
        return result


def build_registry(config: RegistryConfig) -> CityRegistry:
    """Assemble a registry with the configured substrate and the simulated FHE encryptor."""
    from cityreg.crypto.encryptor import SimulatedFHEEncryptor
    from cityreg.substrate.factory import build_substrate

    return CityRegistry(
        build_substrate(config),
        SimulatedFHEEncryptor(),
        fetch_workers=config.fetch_workers,
    )
