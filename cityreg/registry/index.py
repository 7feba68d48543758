"""Index manager -- the ordered list of known city ids.

The index is a single value under ``city_keys``, replaced whole on every
write. There is no compare-and-swap: two writers that load the same index
and each append an id will race, and the later write drops the earlier id.
"""

from __future__ import annotations

import logging

from cityreg.registry.codec import INDEX_KEY, DecodeError, decode_index, encode_index
from cityreg.substrate.base import Substrate

logger = logging.getLogger(__name__)


class IndexManager:
    """Reads and writes the id index on a substrate."""

    def __init__(self, substrate: Substrate):
        self.substrate = substrate

    def load(self) -> list[str]:
        """Return the stored ids, or an empty list if absent or malformed.

        Substrate read failures propagate.
        """
        raw = self.substrate.get_data(INDEX_KEY)
        result = decode_index(raw)
        if isinstance(result, DecodeError):
            logger.warning("Ignoring malformed index: %s", result)
            return []
        return result

    @staticmethod
    def append(ids: list[str], city_id: str) -> list[str]:
        """Return a new list with ``city_id`` at the end.

        The input is never modified. An id already present is not added
        again.
        """
        updated = list(ids)
        if city_id not in updated:
            updated.append(city_id)
        return updated

    def save(self, ids: list[str]) -> None:
        self.substrate.set_data(INDEX_KEY, encode_index(ids))
