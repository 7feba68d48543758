"""Record codec -- the wire format for city records and the id index.

Each city lives under ``city_<id>`` as a UTF-8 JSON object whose field names
are fixed for compatibility with other clients of the same substrate. The id
itself is carried by the key, not the payload. The index lives under
``city_keys`` as a UTF-8 JSON array of id strings.

Decoding never raises: malformed input produces a :class:`DecodeError` value
so that one bad entry cannot abort a scan of the whole registry.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Union

from cityreg.registry.models import City

logger = logging.getLogger(__name__)

INDEX_KEY = "city_keys"
RECORD_KEY_PREFIX = "city_"


@dataclass(frozen=True)
class DecodeError:
    """Tagged result for stored bytes that could not be decoded."""

    key: str
    reason: str

    def __str__(self) -> str:
        return f"{self.key}: {self.reason}"


DecodeResult = Union[City, DecodeError]


class _FieldError(Exception):
    pass


def record_key(city_id: str) -> str:
    return f"{RECORD_KEY_PREFIX}{city_id}"


def encode(city: City) -> bytes:
    """Serialize a city to the bytes stored under its record key."""
    payload = {
        "name": city.name,
        "population": city.population,
        "satisfaction": city.satisfaction,
        "buildings": city.building_count,
        "timestamp": city.created_at,
        "owner": city.owner_address,
        "encryptedData": city.encrypted_payload,
    }
    return _dump(payload)


def decode(data: bytes, city_id: str) -> DecodeResult:
    """Deserialize the bytes stored for ``city_id``.

    Unknown fields are ignored; missing or mistyped required fields, and any
    bytes that are not a UTF-8 JSON object, yield a :class:`DecodeError`.
    """
    key = record_key(city_id)
    if not data:
        return DecodeError(key, "empty value")

    parsed = _load(data, key)
    if isinstance(parsed, DecodeError):
        return parsed
    if not isinstance(parsed, dict):
        return DecodeError(key, f"expected a JSON object, got {type(parsed).__name__}")

    try:
        satisfaction = _require_int(parsed, "satisfaction")
        if satisfaction > 100:
            raise _FieldError("satisfaction must be within [0, 100]")
        return City(
            id=city_id,
            name=_require_str(parsed, "name"),
            population=_require_int(parsed, "population"),
            satisfaction=satisfaction,
            building_count=_require_int(parsed, "buildings"),
            created_at=_require_int(parsed, "timestamp", allow_negative=True),
            owner_address=_require_str(parsed, "owner"),
            encrypted_payload=_require_str(parsed, "encryptedData"),
        )
    except _FieldError as e:
        return DecodeError(key, str(e))


def encode_index(ids: list[str]) -> bytes:
    return _dump(list(ids))


def decode_index(data: bytes) -> Union[list[str], DecodeError]:
    """Deserialize the index value.

    Absent (empty) bytes decode to an empty index. Entries that are not
    strings are dropped, and repeated ids keep only their first occurrence;
    a value that is not a JSON array is a :class:`DecodeError`.
    """
    if not data:
        return []

    parsed = _load(data, INDEX_KEY)
    if isinstance(parsed, DecodeError):
        return parsed
    if not isinstance(parsed, list):
        return DecodeError(INDEX_KEY, f"expected a JSON array, got {type(parsed).__name__}")

    ids = [item for item in parsed if isinstance(item, str)]
    if len(ids) != len(parsed):
        logger.warning("Dropping %d non-string entries from index", len(parsed) - len(ids))

    unique = list(dict.fromkeys(ids))
    if len(unique) != len(ids):
        logger.warning("Dropping %d duplicate entries from index", len(ids) - len(unique))
    return unique


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _dump(value: object) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _load(data: bytes, key: str) -> object:
    try:
        return json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        return DecodeError(key, f"invalid UTF-8: {e}")
    except json.JSONDecodeError as e:
        return DecodeError(key, f"invalid JSON: {e.msg}")


def _require_str(data: dict, field: str) -> str:
    if field not in data:
        raise _FieldError(f"missing field '{field}'")
    value = data[field]
    if not isinstance(value, str):
        raise _FieldError(f"'{field}' must be a string")
    return value


def _require_int(data: dict, field: str, allow_negative: bool = False) -> int:
    if field not in data:
        raise _FieldError(f"missing field '{field}'")
    value = data[field]
    # bool is a subclass of int
    if isinstance(value, bool):
        raise _FieldError(f"'{field}' must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise _FieldError(f"'{field}' must be an integer")
        value = int(value)
    if not isinstance(value, int):
        raise _FieldError(f"'{field}' must be an integer")
    if value < 0 and not allow_negative:
        raise _FieldError(f"'{field}' must not be negative")
    return value
