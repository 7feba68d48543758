"""Tests for the city record codec."""

import json

from cityreg.registry.codec import (
    INDEX_KEY,
    DecodeError,
    decode,
    decode_index,
    encode,
    encode_index,
    record_key,
)
from cityreg.registry.models import City

OWNER = "0x" + "ab" * 20


def _city(**overrides) -> City:
    fields = dict(
        id="1700000000000-abc1234",
        name="Alpha",
        population=10000,
        satisfaction=10,
        building_count=10,
        created_at=1700000000,
        owner_address=OWNER,
        encrypted_payload="FHE-eyJuYW1lIjoiQWxwaGEifQ==",
    )
    fields.update(overrides)
    return City(**fields)


def _payload(**overrides) -> bytes:
    data = {
        "name": "Alpha",
        "population": 10000,
        "satisfaction": 10,
        "buildings": 10,
        "timestamp": 1700000000,
        "owner": OWNER,
        "encryptedData": "FHE-xyz",
    }
    data.update(overrides)
    return json.dumps(data).encode("utf-8")


def test_keys():
    assert INDEX_KEY == "city_keys"
    assert record_key("42-abc") == "city_42-abc"


def test_encode_uses_wire_field_names():
    data = json.loads(encode(_city()).decode("utf-8"))
    assert list(data) == [
        "name",
        "population",
        "satisfaction",
        "buildings",
        "timestamp",
        "owner",
        "encryptedData",
    ]
    assert data["buildings"] == 10
    assert data["timestamp"] == 1700000000
    assert "id" not in data


def test_encode_is_deterministic():
    assert encode(_city()) == encode(_city())


def test_round_trip():
    city = _city(name="Zürich", satisfaction=100)
    assert decode(encode(city), city.id) == city


def test_decode_ignores_unknown_fields():
    result = decode(_payload(mayor="Ada", districts=[1, 2]), "c1")
    assert isinstance(result, City)
    assert result.id == "c1"
    assert result.name == "Alpha"


def test_decode_accepts_integral_floats():
    result = decode(_payload(population=5000.0), "c1")
    assert isinstance(result, City)
    assert result.population == 5000


def test_decode_missing_field():
    data = json.loads(_payload())
    del data["owner"]
    result = decode(json.dumps(data).encode(), "c1")
    assert isinstance(result, DecodeError)
    assert result.key == "city_c1"
    assert "owner" in result.reason


def test_decode_wrong_types():
    for bad in (
        _payload(population="many"),
        _payload(population=True),
        _payload(buildings=2.5),
        _payload(name=7),
        _payload(encryptedData=None),
    ):
        assert isinstance(decode(bad, "c1"), DecodeError)


def test_decode_out_of_range_values():
    assert isinstance(decode(_payload(satisfaction=101), "c1"), DecodeError)
    assert isinstance(decode(_payload(satisfaction=-1), "c1"), DecodeError)
    assert isinstance(decode(_payload(population=-5), "c1"), DecodeError)


def test_decode_garbage_never_raises():
    for raw in (
        b"",
        b"not json",
        b"{\"name\": \"Trunc",
        b"\xff\xfe\x00",
        b"[1, 2, 3]",
        b"null",
        b"42",
    ):
        assert isinstance(decode(raw, "c1"), DecodeError)


def test_truncated_encoding_is_rejected():
    raw = encode(_city())
    assert isinstance(decode(raw[: len(raw) // 2], "c1"), DecodeError)


def test_index_encoding():
    assert encode_index(["a", "b"]) == b'["a","b"]'
    assert decode_index(b'["a","b"]') == ["a", "b"]


def test_decode_index_empty_is_empty_list():
    assert decode_index(b"") == []
    assert decode_index(b"[]") == []


def test_decode_index_malformed():
    assert isinstance(decode_index(b"{oops"), DecodeError)
    assert isinstance(decode_index(b'{"ids": ["a"]}'), DecodeError)


def test_decode_index_drops_non_strings():
    assert decode_index(b'["a", 1, null, "b"]') == ["a", "b"]


def test_decode_index_keeps_first_of_repeated_ids(caplog):
    with caplog.at_level("WARNING", logger="cityreg.registry.codec"):
        assert decode_index(b'["a","b","a","c","b"]') == ["a", "b", "c"]
    assert "2 duplicate" in caplog.text
