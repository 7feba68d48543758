"""Tests for cityreg data models."""

import dataclasses

import pytest

from cityreg.registry.models import City, CityDraft, CityPage, RegistryStats


def _city(**overrides) -> City:
    fields = dict(
        id="1-a",
        name="Alpha",
        population=1000,
        satisfaction=50,
        building_count=5,
        created_at=1700000000,
        owner_address="0x1234567890abcdef1234567890abcdef12345678",
        encrypted_payload="FHE-eyJuYW1lIjoiQWxwaGEiLCJwb3B1bGF0aW9uIjoxMDAwfQ==",
    )
    fields.update(overrides)
    return City(**fields)


def test_city_is_immutable():
    city = _city()
    with pytest.raises(dataclasses.FrozenInstanceError):
        city.name = "Renamed"


def test_short_owner():
    assert _city().short_owner == "0x1234...5678"


def test_payload_preview():
    city = _city()
    assert city.payload_preview == "FHE-eyJuYW1lIjoiQWxw..."
    assert _city(encrypted_payload="short").payload_preview == "short..."


def test_is_owned_by():
    city = _city()
    assert city.is_owned_by("0x1234567890ABCDEF1234567890ABCDEF12345678")
    assert not city.is_owned_by("0x" + "0" * 40)
    assert not city.is_owned_by("")


def test_draft_defaults():
    draft = CityDraft()
    assert draft.name == ""
    assert draft.population == 1000
    assert draft.building_count == 5


def test_stats_defaults():
    stats = RegistryStats()
    assert stats.count == 0
    assert stats.average_satisfaction == 0.0


def test_empty_page():
    result = CityPage()
    assert result.items == []
    assert not result.has_next
    assert not result.has_previous
