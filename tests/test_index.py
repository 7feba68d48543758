"""Tests for the id index manager."""

import logging

import pytest

from cityreg.registry.codec import INDEX_KEY
from cityreg.registry.errors import SubstrateUnavailable
from cityreg.registry.index import IndexManager
from cityreg.substrate.memory import MemorySubstrate


def test_load_absent_index():
    index = IndexManager(MemorySubstrate())
    assert index.load() == []


def test_load_existing_index():
    index = IndexManager(MemorySubstrate({INDEX_KEY: b'["a","b","c"]'}))
    assert index.load() == ["a", "b", "c"]


def test_load_malformed_index_is_empty(caplog):
    index = IndexManager(MemorySubstrate({INDEX_KEY: b"definitely not json"}))
    with caplog.at_level(logging.WARNING, logger="cityreg.registry.index"):
        assert index.load() == []
    assert "malformed index" in caplog.text


def test_load_propagates_read_failure():
    substrate = MemorySubstrate()
    substrate.available = False
    with pytest.raises(SubstrateUnavailable):
        IndexManager(substrate).load()


def test_append_returns_new_list():
    ids = ["a", "b"]
    updated = IndexManager.append(ids, "c")
    assert updated == ["a", "b", "c"]
    assert ids == ["a", "b"]
    assert updated is not ids


def test_append_does_not_duplicate():
    ids = ["a", "b"]
    updated = IndexManager.append(ids, "a")
    assert updated == ["a", "b"]
    assert updated is not ids


def test_append_is_retry_safe():
    ids = ["a"]
    first = IndexManager.append(ids, "b")
    second = IndexManager.append(ids, "b")
    assert first == second == ["a", "b"]


def test_save_replaces_whole_value():
    substrate = MemorySubstrate({INDEX_KEY: b'["old"]'})
    index = IndexManager(substrate)
    index.save(["x", "y"])
    assert substrate.get_data(INDEX_KEY) == b'["x","y"]'
    assert index.load() == ["x", "y"]
