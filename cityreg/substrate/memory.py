"""In-process substrate backed by a dict."""

from __future__ import annotations

import threading

from cityreg.registry.errors import SubstrateUnavailable
from cityreg.substrate.base import Substrate


class MemorySubstrate(Substrate):
    """Dict-backed substrate for tests, demos, and single-process use.

    Setting ``available`` to False makes the availability check fail and
    every read or write raise :class:`SubstrateUnavailable`.
    """

    def __init__(self, data: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(data or {})
        self._lock = threading.Lock()
        self.available = True

    def is_available(self) -> bool:
        return self.available

    def get_data(self, key: str) -> bytes:
        self._check()
        with self._lock:
            return self._data.get(key, b"")

    def set_data(self, key: str, value: bytes) -> None:
        self._check()
        with self._lock:
            self._data[key] = bytes(value)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def _check(self) -> None:
        if not self.available:
            raise SubstrateUnavailable("in-memory substrate is marked unavailable")
