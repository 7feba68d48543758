"""Abstract substrate interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Substrate(ABC):
    """A key-value store offering only single-key reads and writes.

    Each call is atomic on its own; nothing spans more than one key.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Report whether the substrate can currently serve requests."""

    @abstractmethod
    def get_data(self, key: str) -> bytes:
        """Return the value stored at ``key``, or ``b""`` when absent."""

    @abstractmethod
    def set_data(self, key: str, value: bytes) -> None:
        """Replace the value stored at ``key``."""
