"""Build a substrate client from configuration."""

from __future__ import annotations

from cityreg.config import RegistryConfig
from cityreg.substrate.base import Substrate
from cityreg.substrate.file import FileSubstrate
from cityreg.substrate.http import HttpSubstrate
from cityreg.substrate.memory import MemorySubstrate


def build_substrate(config: RegistryConfig) -> Substrate:
    if config.substrate == "file":
        return FileSubstrate(config.data_path)
    if config.substrate == "http":
        return HttpSubstrate(config.base_url, timeout=config.timeout)
    return MemorySubstrate()
