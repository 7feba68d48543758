"""Substrate clients -- the get/set key-value stores the registry sits on.

Every client exposes the same three operations: an availability check,
``get_data`` (empty bytes mean "absent"), and ``set_data``. Failures surface
as :class:`~cityreg.registry.errors.SubstrateUnavailable`; no client retries.
"""

from cityreg.substrate.base import Substrate
from cityreg.substrate.factory import build_substrate
from cityreg.substrate.file import FileSubstrate
from cityreg.substrate.http import HttpSubstrate
from cityreg.substrate.memory import MemorySubstrate

__all__ = [
    "Substrate",
    "MemorySubstrate",
    "FileSubstrate",
    "HttpSubstrate",
    "build_substrate",
]
