"""Encryptor interface and the simulated FHE implementation."""

from __future__ import annotations

import base64
import json
from abc import ABC, abstractmethod

from cityreg.registry.models import CityDraft

FHE_PREFIX = "FHE-"


class Encryptor(ABC):
    """Turns a draft into an opaque payload string."""

    @abstractmethod
    def encrypt(self, draft: CityDraft) -> str:
        """Return the opaque payload for ``draft``."""


class SimulatedFHEEncryptor(Encryptor):
    """Stand-in for homomorphic encryption.

    Produces ``FHE-`` followed by the base64 of the draft's JSON. This is an
    encoding, not encryption; it keeps payloads readable by clients that
    share the same stand-in.
    """

    def encrypt(self, draft: CityDraft) -> str:
        body = json.dumps(
            {
                "name": draft.name,
                "population": draft.population,
                "buildings": draft.building_count,
            },
            separators=(",", ":"),
        )
        return FHE_PREFIX + base64.b64encode(body.encode("utf-8")).decode("ascii")
