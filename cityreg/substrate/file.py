"""File-based substrate.

Stores every key in a single JSON document on disk, mapping each key to its
base64-encoded value. Suitable for development and single-host use.
"""

from __future__ import annotations

import base64
import binascii
import json
import threading
from pathlib import Path

from cityreg.registry.errors import SubstrateUnavailable
from cityreg.substrate.base import Substrate


class FileSubstrate(Substrate):
    """JSON-file-backed substrate.

    Storage path defaults to ``~/.cityreg/substrate.json``. The file is
    created lazily on the first write.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path else Path.home() / ".cityreg" / "substrate.json"
        self._lock = threading.Lock()

    def is_available(self) -> bool:
        parent = self.path.parent
        return parent.is_dir() or not parent.exists()

    def get_data(self, key: str) -> bytes:
        with self._lock:
            encoded = self._read_all().get(key)
        if encoded is None:
            return b""
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError) as e:
            raise SubstrateUnavailable(f"Corrupt value for '{key}' in {self.path}: {e}") from e

    def set_data(self, key: str, value: bytes) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = base64.b64encode(value).decode("ascii")
            self._write_all(data)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise SubstrateUnavailable(f"Cannot read {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise SubstrateUnavailable(f"Corrupt substrate file {self.path}: {e.msg}") from e
        if not isinstance(data, dict):
            raise SubstrateUnavailable(f"Corrupt substrate file {self.path}: expected an object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise SubstrateUnavailable(f"Cannot write {self.path}: {e}") from e
