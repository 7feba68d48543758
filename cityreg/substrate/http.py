"""HTTP substrate -- a remote key-value gateway reached over httpx.

Gateway contract:

- ``GET  {base_url}/available`` -> JSON ``{"available": bool}``
- ``GET  {base_url}/data/{key}`` -> raw bytes (404 or empty body = absent)
- ``PUT  {base_url}/data/{key}`` with the raw value as the request body
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from cityreg.registry.errors import SubstrateUnavailable
from cityreg.substrate.base import Substrate

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpSubstrate(Substrate):
    """Synchronous client for a key-value gateway.

    Parameters
    ----------
    base_url : str
        Root URL of the gateway.
    timeout : float
        Per-request timeout in seconds. The registry itself imposes none.
    client : httpx.Client | None
        Pre-built client, e.g. one with a mock transport in tests.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpSubstrate":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- Substrate -----------------------------------------------------------

    def is_available(self) -> bool:
        try:
            resp = self._client.get(self._url("/available"))
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Availability check against %s failed: %s", self.base_url, exc)
            return False

        if isinstance(data, dict):
            return bool(data.get("available", False))
        return bool(data)

    def get_data(self, key: str) -> bytes:
        try:
            resp = self._client.get(self._data_url(key))
        except httpx.RequestError as exc:
            raise SubstrateUnavailable(f"Failed to reach substrate for '{key}': {exc}") from exc

        if resp.status_code == 404:
            return b""
        if resp.is_error:
            raise SubstrateUnavailable(
                f"Substrate read of '{key}' failed: HTTP {resp.status_code}"
            )
        return resp.content

    def set_data(self, key: str, value: bytes) -> None:
        try:
            resp = self._client.put(
                self._data_url(key),
                content=value,
                headers={"Content-Type": "application/octet-stream"},
            )
        except httpx.RequestError as exc:
            raise SubstrateUnavailable(f"Failed to reach substrate for '{key}': {exc}") from exc

        if resp.is_error:
            raise SubstrateUnavailable(
                f"Substrate write of '{key}' failed: HTTP {resp.status_code}"
            )

    # -- helpers -------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _data_url(self, key: str) -> str:
        return self._url(f"/data/{quote(key, safe='')}")
