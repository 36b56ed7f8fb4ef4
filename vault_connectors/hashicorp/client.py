"""
Vault HTTP transport.

Thin aiohttp wrapper issuing JSON requests against the Vault REST API.
Non-2xx responses and connection failures raise FetchError; the HTTP
status is kept so callers can tell a 404 from anything else. No
retries are made here.
"""
import asyncio
import logging
from typing import Any, Optional

import aiohttp
import orjson

from ..exceptions import FetchError
from .config import HashicorpVaultConfig

logger = logging.getLogger("vault.connectors.hashicorp")


class VaultHttpClient:
    """JSON-over-HTTP client bound to one Vault endpoint.

    The aiohttp session is created lazily and owned by the client unless
    one is injected.
    """

    CLASS_NAME = "VaultHttpClient"

    def __init__(
        self,
        config: HashicorpVaultConfig,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self._config = config
        self._session = session
        self._owns_session = session is None
        self._headers = {
            "X-Vault-Token": config.token,
            "Content-Type": "application/json",
        }
        if config.namespace:
            self._headers["X-Vault-Namespace"] = config.namespace

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            kwargs: dict[str, Any] = {}
            if self._config.timeout:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self._config.timeout)
            self._session = aiohttp.ClientSession(**kwargs)
            self._owns_session = True
        return self._session

    async def fetch(
        self,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
    ) -> Optional[dict[str, Any]]:
        """Issue a request and decode the JSON response.

        Args:
            method: HTTP method.
            path: Path below ``{endpoint}/{api_version}``.
            body: JSON body, if any.

        Returns:
            Decoded JSON, or None for an empty body (e.g. 204).

        Raises:
            FetchError: On non-2xx status, connection failure or timeout.
        """
        url = self.url(path)
        data = orjson.dumps(body) if body is not None else None
        session = self._get_session()
        try:
            async with session.request(
                method, url, data=data, headers=self._headers
            ) as response:
                raw = await response.read()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            logger.warning("Vault request failed: %s %s: %s", method, path, err)
            raise FetchError(
                self.CLASS_NAME, "fetchFailed", url, detail=str(err) or type(err).__name__
            ) from err

        if not 200 <= status < 300:
            raise FetchError(
                self.CLASS_NAME, "fetchFailed", url,
                http_status=status, detail=_error_detail(raw),
            )
        if not raw:
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as err:
            raise FetchError(
                self.CLASS_NAME, "invalidJsonResponse", url, http_status=status
            ) from err

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "VaultHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def _error_detail(raw: bytes) -> str:
    """Extract Vault's ``errors`` list from an error body."""
    if not raw:
        return ""
    try:
        parsed = orjson.loads(raw)
    except orjson.JSONDecodeError:
        return ""
    if isinstance(parsed, dict) and isinstance(parsed.get("errors"), list):
        return "; ".join(str(e) for e in parsed["errors"])
    return ""
