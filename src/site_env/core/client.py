"""Variable service client - the remote API holding account and site variables."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, Self
from urllib.parse import quote

import httpx
from pydantic import BaseModel, SecretStr

from site_env.errors import EnvelopeAPIError

if TYPE_CHECKING:
    from types import TracebackType

    from site_env.config.schema import ProviderConfig

logger = logging.getLogger(__name__)


class VariableServiceClient(Protocol):
    """What the resolver needs from a variable service.

    Both calls return raw JSON-shaped records; validation happens in the
    fetcher. Any failure must surface as an exception.
    """

    async def get_env_var(
        self, *, account_id: str, key: str, site_id: str | None = None
    ) -> dict[str, Any]: ...

    async def get_env_vars(
        self, *, account_id: str, site_id: str | None = None
    ) -> list[dict[str, Any]]: ...


class ApiTokenAuth(BaseModel):
    """Bearer token authentication for the variable service."""

    token: SecretStr


class EnvelopeClient:
    """Minimal REST client for account/site environment variables.

    Examples:
        async with EnvelopeClient.from_config(config.provider) as client:
            records = await client.get_env_vars(account_id="acme", site_id="123")

        # Testing with a mocked transport
        http = httpx.AsyncClient(base_url="https://api", transport=httpx.MockTransport(h))
        client = EnvelopeClient(http)
    """

    def __init__(self, http: httpx.AsyncClient, auth: ApiTokenAuth | None = None) -> None:
        self.http = http
        self.auth = auth

    @classmethod
    def from_config(cls, provider: ProviderConfig) -> Self:
        """Build a client with a preconfigured ``httpx.AsyncClient``."""
        limits = httpx.Limits(max_connections=10, max_keepalive_connections=5)
        http = httpx.AsyncClient(
            base_url=provider.api_url,
            timeout=provider.timeout,
            limits=limits,
            follow_redirects=True,
        )
        auth = ApiTokenAuth(token=SecretStr(provider.token)) if provider.token else None
        return cls(http, auth=auth)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    # ---------- low-level ----------
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.auth is not None:
            headers["Authorization"] = f"Bearer {self.auth.token.get_secret_value()}"
        return headers

    @staticmethod
    def _raise_for_status(r: httpx.Response) -> None:
        if r.status_code >= 400:
            try:
                detail = r.json()
            except ValueError:
                detail = r.text
            raise EnvelopeAPIError(r.status_code, detail)

    async def _get(self, url: str, params: dict[str, str]) -> Any:
        logger.debug("HTTP GET %s %s", url, params)
        r = await self.http.get(url, params=params, headers=self._headers())
        if r.status_code >= 400:
            logger.warning("HTTP GET %s -> %s", url, r.status_code)
        self._raise_for_status(r)
        return r.json()

    @staticmethod
    def _params(site_id: str | None) -> dict[str, str]:
        return {"site_id": site_id} if site_id else {}

    # ---------- variables ----------
    async def get_env_var(
        self, *, account_id: str, key: str, site_id: str | None = None
    ) -> dict[str, Any]:
        url = f"/accounts/{quote(account_id, safe='')}/env/{quote(key, safe='')}"
        return await self._get(url, self._params(site_id))

    async def get_env_vars(
        self, *, account_id: str, site_id: str | None = None
    ) -> list[dict[str, Any]]:
        url = f"/accounts/{quote(account_id, safe='')}/env"
        data = await self._get(url, self._params(site_id))
        if not isinstance(data, list):
            raise EnvelopeAPIError(502, f"Unexpected response structure from {url}")
        return data
