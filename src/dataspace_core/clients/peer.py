"""HTTP surface of the counterpart (provider) connector."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from dataspace_core.clients.base import JSONServiceClient, join_url
from dataspace_core.exceptions import PeerUnavailable
from dataspace_core.settings import PeerSettings

logger = logging.getLogger(__name__)


class PeerClient(JSONServiceClient):
    """Calls made by this consumer connector to a provider connector.

    Provider endpoints differ per exchange, so every call takes the provider's
    base address explicitly.
    """

    def __init__(
        self,
        settings: PeerSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or PeerSettings()
        super().__init__("", timeout=self._settings.timeout, client=client)

    async def _post(self, provider_endpoint: str, path: str, payload: dict[str, Any]) -> Any:
        url = join_url(provider_endpoint, path)
        try:
            return await self.post_json(url, payload)
        except (httpx.HTTPError, ValueError) as e:
            raise PeerUnavailable(f"Provider call {url} failed: {e}") from e

    async def register_export(self, provider_endpoint: str, exchange: dict[str, Any]) -> str:
        """Create the mirror exchange at the provider and return the provider-side id.

        Raises:
            PeerUnavailable: If the provider rejects the call or answers without an id
        """
        body = await self._post(provider_endpoint, self._settings.registration_path, exchange)
        provider_id = None
        if isinstance(body, dict):
            provider_id = body.get("_id") or body.get("id")
        if not provider_id:
            raise PeerUnavailable(f"Provider {provider_endpoint} returned no exchange id")
        return str(provider_id)

    async def trigger_export(self, provider_endpoint: str, consumer_exchange_id: str) -> Any:
        """Ask the provider to start producing data for the exchange."""
        return await self._post(
            provider_endpoint,
            self._settings.export_path,
            {"consumerDataExchange": consumer_exchange_id},
        )

    async def forward_import_result(
        self,
        provider_endpoint: str,
        data: Any,
        consumer_exchange_id: str,
        correlation_id: str | None = None,
    ) -> Any:
        """Send the consumer API response back to the provider."""
        payload: dict[str, Any] = {"data": data, "consumerDataExchange": consumer_exchange_id}
        if correlation_id:
            payload["providerDataExchange"] = correlation_id
        return await self._post(provider_endpoint, self._settings.import_path, payload)
