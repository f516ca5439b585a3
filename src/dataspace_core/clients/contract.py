"""Contract service client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from dataspace_core.clients.base import JSONServiceClient
from dataspace_core.exceptions import ContractUnavailable
from dataspace_core.settings import ContractServiceSettings

logger = logging.getLogger(__name__)


class ContractClient(JSONServiceClient):
    """Fetches raw contract documents from the contract service."""

    def __init__(
        self,
        settings: ContractServiceSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or ContractServiceSettings()
        super().__init__(self._settings.url, timeout=self._settings.timeout, client=client)

    async def get_contract(self, ref: str) -> dict[str, Any]:
        """Return the contract document behind ``ref``.

        Raises:
            ContractUnavailable: If the service fails or returns something other than an object
        """
        try:
            document = await self.get_json(ref)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Contract %s could not be fetched: %s", ref, e)
            raise ContractUnavailable(f"Contract {ref} unavailable: {e}") from e

        if not isinstance(document, dict):
            raise ContractUnavailable(f"Contract {ref} returned an unexpected document")
        return document
