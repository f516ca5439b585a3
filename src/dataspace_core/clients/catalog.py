"""Catalog service client: service offerings, software resources, participants."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from dataspace_core.clients.base import JSONServiceClient
from dataspace_core.exceptions import CatalogUnavailable
from dataspace_core.settings import CatalogSettings

logger = logging.getLogger(__name__)


class CatalogClient(JSONServiceClient):
    """Reads catalog entries by id or URL. Nothing is cached."""

    def __init__(
        self,
        settings: CatalogSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or CatalogSettings()
        super().__init__(self._settings.url, timeout=self._settings.timeout, client=client)

    async def get_catalog_data(self, ref: str | None) -> dict[str, Any]:
        """Return the catalog entry behind ``ref``.

        Raises:
            CatalogUnavailable: If ``ref`` is empty, the lookup fails, or the entry is not an object
        """
        if not ref:
            raise CatalogUnavailable("Catalog reference is missing")
        try:
            entry = await self.get_json(ref)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Catalog entry %s could not be fetched: %s", ref, e)
            raise CatalogUnavailable(f"Catalog entry {ref} unavailable: {e}") from e

        if not isinstance(entry, dict):
            raise CatalogUnavailable(f"Catalog entry {ref} returned an unexpected document")
        return entry

    async def get_self_description(self, participant_ref: str) -> dict[str, Any] | None:
        """Return a participant self-description, or None when it cannot be read."""
        try:
            document = await self.get_json(participant_ref)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Self-description %s could not be fetched: %s", participant_ref, e)
            return None
        return document if isinstance(document, dict) else None
