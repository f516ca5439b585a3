"""REST representation transport.

The representation ``method`` names how the endpoint authenticates
(``none``, ``apiKey``, ``basic``, ``bearer``); the payload is always POSTed
as JSON.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from dataspace_core.enums import RepresentationAuthMethod
from dataspace_core.exceptions import DispatchFailed
from dataspace_core.representation.base import DispatchResult
from dataspace_core.settings import DispatchSettings

if TYPE_CHECKING:
    from dataspace_core.models import Credential

logger = logging.getLogger(__name__)


def _auth_method(method: str | None) -> RepresentationAuthMethod:
    if not method:
        return RepresentationAuthMethod.NONE
    try:
        return RepresentationAuthMethod(method)
    except ValueError:
        raise DispatchFailed(f"Unsupported representation method: {method}") from None


def _require(credential: Credential | None, method: RepresentationAuthMethod) -> Credential:
    if credential is None:
        raise DispatchFailed(f"Representation method {method} requires a credential")
    return credential


class RestTransport:
    """POSTs payloads to REST endpoints with the declared authentication."""

    def __init__(
        self,
        settings: DispatchSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or DispatchSettings()
        self._client = client

    def _request_options(
        self, method: RepresentationAuthMethod, credential: Credential | None
    ) -> dict[str, Any]:
        if method == RepresentationAuthMethod.NONE:
            return {}

        cred = _require(credential, method)
        if method == RepresentationAuthMethod.API_KEY:
            header = cred.key or self._settings.api_key_header
            return {"headers": {header: cred.value or ""}}
        if method == RepresentationAuthMethod.BASIC:
            username = cred.username or cred.key or ""
            password = cred.password or cred.value or ""
            return {"auth": (username, password)}
        return {"headers": {"Authorization": f"Bearer {cred.value or ''}"}}

    async def dispatch(
        self,
        method: str | None,
        url: str,
        payload: Any,
        credential: Credential | None,
    ) -> DispatchResult:
        options = self._request_options(_auth_method(method), credential)

        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, timeout=self._settings.timeout, **options)
            else:
                async with httpx.AsyncClient(timeout=self._settings.timeout) as client:
                    response = await client.post(url, json=payload, **options)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DispatchFailed(f"REST dispatch to {url} failed: {e}") from e

        try:
            body: Any = response.json() if response.content else None
        except ValueError:
            body = response.text

        logger.debug("Dispatched payload to %s (%d)", url, response.status_code)
        return DispatchResult(ok=True, status_code=response.status_code, body=body)
