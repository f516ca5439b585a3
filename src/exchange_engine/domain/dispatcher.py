"""Representation dispatcher: delivers imported data to the consumer resource."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dataspace_core.exceptions import DispatchFailed
from dataspace_core.representation.base import DispatchResult

if TYPE_CHECKING:
    from dataspace_core.models import Credential, SoftwareResource
    from dataspace_core.representation import CredentialStore, TransportRegistry

logger = logging.getLogger(__name__)


class RepresentationDispatcher:
    """Picks the transport for a resource's representation type and sends the payload.

    DispatchFailed from the registry or the transport is captured in the returned
    DispatchResult. Errors from the credential store propagate to the caller.
    """

    def __init__(self, registry: TransportRegistry, credentials: CredentialStore) -> None:
        self._registry = registry
        self._credentials = credentials

    async def _credential(self, credential_ref: str | None) -> Credential | None:
        if not credential_ref:
            return None
        credential = await self._credentials.get(credential_ref)
        if credential is None:
            logger.warning("Credential %s not found", credential_ref)
        return credential

    async def dispatch(self, resource: SoftwareResource, payload: Any) -> DispatchResult:
        representation = resource.representation
        if representation is None or not representation.url:
            return DispatchResult(ok=False, error=f"Software resource {resource.id} has no representation endpoint")

        try:
            transport = self._registry.get(representation.type)
            credential = await self._credential(representation.credential)
            return await transport.dispatch(representation.method, representation.url, payload, credential)
        except DispatchFailed as e:
            logger.warning("Dispatch to %s failed: %s", representation.url, e.message)
            return DispatchResult(ok=False, error=e.message)
