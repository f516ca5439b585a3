"""Contract resolution and offering-context derivation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from dataspace_core.enums import ContractKind
from dataspace_core.exceptions import ContractUnavailable, InvalidResource, ProviderEndpointMissing
from dataspace_core.models import BilateralContract, Contract, EcosystemContract, ProviderSelfDescription
from dataspace_core.settings import ContractServiceSettings
from pydantic import ValidationError

if TYPE_CHECKING:
    from dataspace_core.clients import CatalogClient, ContractClient
    from dataspace_core.models import DataExchange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfferingContext:
    """What an exchange is allowed to access under its contract."""

    kind: ContractKind
    resource_id: str
    purpose_id: str
    participant: str | None = None


class ContractResolver:
    """Fetches contracts and tells bilateral from ecosystem contracts.

    The kind is read from the reference itself: ecosystem contracts live
    under a ``contracts`` collection, bilateral ones do not.
    """

    def __init__(
        self,
        contracts: ContractClient,
        catalog: CatalogClient,
        settings: ContractServiceSettings | None = None,
    ) -> None:
        self._contracts = contracts
        self._catalog = catalog
        self._marker = (settings or ContractServiceSettings()).ecosystem_marker

    def kind_of(self, contract_ref: str) -> ContractKind:
        segments = [s for s in urlparse(contract_ref).path.split("/") if s]
        if self._marker in segments:
            return ContractKind.ECOSYSTEM
        return ContractKind.BILATERAL

    async def resolve(self, contract_ref: str) -> Contract:
        """Fetch and parse a contract; raises ContractUnavailable."""
        document = await self._contracts.get_contract(contract_ref)
        model = EcosystemContract if self.kind_of(contract_ref) == ContractKind.ECOSYSTEM else BilateralContract
        try:
            return model.model_validate(document)
        except ValidationError as e:
            raise ContractUnavailable(f"Contract {contract_ref} is not a valid {model.__name__}") from e

    async def resolve_provider_endpoint(self, participant_ref: str | None) -> str:
        """Read a participant self-description and return its dataspace endpoint."""
        if not participant_ref:
            raise ProviderEndpointMissing("Contract names no provider participant")

        document = await self._catalog.get_self_description(participant_ref)
        description = ProviderSelfDescription.model_validate(document or {})
        if not description.dataspace_endpoint:
            logger.error("Provider %s is missing a PDC endpoint", participant_ref)
            raise ProviderEndpointMissing(f"Provider {participant_ref} is missing a PDC endpoint")
        return description.dataspace_endpoint


def derive_offering_context(exchange: DataExchange, contract: Contract) -> OfferingContext:
    """Recompute the governed offering of an exchange. Pure; safe to retry."""
    if isinstance(contract, EcosystemContract):
        offering = contract.offering(exchange.resource_id)
        if offering is None:
            raise InvalidResource(f"Resource {exchange.resource_id} is not an offering of {exchange.contract}")
        return OfferingContext(
            kind=ContractKind.ECOSYSTEM,
            resource_id=exchange.resource_id,
            purpose_id=exchange.purpose_id,
            participant=offering.participant,
        )

    if contract.primary_offering() != exchange.resource_id:
        raise InvalidResource(f"Resource {exchange.resource_id} is not governed by {exchange.contract}")
    return OfferingContext(
        kind=ContractKind.BILATERAL,
        resource_id=exchange.resource_id,
        purpose_id=exchange.purpose_id,
        participant=contract.provider().endpoint_ref,
    )
