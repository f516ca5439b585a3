"""Export orchestration: a requester asks this consumer to pull data from a provider."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dataspace_core.exceptions import (
    ExchangeError,
    InvalidPurpose,
    InvalidResource,
    MissingParameters,
)
from dataspace_core.models import BilateralContract, DataExchange, EcosystemContract, ExchangeEnvelope
from opentelemetry import trace

if TYPE_CHECKING:
    from exchange_engine.domain.contract_resolver import ContractResolver
    from exchange_engine.domain.exchange_store import ExchangeStore
    from exchange_engine.domain.peer_notifier import PeerNotifier

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ExportService:
    """Creates the exchange record and starts the provider-side export.

    Validation failures return a failed envelope and create nothing. Once the
    exchange exists, peer failures are only logged: the exchange stays PENDING
    for external reconciliation.
    """

    def __init__(self, store: ExchangeStore, contracts: ContractResolver, notifier: PeerNotifier) -> None:
        self._store = store
        self._contracts = contracts
        self._notifier = notifier

    async def begin_export(
        self,
        contract_ref: str,
        resource_id: str | None = None,
        purpose_id: str | None = None,
        provider_endpoint: str | None = None,
    ) -> ExchangeEnvelope:
        with tracer.start_as_current_span("exchange.begin_export") as span:
            span.set_attribute("exchange.contract", contract_ref)
            try:
                exchange = await self._create(contract_ref, resource_id, purpose_id, provider_endpoint)
            except ExchangeError as e:
                logger.warning("Export request for %s rejected: %s", contract_ref, e.message)
                return ExchangeEnvelope.failed(e.code, e.message)

            span.set_attribute("exchange.id", str(exchange.id))
            registered = await self._register(exchange)
            if registered is not None:
                self._notifier.trigger_export(registered)
            return ExchangeEnvelope.accepted(exchange.id)

    async def _create(
        self,
        contract_ref: str,
        resource_id: str | None,
        purpose_id: str | None,
        provider_endpoint: str | None,
    ) -> DataExchange:
        contract = await self._contracts.resolve(contract_ref)

        if isinstance(contract, EcosystemContract):
            if not resource_id and not purpose_id:
                raise MissingParameters("Ecosystem exchanges require resourceId and purposeId")
            offering = contract.offering(resource_id)
            if offering is None:
                raise InvalidResource(f"Wrong resource given: {resource_id}")
            if not contract.contains_offering(purpose_id):
                raise InvalidPurpose(f"Wrong purpose given: {purpose_id}")
            endpoint = provider_endpoint or await self._contracts.resolve_provider_endpoint(offering.participant)
            return await self._store.create(
                provider_endpoint=endpoint,
                resource_id=offering.service_offering,
                purpose_id=purpose_id,
                contract=contract_ref,
            )

        return await self._create_bilateral(contract_ref, contract)

    async def _create_bilateral(self, contract_ref: str, contract: BilateralContract) -> DataExchange:
        endpoint = await self._contracts.resolve_provider_endpoint(contract.provider().endpoint_ref)
        purposes = contract.purposes()
        if not purposes:
            raise InvalidPurpose(f"Contract {contract_ref} declares no purpose")
        if len(purposes) > 1:
            logger.info("Contract %s declares %d purposes; using the first", contract_ref, len(purposes))

        return await self._store.create(
            provider_endpoint=endpoint,
            resource_id=contract.primary_offering(),
            purpose_id=purposes[0],
            contract=contract_ref,
        )

    async def _register(self, exchange: DataExchange) -> DataExchange | None:
        try:
            correlation_id = await self._notifier.register_export(exchange)
            return await self._store.attach_correlation_id(exchange, correlation_id)
        except ExchangeError as e:
            logger.warning(
                "Provider registration for exchange %s failed, exchange stays PENDING: %s",
                exchange.id,
                e.message,
            )
            return None
