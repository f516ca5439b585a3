"""Import orchestration: the provider delivers data for an exchange.

Pipeline: lookup → contract replay → policy gate → catalog → dispatch →
optional forward of the API response → terminal status.

The envelope returned to the provider is decoupled from the terminal status:
a resource without an endpoint is recorded as CONSUMER_IMPORT_ERROR while the
callback itself is still accepted. A delivery that was attempted but failed
still ends IMPORT_SUCCESS, with the transport error kept on the record.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dataspace_core.enums import DataExchangeStatus, ExchangeErrorCode
from dataspace_core.exceptions import ExchangeError, ExchangeNotFound, InvalidTransition, PolicyDenied
from dataspace_core.models import DataExchange, ExchangeEnvelope
from opentelemetry import trace

from exchange_engine.domain.contract_resolver import derive_offering_context

if TYPE_CHECKING:
    from dataspace_core.policy import PolicyGate

    from exchange_engine.domain.catalog_resolver import CatalogResolver
    from exchange_engine.domain.contract_resolver import ContractResolver
    from exchange_engine.domain.dispatcher import RepresentationDispatcher
    from exchange_engine.domain.exchange_store import ExchangeStore
    from exchange_engine.domain.peer_notifier import PeerNotifier

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ImportService:
    def __init__(
        self,
        store: ExchangeStore,
        contracts: ContractResolver,
        policy: PolicyGate,
        catalog: CatalogResolver,
        dispatcher: RepresentationDispatcher,
        notifier: PeerNotifier,
    ) -> None:
        self._store = store
        self._contracts = contracts
        self._policy = policy
        self._catalog = catalog
        self._dispatcher = dispatcher
        self._notifier = notifier

    async def receive_import(
        self,
        correlation_id: str,
        data: Any,
        api_response_representation: Any = None,
    ) -> ExchangeEnvelope:
        with tracer.start_as_current_span("exchange.receive_import") as span:
            span.set_attribute("exchange.correlation_id", correlation_id)
            try:
                exchange = await self._store.find_by_correlation_id(correlation_id)
            except ExchangeNotFound as e:
                logger.warning("Import callback for unknown exchange %s", correlation_id)
                return ExchangeEnvelope.failed(e.code, e.message)

            span.set_attribute("exchange.id", str(exchange.id))
            try:
                return await self._run(exchange, data, api_response_representation)
            except PolicyDenied as e:
                logger.warning("Import denied for exchange %s: %s", exchange.id, e.message)
                await self._settle(exchange, DataExchangeStatus.PEP_ERROR, e.message)
                return ExchangeEnvelope.failed(e.code, e.message, exchange.id)
            except Exception as e:
                logger.error("Import failed for exchange %s: %s", exchange.id, e, exc_info=True)
                await self._settle(exchange, DataExchangeStatus.CONSUMER_IMPORT_ERROR, str(e))
                code = e.code if isinstance(e, ExchangeError) else ExchangeErrorCode.INTERNAL_ERROR
                return ExchangeEnvelope.failed(code, str(e), exchange.id)

    async def _run(self, exchange: DataExchange, data: Any, api_response_representation: Any) -> ExchangeEnvelope:
        contract = await self._contracts.resolve(exchange.contract)
        context = derive_offering_context(exchange, contract)

        decision = await self._policy.evaluate(context.resource_id, context.purpose_id, exchange.contract)
        if not decision.allowed:
            raise PolicyDenied(decision.reason or "denied by policy")

        resolved = await self._catalog.resolve_software_resource(exchange.purpose_id)
        resource = resolved.software_resource

        if not resource.endpoint:
            message = f"Software resource {resource.id or exchange.purpose_id} has no representation endpoint"
            logger.warning("Exchange %s: %s", exchange.id, message)
            await self._settle(exchange, DataExchangeStatus.CONSUMER_IMPORT_ERROR, message)
            return ExchangeEnvelope.accepted(exchange.id)

        result = await self._dispatcher.dispatch(resource, data)
        if not result.ok:
            logger.warning("Exchange %s: delivery to %s failed: %s", exchange.id, resource.endpoint, result.error)

        content = None
        if resource.delivers_api:
            content = result.body
            if api_response_representation:
                forwarded = await self._notifier.forward_import_result(exchange, result.body)
                if not forwarded.ok:
                    logger.warning("Exchange %s: API response not forwarded: %s", exchange.id, forwarded.error)

        await self._settle(exchange, DataExchangeStatus.IMPORT_SUCCESS, result.error)
        return ExchangeEnvelope.accepted(exchange.id, content=content)

    async def _settle(self, exchange: DataExchange, status: DataExchangeStatus, error: str | None = None) -> None:
        """Record a terminal status; duplicate or out-of-order callbacks are only logged."""
        try:
            await self._store.transition(exchange, status, error)
        except InvalidTransition as e:
            logger.warning("Ignored status change for exchange %s: %s", exchange.id, e.message)
        except Exception:
            logger.error("Could not record %s for exchange %s", status, exchange.id, exc_info=True)
