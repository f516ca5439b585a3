"""Exchange record store: creation, lookup and the status state machine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dataspace_core.enums import DataExchangeStatus
from dataspace_core.exceptions import ExchangeNotFound, InvalidTransition
from dataspace_core.models import DataExchange, StatusEvent

if TYPE_CHECKING:
    import uuid

    from exchange_engine.repository.protocols import ExchangeRepository

logger = logging.getLogger(__name__)

# A lost compare-and-set is re-evaluated against the fresh record this many times.
_MAX_ATTEMPTS = 3


class ExchangeStore:
    """Owns the DataExchange lifecycle.

    States: PENDING → IMPORT_SUCCESS | CONSUMER_IMPORT_ERROR | PEP_ERROR

    Re-applying the current status with the same error is a no-op. Any other
    change away from a terminal status raises InvalidTransition.
    """

    def __init__(self, repo: ExchangeRepository) -> None:
        self._repo = repo

    async def create(
        self,
        *,
        provider_endpoint: str,
        resource_id: str,
        purpose_id: str,
        contract: str,
        correlation_id: str | None = None,
    ) -> DataExchange:
        """Create a PENDING exchange; raises DuplicateExchange if one is in flight."""
        exchange = DataExchange(
            provider_endpoint=provider_endpoint,
            resource_id=resource_id,
            purpose_id=purpose_id,
            contract=contract,
            correlation_id=correlation_id,
        )
        saved = await self._repo.create(exchange)
        logger.info("Exchange %s created for contract %s", saved.id, contract)
        return saved

    async def get(self, exchange_id: uuid.UUID) -> DataExchange:
        exchange = await self._repo.get_by_id(exchange_id)
        if exchange is None:
            raise ExchangeNotFound(f"Exchange {exchange_id} not found")
        return exchange

    async def find_by_correlation_id(self, correlation_id: str) -> DataExchange:
        exchange = await self._repo.get_by_correlation_id(correlation_id)
        if exchange is None:
            raise ExchangeNotFound(f"No exchange matches provider exchange {correlation_id}")
        return exchange

    async def attach_correlation_id(self, exchange: DataExchange, correlation_id: str) -> DataExchange:
        """Bind the provider-side id once. Re-binding the same id is a no-op."""
        if exchange.correlation_id == correlation_id:
            return exchange
        updated = await self._repo.set_correlation_id(exchange.id, correlation_id)
        if updated is not None:
            return updated

        current = await self.get(exchange.id)
        if current.correlation_id != correlation_id:
            raise InvalidTransition(
                f"Exchange {exchange.id} is already bound to provider exchange {current.correlation_id}"
            )
        return current

    async def transition(
        self,
        exchange: DataExchange,
        status: DataExchangeStatus,
        error: str | None = None,
    ) -> DataExchange:
        """Move an exchange to ``status``, recording ``error`` alongside it."""
        current = exchange
        for _ in range(_MAX_ATTEMPTS):
            if current.status == status and current.error == error:
                return current
            if current.is_terminal:
                raise InvalidTransition(
                    f"Exchange {current.id} is {current.status}; cannot move to {status}"
                )
            if status == DataExchangeStatus.PENDING:
                raise InvalidTransition(f"Exchange {current.id} can only enter PENDING at creation")

            event = StatusEvent(status=status, error=error)
            updated = await self._repo.compare_and_set_status(current.id, current.status, event)
            if updated is not None:
                logger.info("Exchange %s → %s", updated.id, status)
                return updated

            current = await self.get(exchange.id)

        raise InvalidTransition(f"Exchange {exchange.id} kept changing while moving to {status}")

    async def list_exchanges(
        self,
        *,
        status: DataExchangeStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DataExchange]:
        return await self._repo.list_exchanges(status=status, limit=limit, offset=offset)
