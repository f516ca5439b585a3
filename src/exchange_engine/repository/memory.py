"""In-process exchange repository, used for local runs and tests."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from dataspace_core.enums import DataExchangeStatus
from dataspace_core.exceptions import DuplicateExchange, ExchangeNotFound

if TYPE_CHECKING:
    import uuid

    from dataspace_core.models import DataExchange, StatusEvent


def _binding(exchange: DataExchange) -> tuple[str, str, str, str]:
    return (exchange.contract, exchange.resource_id, exchange.purpose_id, exchange.provider_endpoint)


class InMemoryExchangeRepository:
    """Stores copies so callers never share mutable state with the store."""

    def __init__(self) -> None:
        self._store: dict[uuid.UUID, DataExchange] = {}
        self._lock = asyncio.Lock()

    async def create(self, exchange: DataExchange) -> DataExchange:
        async with self._lock:
            key = _binding(exchange)
            for existing in self._store.values():
                if existing.status == DataExchangeStatus.PENDING and _binding(existing) == key:
                    raise DuplicateExchange(
                        f"Exchange {existing.id} is already in flight for contract {exchange.contract}"
                    )
            self._store[exchange.id] = exchange.model_copy(deep=True)
            return exchange.model_copy(deep=True)

    async def get_by_id(self, exchange_id: uuid.UUID) -> DataExchange | None:
        await asyncio.sleep(0)
        found = self._store.get(exchange_id)
        return found.model_copy(deep=True) if found else None

    async def get_by_correlation_id(self, correlation_id: str) -> DataExchange | None:
        await asyncio.sleep(0)
        matches = [e for e in self._store.values() if e.correlation_id == correlation_id]
        if not matches:
            return None
        return max(matches, key=lambda e: e.created_at).model_copy(deep=True)

    async def set_correlation_id(self, exchange_id: uuid.UUID, correlation_id: str) -> DataExchange | None:
        async with self._lock:
            exchange = self._store.get(exchange_id)
            if exchange is None:
                raise ExchangeNotFound(f"Exchange {exchange_id} not found")
            if exchange.correlation_id is not None:
                return None
            for other in self._store.values():
                if other.correlation_id == correlation_id and other.provider_endpoint == exchange.provider_endpoint:
                    raise DuplicateExchange(f"Correlation id {correlation_id} is already bound")
            exchange.correlation_id = correlation_id
            return exchange.model_copy(deep=True)

    async def compare_and_set_status(
        self,
        exchange_id: uuid.UUID,
        expected: DataExchangeStatus,
        event: StatusEvent,
    ) -> DataExchange | None:
        async with self._lock:
            exchange = self._store.get(exchange_id)
            if exchange is None:
                raise ExchangeNotFound(f"Exchange {exchange_id} not found")
            if exchange.status != expected:
                return None
            exchange.status = event.status
            exchange.error = event.error
            exchange.updated_at = event.occurred_at
            exchange.status_history.append(event)
            return exchange.model_copy(deep=True)

    async def list_exchanges(
        self,
        *,
        status: DataExchangeStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DataExchange]:
        await asyncio.sleep(0)
        result = sorted(self._store.values(), key=lambda e: e.created_at, reverse=True)
        if status:
            result = [e for e in result if e.status == status]
        return [e.model_copy(deep=True) for e in result[offset : offset + limit]]
