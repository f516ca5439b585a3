"""Repository protocols for the exchange record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import uuid

    from dataspace_core.enums import DataExchangeStatus
    from dataspace_core.models import DataExchange, StatusEvent


class ExchangeRepository(Protocol):
    async def create(self, exchange: DataExchange) -> DataExchange:
        """Persist a new exchange.

        Raises ``DuplicateExchange`` atomically when a PENDING exchange with the
        same contract, resource, purpose and provider endpoint exists.
        """
        ...

    async def get_by_id(self, exchange_id: uuid.UUID) -> DataExchange | None: ...

    async def get_by_correlation_id(self, correlation_id: str) -> DataExchange | None: ...

    async def set_correlation_id(self, exchange_id: uuid.UUID, correlation_id: str) -> DataExchange | None:
        """Bind a correlation id if none is bound yet; None when one already is."""
        ...

    async def compare_and_set_status(
        self,
        exchange_id: uuid.UUID,
        expected: DataExchangeStatus,
        event: StatusEvent,
    ) -> DataExchange | None:
        """Apply ``event`` only if the stored status still equals ``expected``.

        Returns None when the stored status changed in the meantime.
        Raises ``ExchangeNotFound`` when the exchange does not exist.
        """
        ...

    async def list_exchanges(
        self,
        *,
        status: DataExchangeStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DataExchange]: ...
