"""PostgreSQL repository implementation using SQLAlchemy 2.0 async.

Every operation runs in its own transaction so that creation and status
changes are committed before the orchestration step that follows them
(peer notifications run detached from the inbound request).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dataspace_core.db.tables import DataExchangeRow
from dataspace_core.exceptions import DuplicateExchange, ExchangeNotFound
from dataspace_core.models import DataExchange
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

if TYPE_CHECKING:
    import uuid

    from dataspace_core.enums import DataExchangeStatus
    from dataspace_core.models import StatusEvent
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class PgExchangeRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, exchange: DataExchange) -> DataExchange:
        row = DataExchangeRow(
            id=exchange.id,
            correlation_id=exchange.correlation_id,
            provider_endpoint=exchange.provider_endpoint,
            resource_id=exchange.resource_id,
            purpose_id=exchange.purpose_id,
            contract=exchange.contract,
            status=exchange.status,
            error=exchange.error,
            status_history=[e.model_dump(mode="json") for e in exchange.status_history],
            created_at=exchange.created_at,
            updated_at=exchange.updated_at,
        )
        try:
            async with self._session_factory() as session, session.begin():
                session.add(row)
                await session.flush()
                return DataExchange.model_validate(row)
        except IntegrityError as e:
            raise DuplicateExchange(f"An exchange is already in flight for contract {exchange.contract}") from e

    async def get_by_id(self, exchange_id: uuid.UUID) -> DataExchange | None:
        async with self._session_factory() as session:
            row = await session.get(DataExchangeRow, exchange_id)
            if row is None:
                return None
            return DataExchange.model_validate(row)

    async def get_by_correlation_id(self, correlation_id: str) -> DataExchange | None:
        stmt = (
            select(DataExchangeRow)
            .where(DataExchangeRow.correlation_id == correlation_id)
            .order_by(DataExchangeRow.created_at.desc())
            .limit(1)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            if row is None:
                return None
            return DataExchange.model_validate(row)

    async def set_correlation_id(self, exchange_id: uuid.UUID, correlation_id: str) -> DataExchange | None:
        try:
            async with self._session_factory() as session, session.begin():
                row = await self._locked_row(session, exchange_id)
                if row.correlation_id is not None:
                    return None
                row.correlation_id = correlation_id
                await session.flush()
                return DataExchange.model_validate(row)
        except IntegrityError as e:
            raise DuplicateExchange(f"Correlation id {correlation_id} is already bound") from e

    async def compare_and_set_status(
        self,
        exchange_id: uuid.UUID,
        expected: DataExchangeStatus,
        event: StatusEvent,
    ) -> DataExchange | None:
        async with self._session_factory() as session, session.begin():
            row = await self._locked_row(session, exchange_id)
            if row.status != expected:
                return None
            row.status = event.status
            row.error = event.error
            row.updated_at = event.occurred_at
            row.status_history = [*(row.status_history or []), event.model_dump(mode="json")]
            await session.flush()
            return DataExchange.model_validate(row)

    async def list_exchanges(
        self,
        *,
        status: DataExchangeStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DataExchange]:
        stmt = select(DataExchangeRow)
        if status:
            stmt = stmt.where(DataExchangeRow.status == status)
        stmt = stmt.order_by(DataExchangeRow.created_at.desc()).limit(limit).offset(offset)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [DataExchange.model_validate(r) for r in result.scalars()]

    @staticmethod
    async def _locked_row(session: AsyncSession, exchange_id: uuid.UUID) -> DataExchangeRow:
        stmt = select(DataExchangeRow).where(DataExchangeRow.id == exchange_id).with_for_update()
        result = await session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            raise ExchangeNotFound(f"Exchange {exchange_id} not found")
        return row
