"""Tests for the SQLAlchemy exchange repository, run against SQLite."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from dataspace_core.db import create_async_engine_factory, create_schema, get_async_session_factory
from dataspace_core.enums import DataExchangeStatus
from dataspace_core.exceptions import DuplicateExchange, ExchangeNotFound, InvalidTransition
from dataspace_core.models import DataExchange, StatusEvent
from dataspace_core.settings import DatabaseSettings
from exchange_engine.domain.exchange_store import ExchangeStore
from exchange_engine.repository.postgres import PgExchangeRepository

from tests.engine.samples import DATA_OFFERING, ECOSYSTEM_CONTRACT, PROVIDER_ENDPOINT, PURPOSE_OFFERING


@pytest.fixture
async def pg_repo(tmp_path: Path) -> AsyncGenerator[PgExchangeRepository]:
    engine = create_async_engine_factory(DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'exchanges.db'}"))
    await create_schema(engine)
    yield PgExchangeRepository(get_async_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def sql_store(pg_repo: PgExchangeRepository) -> ExchangeStore:
    return ExchangeStore(repo=pg_repo)


async def _create(store: ExchangeStore, correlation_id: str | None = None):
    return await store.create(
        provider_endpoint=PROVIDER_ENDPOINT,
        resource_id=DATA_OFFERING,
        purpose_id=PURPOSE_OFFERING,
        contract=ECOSYSTEM_CONTRACT,
        correlation_id=correlation_id,
    )


def _bound(provider_endpoint: str, created_at: datetime) -> DataExchange:
    return DataExchange(
        provider_endpoint=provider_endpoint,
        resource_id=DATA_OFFERING,
        purpose_id=PURPOSE_OFFERING,
        contract=ECOSYSTEM_CONTRACT,
        correlation_id="prov-shared",
        created_at=created_at,
    )


class TestPgExchangeRepository:
    async def test_create_and_read_back(self, sql_store: ExchangeStore) -> None:
        created = await _create(sql_store)
        fetched = await sql_store.get(created.id)

        assert fetched.id == created.id
        assert fetched.status == DataExchangeStatus.PENDING
        assert fetched.contract == ECOSYSTEM_CONTRACT

    async def test_partial_unique_index_blocks_in_flight_duplicates(self, sql_store: ExchangeStore) -> None:
        await _create(sql_store)
        with pytest.raises(DuplicateExchange):
            await _create(sql_store)

    async def test_terminal_rows_do_not_collide(self, sql_store: ExchangeStore) -> None:
        first = await _create(sql_store)
        await sql_store.transition(first, DataExchangeStatus.CONSUMER_IMPORT_ERROR, "endpoint down")
        second = await _create(sql_store)
        assert second.id != first.id

    async def test_status_history_persisted(self, sql_store: ExchangeStore) -> None:
        created = await _create(sql_store)
        await sql_store.transition(created, DataExchangeStatus.IMPORT_SUCCESS)
        await sql_store.transition(created, DataExchangeStatus.IMPORT_SUCCESS)

        stored = await sql_store.get(created.id)
        assert stored.status == DataExchangeStatus.IMPORT_SUCCESS
        assert [e.status for e in stored.status_history] == [DataExchangeStatus.IMPORT_SUCCESS]

    async def test_compare_and_set_detects_stale_expectation(self, pg_repo: PgExchangeRepository) -> None:
        store = ExchangeStore(repo=pg_repo)
        created = await _create(store)
        await store.transition(created, DataExchangeStatus.PEP_ERROR, "denied")

        stale = await pg_repo.compare_and_set_status(
            created.id, DataExchangeStatus.PENDING, StatusEvent(status=DataExchangeStatus.IMPORT_SUCCESS)
        )
        assert stale is None

    async def test_compare_and_set_unknown_exchange(self, pg_repo: PgExchangeRepository) -> None:
        with pytest.raises(ExchangeNotFound):
            await pg_repo.compare_and_set_status(
                uuid.uuid4(), DataExchangeStatus.PENDING, StatusEvent(status=DataExchangeStatus.IMPORT_SUCCESS)
            )

    async def test_never_back_to_pending(self, sql_store: ExchangeStore) -> None:
        created = await _create(sql_store)
        done = await sql_store.transition(created, DataExchangeStatus.IMPORT_SUCCESS)
        with pytest.raises(InvalidTransition):
            await sql_store.transition(done, DataExchangeStatus.PENDING)

    async def test_correlation_binding(self, sql_store: ExchangeStore) -> None:
        created = await _create(sql_store)
        await sql_store.attach_correlation_id(created, "prov-3")

        found = await sql_store.find_by_correlation_id("prov-3")
        assert found.id == created.id
        with pytest.raises(InvalidTransition):
            await sql_store.attach_correlation_id(created, "prov-4")

    async def test_list_by_status(self, sql_store: ExchangeStore) -> None:
        done = await _create(sql_store)
        await sql_store.transition(done, DataExchangeStatus.IMPORT_SUCCESS)
        pending = await _create(sql_store)

        assert [e.id for e in await sql_store.list_exchanges(status=DataExchangeStatus.PENDING)] == [pending.id]
        assert len(await sql_store.list_exchanges()) == 2

    async def test_shared_correlation_id_resolves_to_newest(self, pg_repo: PgExchangeRepository) -> None:
        older = _bound(PROVIDER_ENDPOINT, datetime(2026, 1, 1, tzinfo=UTC))
        newer = _bound("http://other-provider.test/", datetime(2026, 1, 2, tzinfo=UTC))
        await pg_repo.create(older)
        await pg_repo.create(newer)

        found = await pg_repo.get_by_correlation_id("prov-shared")

        assert found is not None
        assert found.id == newer.id
