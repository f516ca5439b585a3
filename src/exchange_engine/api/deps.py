"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from exchange_engine.domain.exchange_store import ExchangeStore
from exchange_engine.domain.export_service import ExportService
from exchange_engine.domain.import_service import ImportService
from exchange_engine.repository.postgres import PgExchangeRepository


def get_exchange_store(request: Request) -> ExchangeStore:
    return ExchangeStore(repo=PgExchangeRepository(request.app.state.session_factory))


ExchangeStoreDep = Annotated[ExchangeStore, Depends(get_exchange_store)]


def get_export_service(request: Request, store: ExchangeStoreDep) -> ExportService:
    state = request.app.state
    return ExportService(store=store, contracts=state.contract_resolver, notifier=state.peer_notifier)


def get_import_service(request: Request, store: ExchangeStoreDep) -> ImportService:
    state = request.app.state
    return ImportService(
        store=store,
        contracts=state.contract_resolver,
        policy=state.policy_gate,
        catalog=state.catalog_resolver,
        dispatcher=state.dispatcher,
        notifier=state.peer_notifier,
    )


ExportServiceDep = Annotated[ExportService, Depends(get_export_service)]
ImportServiceDep = Annotated[ImportService, Depends(get_import_service)]
