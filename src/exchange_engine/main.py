"""Exchange Engine FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from dataspace_core.clients import CatalogClient, ContractClient, PeerClient
from dataspace_core.db import create_async_engine_factory, create_schema, get_async_session_factory
from dataspace_core.policy import build_policy_gate
from dataspace_core.representation import RestTransport, StaticCredentialStore, default_registry
from dataspace_core.settings import (
    CatalogSettings,
    ContractServiceSettings,
    CredentialSettings,
    DatabaseSettings,
    DispatchSettings,
    PeerSettings,
    PEPSettings,
    ServiceSettings,
)
from dataspace_core.telemetry import init_telemetry, instrument_fastapi, shutdown_telemetry
from fastapi import FastAPI

from exchange_engine.api.routes_consumer import router as consumer_router
from exchange_engine.api.routes_exchanges import router as exchanges_router
from exchange_engine.domain.catalog_resolver import CatalogResolver
from exchange_engine.domain.contract_resolver import ContractResolver
from exchange_engine.domain.dispatcher import RepresentationDispatcher
from exchange_engine.domain.peer_notifier import PeerNotifier

service_settings = ServiceSettings()

logging.basicConfig(
    level=service_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # pragma: no cover
    """Manage application lifecycle: OTel + DB engine + outbound clients."""
    init_telemetry(service_settings.service_name)

    engine = create_async_engine_factory(DatabaseSettings())
    await create_schema(engine)
    app.state.session_factory = get_async_session_factory(engine)

    http = httpx.AsyncClient(headers={"Accept": "application/json", "User-Agent": "pdc-exchange/0.1.0"})
    contract_settings = ContractServiceSettings()
    contracts = ContractClient(contract_settings, client=http)
    catalog = CatalogClient(CatalogSettings(), client=http)

    app.state.contract_resolver = ContractResolver(contracts, catalog, contract_settings)
    app.state.catalog_resolver = CatalogResolver(catalog)
    app.state.policy_gate = build_policy_gate(PEPSettings(), client=http)
    app.state.dispatcher = RepresentationDispatcher(
        default_registry(RestTransport(DispatchSettings(), client=http)),
        StaticCredentialStore(CredentialSettings()),
    )
    notifier = PeerNotifier(PeerClient(PeerSettings(), client=http))
    app.state.peer_notifier = notifier

    yield

    outcomes = await notifier.drain()
    if outcomes:
        logger.info("Drained %d pending peer notifications", len(outcomes))
    await http.aclose()
    await engine.dispose()
    shutdown_telemetry()


app = FastAPI(
    title="PDC Exchange Engine",
    version="0.1.0",
    lifespan=lifespan,
)

instrument_fastapi(app)

app.include_router(consumer_router)
app.include_router(exchanges_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/ready")
async def ready() -> dict[str, str]:
    return {"status": "ready"}
