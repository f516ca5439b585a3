"""Shared test fixtures: in-memory repository and fake outbound collaborators."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from dataspace_core.exceptions import CatalogUnavailable, ContractUnavailable, DispatchFailed, PeerUnavailable
from dataspace_core.models import Credential
from dataspace_core.policy import AllowAllPolicyGate, PolicyDecision
from dataspace_core.representation import DispatchResult, TransportRegistry
from dataspace_core.representation.credentials import StaticCredentialStore
from dataspace_core.settings import CredentialSettings
from exchange_engine.domain.catalog_resolver import CatalogResolver
from exchange_engine.domain.contract_resolver import ContractResolver
from exchange_engine.domain.dispatcher import RepresentationDispatcher
from exchange_engine.domain.exchange_store import ExchangeStore
from exchange_engine.domain.export_service import ExportService
from exchange_engine.domain.import_service import ImportService
from exchange_engine.domain.peer_notifier import PeerNotifier
from exchange_engine.repository.memory import InMemoryExchangeRepository
from fastapi import FastAPI
from httpx import AsyncClient

from tests.engine.samples import catalog_entries, contract_documents

# ─── Fake outbound collaborators ─────────────────────────


class FakeContractClient:
    def __init__(self, documents: dict[str, dict[str, Any]]) -> None:
        self.documents = documents
        self.requests: list[str] = []

    async def get_contract(self, ref: str) -> dict[str, Any]:
        await asyncio.sleep(0)
        self.requests.append(ref)
        if ref not in self.documents:
            raise ContractUnavailable(f"Contract {ref} unavailable: 404")
        return self.documents[ref]


class FakeCatalogClient:
    def __init__(self, entries: dict[str, dict[str, Any]]) -> None:
        self.entries = entries

    async def get_catalog_data(self, ref: str | None) -> dict[str, Any]:
        await asyncio.sleep(0)
        if not ref or ref not in self.entries:
            raise CatalogUnavailable(f"Catalog entry {ref} unavailable: 404")
        return self.entries[ref]

    async def get_self_description(self, participant_ref: str) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        return self.entries.get(participant_ref)


class FakePeerClient:
    """Records provider calls; each call kind can be made to fail."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.fail: set[str] = set()
        self._next_id = 0

    async def register_export(self, provider_endpoint: str, exchange: dict[str, Any]) -> str:
        await asyncio.sleep(0)
        self.calls.append(("register", provider_endpoint, exchange))
        if "register" in self.fail:
            raise PeerUnavailable(f"Provider call {provider_endpoint}dataexchanges failed: 503")
        self._next_id += 1
        return f"prov-{self._next_id}"

    async def trigger_export(self, provider_endpoint: str, consumer_exchange_id: str) -> Any:
        await asyncio.sleep(0)
        self.calls.append(("export", provider_endpoint, consumer_exchange_id))
        if "export" in self.fail:
            raise PeerUnavailable("Provider export failed: 503")
        return {"success": True}

    async def forward_import_result(
        self,
        provider_endpoint: str,
        data: Any,
        consumer_exchange_id: str,
        correlation_id: str | None = None,
    ) -> Any:
        await asyncio.sleep(0)
        self.calls.append(("import", provider_endpoint, {"data": data, "providerDataExchange": correlation_id}))
        if "import" in self.fail:
            raise PeerUnavailable("Provider import failed: 502")
        return {"success": True}

    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.calls]


class FakeTransport:
    def __init__(self, body: Any = None) -> None:
        self.body = body
        self.error: str | None = None
        self.sent: list[dict[str, Any]] = []

    async def dispatch(self, method: str | None, url: str, payload: Any, credential: Credential | None) -> DispatchResult:
        await asyncio.sleep(0)
        self.sent.append({"method": method, "url": url, "payload": payload, "credential": credential})
        if self.error:
            raise DispatchFailed(self.error)
        return DispatchResult(ok=True, status_code=200, body=self.body)


class UnreachableCredentialStore:
    async def get(self, credential_ref: str) -> Credential | None:
        await asyncio.sleep(0)
        raise ConnectionError(f"credential backend unreachable for {credential_ref}")


class StaticPolicyGate:
    def __init__(self, allowed: bool, reason: str = "") -> None:
        self.allowed = allowed
        self.reason = reason
        self.evaluated: list[tuple[str, str, str]] = []

    async def evaluate(self, resource_id: str, purpose_id: str, contract: str) -> PolicyDecision:
        await asyncio.sleep(0)
        self.evaluated.append((resource_id, purpose_id, contract))
        return PolicyDecision(allowed=self.allowed, reason=self.reason)


# ─── Fixtures ────────────────────────────────────────────


@pytest.fixture
def exchange_repo() -> InMemoryExchangeRepository:
    return InMemoryExchangeRepository()


@pytest.fixture
def store(exchange_repo: InMemoryExchangeRepository) -> ExchangeStore:
    return ExchangeStore(repo=exchange_repo)


@pytest.fixture
def contract_client() -> FakeContractClient:
    return FakeContractClient(contract_documents())


@pytest.fixture
def catalog_client() -> FakeCatalogClient:
    return FakeCatalogClient(catalog_entries())


@pytest.fixture
def peer_client() -> FakePeerClient:
    return FakePeerClient()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(body={"score": 0.93})


@pytest.fixture
def policy_gate() -> AllowAllPolicyGate:
    return AllowAllPolicyGate()


@pytest.fixture
def contract_resolver(contract_client: FakeContractClient, catalog_client: FakeCatalogClient) -> ContractResolver:
    return ContractResolver(contract_client, catalog_client)  # type: ignore[arg-type]


@pytest.fixture
def catalog_resolver(catalog_client: FakeCatalogClient) -> CatalogResolver:
    return CatalogResolver(catalog_client)  # type: ignore[arg-type]


@pytest.fixture
def dispatcher(transport: FakeTransport) -> RepresentationDispatcher:
    registry = TransportRegistry()
    registry.register("REST", transport)
    credentials = StaticCredentialStore(CredentialSettings(entries={"cred-1": {"key": "x-api-key", "value": "s3cr3t"}}))
    return RepresentationDispatcher(registry, credentials)


@pytest.fixture
async def notifier(peer_client: FakePeerClient) -> AsyncGenerator[PeerNotifier]:
    peer_notifier = PeerNotifier(peer_client)  # type: ignore[arg-type]
    yield peer_notifier
    await peer_notifier.drain()


@pytest.fixture
def export_service(
    store: ExchangeStore,
    contract_resolver: ContractResolver,
    notifier: PeerNotifier,
) -> ExportService:
    return ExportService(store=store, contracts=contract_resolver, notifier=notifier)


@pytest.fixture
def import_service(
    store: ExchangeStore,
    contract_resolver: ContractResolver,
    policy_gate: AllowAllPolicyGate,
    catalog_resolver: CatalogResolver,
    dispatcher: RepresentationDispatcher,
    notifier: PeerNotifier,
) -> ImportService:
    return ImportService(
        store=store,
        contracts=contract_resolver,
        policy=policy_gate,
        catalog=catalog_resolver,
        dispatcher=dispatcher,
        notifier=notifier,
    )


@pytest.fixture
def app(store: ExchangeStore, export_service: ExportService, import_service: ImportService) -> Generator[FastAPI]:
    """Create a test app with in-memory services."""
    from exchange_engine.api.deps import get_exchange_store, get_export_service, get_import_service
    from exchange_engine.main import app as main_app

    main_app.dependency_overrides[get_exchange_store] = lambda: store
    main_app.dependency_overrides[get_export_service] = lambda: export_service
    main_app.dependency_overrides[get_import_service] = lambda: import_service
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints."""
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
