"""Exchange orchestration domain services."""

from exchange_engine.domain.catalog_resolver import CatalogResolver, ResolvedResource
from exchange_engine.domain.contract_resolver import ContractResolver, OfferingContext, derive_offering_context
from exchange_engine.domain.dispatcher import RepresentationDispatcher
from exchange_engine.domain.exchange_store import ExchangeStore
from exchange_engine.domain.export_service import ExportService
from exchange_engine.domain.import_service import ImportService
from exchange_engine.domain.peer_notifier import NotificationHandle, NotificationOutcome, PeerNotifier

__all__ = [
    "CatalogResolver",
    "ContractResolver",
    "ExchangeStore",
    "ExportService",
    "ImportService",
    "NotificationHandle",
    "NotificationOutcome",
    "OfferingContext",
    "PeerNotifier",
    "RepresentationDispatcher",
    "ResolvedResource",
    "derive_offering_context",
]
