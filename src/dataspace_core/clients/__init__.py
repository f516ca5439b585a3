"""Outbound clients for the contract service, catalog and peer connectors."""

from dataspace_core.clients.catalog import CatalogClient
from dataspace_core.clients.contract import ContractClient
from dataspace_core.clients.peer import PeerClient

__all__ = ["CatalogClient", "ContractClient", "PeerClient"]
