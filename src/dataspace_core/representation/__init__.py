"""Representation transports: how payloads reach consumer software resources."""

from dataspace_core.representation.base import DispatchResult, RepresentationTransport
from dataspace_core.representation.credentials import CredentialStore, StaticCredentialStore
from dataspace_core.representation.registry import TransportRegistry, default_registry
from dataspace_core.representation.rest import RestTransport

__all__ = [
    "CredentialStore",
    "DispatchResult",
    "RepresentationTransport",
    "RestTransport",
    "StaticCredentialStore",
    "TransportRegistry",
    "default_registry",
]
