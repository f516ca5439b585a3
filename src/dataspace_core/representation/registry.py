"""Transport registry keyed by representation type.

New delivery mechanisms are added by registering a transport; the import
pipeline only ever asks the registry.

Example:
    registry = TransportRegistry()
    registry.register(RepresentationType.REST, RestTransport())
    transport = registry.get("REST")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dataspace_core.enums import RepresentationType
from dataspace_core.exceptions import DispatchFailed

if TYPE_CHECKING:
    from dataspace_core.representation.base import RepresentationTransport

logger = logging.getLogger(__name__)


class TransportRegistry:
    def __init__(self) -> None:
        self._transports: dict[str, RepresentationTransport] = {}

    def register(self, representation_type: str, transport: RepresentationTransport) -> None:
        key = str(representation_type)
        if key in self._transports:
            logger.warning("Overwriting existing transport: %s", key)
        self._transports[key] = transport
        logger.info("Registered representation transport: %s", key)

    def get(self, representation_type: str | None) -> RepresentationTransport:
        """Return the transport for a type.

        Raises:
            DispatchFailed: If no transport handles the type
        """
        transport = self._transports.get(str(representation_type)) if representation_type else None
        if transport is None:
            raise DispatchFailed(f"No transport registered for representation type {representation_type!r}")
        return transport

    def list_types(self) -> list[str]:
        return sorted(self._transports)


def default_registry(rest: RepresentationTransport) -> TransportRegistry:
    registry = TransportRegistry()
    registry.register(RepresentationType.REST, rest)
    return registry
