"""Catalog resolution: service offering → first software resource."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dataspace_core.exceptions import CatalogUnavailable
from dataspace_core.models import ServiceOffering, SoftwareResource
from pydantic import ValidationError

if TYPE_CHECKING:
    from dataspace_core.clients import CatalogClient


@dataclass(frozen=True)
class ResolvedResource:
    offering: ServiceOffering
    software_resource: SoftwareResource


class CatalogResolver:
    def __init__(self, catalog: CatalogClient) -> None:
        self._catalog = catalog

    async def resolve_software_resource(self, offering_ref: str) -> ResolvedResource:
        """Resolve the delivery mechanism behind a service offering.

        Raises:
            CatalogUnavailable: On any lookup failure, carrying the originating message
        """
        raw_offering = await self._catalog.get_catalog_data(offering_ref)
        try:
            offering = ServiceOffering.model_validate(raw_offering)
        except ValidationError as e:
            raise CatalogUnavailable(f"Service offering {offering_ref} is malformed: {e}") from e

        if not offering.software_resources:
            raise CatalogUnavailable(f"Service offering {offering_ref} references no software resource")

        resource_ref = offering.software_resources[0]
        raw_resource = await self._catalog.get_catalog_data(resource_ref)
        try:
            resource = SoftwareResource.model_validate(raw_resource)
        except ValidationError as e:
            raise CatalogUnavailable(f"Software resource {resource_ref} is malformed: {e}") from e

        return ResolvedResource(offering=offering, software_resource=resource)
