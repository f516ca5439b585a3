"""Pydantic V2 domain models for dataspace data exchanges.

Contract and catalog documents are read-only views of what the contract and
catalog services return. Their wire format is camelCase, so every field that
differs declares an alias and the models accept either spelling.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dataspace_core.enums import TERMINAL_STATUSES, DataExchangeStatus, ExchangeErrorCode


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ─── Exchange ────────────────────────────────────────────


class StatusEvent(BaseModel):
    """One applied status change of a data exchange."""

    status: DataExchangeStatus
    error: str | None = None
    occurred_at: datetime = Field(default_factory=_utcnow)


class DataExchange(BaseModel):
    """A single controlled transfer between a provider and this consumer.

    ``correlation_id`` is the identifier the provider uses for the same
    exchange; inbound callbacks are matched on it.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    correlation_id: str | None = None
    provider_endpoint: str = Field(min_length=1)
    resource_id: str = Field(min_length=1)
    purpose_id: str = Field(min_length=1)
    contract: str = Field(min_length=1)
    status: DataExchangeStatus = DataExchangeStatus.PENDING
    error: str | None = None
    status_history: list[StatusEvent] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


# ─── Contracts ───────────────────────────────────────────


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProviderBinding(_Document):
    """Where the provider of a bilateral contract describes itself."""

    endpoint_ref: str


class ContractPurpose(_Document):
    purpose: str


class BilateralContract(_Document):
    """Two-party contract: one provider, one service offering, ordered purposes."""

    id: str | None = Field(default=None, alias="_id")
    data_provider: str = Field(alias="dataProvider")
    data_consumer: str | None = Field(default=None, alias="dataConsumer")
    service_offering: str = Field(alias="serviceOffering")
    purpose: list[ContractPurpose] = Field(default_factory=list)
    status: str | None = None

    def provider(self) -> ProviderBinding:
        return ProviderBinding(endpoint_ref=self.data_provider)

    def primary_offering(self) -> str:
        return self.service_offering

    def purposes(self) -> list[str]:
        """Purpose references in contract order; the first is the primary one."""
        return [p.purpose for p in self.purpose]


class EcosystemOffering(_Document):
    participant: str | None = None
    service_offering: str = Field(alias="serviceOffering")
    policies: list[dict[str, Any]] = Field(default_factory=list)


class EcosystemContract(_Document):
    """Multi-party contract holding a collection of service offerings.

    Purposes are modelled as offerings of the same collection.
    """

    id: str | None = Field(default=None, alias="_id")
    ecosystem: str | None = None
    service_offerings: list[EcosystemOffering] = Field(default_factory=list, alias="serviceOfferings")
    members: list[dict[str, Any]] = Field(default_factory=list)
    status: str | None = None

    def contains_offering(self, offering_id: str | None) -> bool:
        return self.offering(offering_id) is not None

    def offering(self, offering_id: str | None) -> EcosystemOffering | None:
        if not offering_id:
            return None
        for entry in self.service_offerings:
            if entry.service_offering == offering_id:
                return entry
        return None


Contract = BilateralContract | EcosystemContract


class ProviderSelfDescription(_Document):
    dataspace_endpoint: str | None = Field(default=None, alias="dataspaceEndpoint")


# ─── Catalog ─────────────────────────────────────────────


class Representation(_Document):
    """Concrete delivery mechanism of a software resource."""

    type: str | None = None
    method: str | None = None
    url: str | None = None
    credential: str | None = None
    is_api: bool = Field(default=False, alias="isAPI")


class SoftwareResource(_Document):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    representation: Representation | None = None
    is_api: bool = Field(default=False, alias="isAPI")

    @property
    def endpoint(self) -> str | None:
        if self.representation is None:
            return None
        return self.representation.url or None

    @property
    def delivers_api(self) -> bool:
        """True when the resource answers with a response worth forwarding."""
        return self.is_api or bool(self.representation and self.representation.is_api)


class ServiceOffering(_Document):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    software_resources: list[str] = Field(default_factory=list, alias="softwareResources")
    data_resources: list[str] = Field(default_factory=list, alias="dataResources")


class Credential(BaseModel):
    """Secret material resolved for a representation credential reference."""

    key: str | None = None
    value: str | None = None
    username: str | None = None
    password: str | None = None


# ─── Envelopes ───────────────────────────────────────────


class ExchangeEnvelope(BaseModel):
    """Result of an orchestration entry point, mapped to a response by the boundary."""

    success: bool
    code: ExchangeErrorCode | None = None
    message: str | None = None
    exchange_id: uuid.UUID | None = None
    content: Any = None

    @classmethod
    def accepted(cls, exchange_id: uuid.UUID | None = None, content: Any = None) -> ExchangeEnvelope:
        return cls(success=True, exchange_id=exchange_id, content=content)

    @classmethod
    def failed(
        cls,
        code: ExchangeErrorCode,
        message: str,
        exchange_id: uuid.UUID | None = None,
    ) -> ExchangeEnvelope:
        return cls(success=False, code=code, message=message, exchange_id=exchange_id)
