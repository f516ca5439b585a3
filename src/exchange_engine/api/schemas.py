"""API request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from dataspace_core.enums import DataExchangeStatus, ExchangeErrorCode
from pydantic import BaseModel, ConfigDict, Field

# ─── Consumer callbacks ──────────────────────────────────


class ExportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contract: str = Field(min_length=1)
    resource_id: str | None = Field(default=None, alias="resourceId")
    purpose_id: str | None = Field(default=None, alias="purposeId")
    provider_endpoint: str | None = Field(default=None, alias="providerEndpoint")


class ImportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    correlation_id: str = Field(min_length=1, alias="providerDataExchange")
    data: Any = None
    api_response_representation: Any = Field(default=None, alias="apiResponseRepresentation")


class EnvelopeResponse(BaseModel):
    success: bool
    code: ExchangeErrorCode | None = None
    message: str | None = None
    exchange_id: uuid.UUID | None = Field(default=None, serialization_alias="dataExchange")
    content: Any = None


# ─── Exchange views ──────────────────────────────────────


class StatusEventResponse(BaseModel):
    status: DataExchangeStatus
    error: str | None = None
    occurred_at: datetime


class ExchangeResponse(BaseModel):
    id: uuid.UUID
    correlation_id: str | None = None
    provider_endpoint: str
    resource_id: str
    purpose_id: str
    contract: str
    status: DataExchangeStatus
    error: str | None = None
    status_history: list[StatusEventResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
