"""Read-only exchange endpoints: /api/v1/exchanges."""

from __future__ import annotations

import uuid

from dataspace_core.enums import DataExchangeStatus
from dataspace_core.exceptions import ExchangeNotFound
from fastapi import APIRouter, HTTPException

from exchange_engine.api.deps import ExchangeStoreDep
from exchange_engine.api.schemas import ExchangeResponse

router = APIRouter(prefix="/api/v1/exchanges", tags=["exchanges"])


@router.get("")
async def list_exchanges(
    store: ExchangeStoreDep,
    status: DataExchangeStatus | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[ExchangeResponse]:
    exchanges = await store.list_exchanges(status=status, limit=limit, offset=offset)
    return [ExchangeResponse.model_validate(e, from_attributes=True) for e in exchanges]


@router.get("/{exchange_id}", responses={404: {"description": "Exchange not found"}})
async def get_exchange(exchange_id: uuid.UUID, store: ExchangeStoreDep) -> ExchangeResponse:
    try:
        exchange = await store.get(exchange_id)
    except ExchangeNotFound as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return ExchangeResponse.model_validate(exchange, from_attributes=True)
