"""Consumer connector callbacks: /consumer/exchange and /consumer/import."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dataspace_core.enums import ExchangeErrorCode
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from exchange_engine.api.deps import ExportServiceDep, ImportServiceDep
from exchange_engine.api.schemas import EnvelopeResponse, ExportRequest, ImportRequest

if TYPE_CHECKING:
    from dataspace_core.models import ExchangeEnvelope

router = APIRouter(prefix="/consumer", tags=["consumer"])

_STATUS_BY_CODE: dict[ExchangeErrorCode, int] = {
    ExchangeErrorCode.MISSING_PARAMETERS: 400,
    ExchangeErrorCode.INVALID_RESOURCE: 400,
    ExchangeErrorCode.INVALID_PURPOSE: 400,
    ExchangeErrorCode.POLICY_DENIED: 403,
    ExchangeErrorCode.NOT_FOUND: 404,
    ExchangeErrorCode.DUPLICATE_EXCHANGE: 409,
    ExchangeErrorCode.CONTRACT_UNAVAILABLE: 502,
    ExchangeErrorCode.CATALOG_UNAVAILABLE: 502,
    ExchangeErrorCode.PROVIDER_ENDPOINT_MISSING: 502,
    ExchangeErrorCode.PEER_UNAVAILABLE: 502,
    ExchangeErrorCode.DISPATCH_FAILED: 502,
}


def status_for(envelope: ExchangeEnvelope) -> int:
    if envelope.success:
        return 200
    return _STATUS_BY_CODE.get(envelope.code, 500) if envelope.code else 500


def _respond(envelope: ExchangeEnvelope) -> JSONResponse:
    body = EnvelopeResponse.model_validate(envelope, from_attributes=True)
    return JSONResponse(status_code=status_for(envelope), content=body.model_dump(mode="json", by_alias=True))


@router.post(
    "/exchange",
    response_model=EnvelopeResponse,
    responses={400: {"description": "Invalid request"}, 409: {"description": "Exchange already in flight"}},
)
async def begin_export(body: ExportRequest, service: ExportServiceDep) -> JSONResponse:
    envelope = await service.begin_export(
        body.contract,
        resource_id=body.resource_id,
        purpose_id=body.purpose_id,
        provider_endpoint=body.provider_endpoint,
    )
    return _respond(envelope)


@router.post(
    "/import",
    response_model=EnvelopeResponse,
    responses={403: {"description": "Denied by policy"}, 404: {"description": "Exchange not found"}},
)
async def receive_import(body: ImportRequest, service: ImportServiceDep) -> JSONResponse:
    envelope = await service.receive_import(
        body.correlation_id,
        body.data,
        api_response_representation=body.api_response_representation,
    )
    return _respond(envelope)
