"""Error taxonomy for data exchange orchestration.

Each error carries a stable ``code`` so the boundary layer can map it to a
transport status without inspecting message text.
"""

from __future__ import annotations

from typing import ClassVar

from dataspace_core.enums import ExchangeErrorCode


class ExchangeError(Exception):
    """Base exception for all exchange orchestration errors."""

    code: ClassVar[ExchangeErrorCode] = ExchangeErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ContractUnavailable(ExchangeError):
    """The contract service could not return a usable contract document."""

    code = ExchangeErrorCode.CONTRACT_UNAVAILABLE


class MissingParameters(ExchangeError):
    """An ecosystem export request carried neither resource nor purpose."""

    code = ExchangeErrorCode.MISSING_PARAMETERS


class InvalidResource(ExchangeError):
    """The requested resource is not an offering of the contract."""

    code = ExchangeErrorCode.INVALID_RESOURCE


class InvalidPurpose(ExchangeError):
    """The requested purpose is not an offering of the contract."""

    code = ExchangeErrorCode.INVALID_PURPOSE


class ProviderEndpointMissing(ExchangeError):
    """The provider self-description exposes no dataspace endpoint."""

    code = ExchangeErrorCode.PROVIDER_ENDPOINT_MISSING


class DuplicateExchange(ExchangeError):
    """An in-flight exchange already exists for the same contract binding."""

    code = ExchangeErrorCode.DUPLICATE_EXCHANGE


class ExchangeNotFound(ExchangeError):
    """No exchange matches the given identifier."""

    code = ExchangeErrorCode.NOT_FOUND


class PolicyDenied(ExchangeError):
    """The policy gate refused the import."""

    code = ExchangeErrorCode.POLICY_DENIED


class CatalogUnavailable(ExchangeError):
    """A catalog lookup failed or returned an unusable entry."""

    code = ExchangeErrorCode.CATALOG_UNAVAILABLE


class DispatchFailed(ExchangeError):
    """The payload could not be delivered to the representation endpoint."""

    code = ExchangeErrorCode.DISPATCH_FAILED


class InvalidTransition(ExchangeError):
    """A status change would leave a terminal state."""

    code = ExchangeErrorCode.INVALID_TRANSITION


class PeerUnavailable(ExchangeError):
    """The counterpart connector did not acknowledge a notification."""

    code = ExchangeErrorCode.PEER_UNAVAILABLE
