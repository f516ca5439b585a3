"""Domain enums for the dataspace exchange engine."""

from enum import StrEnum


class DataExchangeStatus(StrEnum):
    """Lifecycle states of a data exchange.

    PENDING is the only non-terminal state.
    """

    PENDING = "PENDING"
    IMPORT_SUCCESS = "IMPORT_SUCCESS"
    CONSUMER_IMPORT_ERROR = "CONSUMER_IMPORT_ERROR"
    PEP_ERROR = "PEP_ERROR"


TERMINAL_STATUSES = frozenset(
    {
        DataExchangeStatus.IMPORT_SUCCESS,
        DataExchangeStatus.CONSUMER_IMPORT_ERROR,
        DataExchangeStatus.PEP_ERROR,
    }
)


class ContractKind(StrEnum):
    """Contract shapes understood by the contract resolver."""

    BILATERAL = "bilateral"
    ECOSYSTEM = "ecosystem"


class RepresentationType(StrEnum):
    """Delivery mechanisms a software resource can declare."""

    REST = "REST"


class RepresentationAuthMethod(StrEnum):
    """How a representation endpoint expects to be authenticated."""

    NONE = "none"
    API_KEY = "apiKey"
    BASIC = "basic"
    BEARER = "bearer"


class NotificationKind(StrEnum):
    """Peer notifications sent to the counterpart connector."""

    TRIGGER_EXPORT = "trigger_export"
    FORWARD_IMPORT_RESULT = "forward_import_result"


class ExchangeErrorCode(StrEnum):
    """Stable error kinds reported in exchange envelopes."""

    CONTRACT_UNAVAILABLE = "ContractUnavailable"
    MISSING_PARAMETERS = "MissingParameters"
    INVALID_RESOURCE = "InvalidResource"
    INVALID_PURPOSE = "InvalidPurpose"
    PROVIDER_ENDPOINT_MISSING = "ProviderEndpointMissing"
    DUPLICATE_EXCHANGE = "DuplicateExchange"
    NOT_FOUND = "NotFound"
    POLICY_DENIED = "PolicyDenied"
    CATALOG_UNAVAILABLE = "CatalogUnavailable"
    DISPATCH_FAILED = "DispatchFailed"
    INVALID_TRANSITION = "InvalidTransition"
    PEER_UNAVAILABLE = "PeerUnavailable"
    INTERNAL_ERROR = "InternalError"
