"""Representation transport capability."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from dataspace_core.models import Credential


@dataclass
class DispatchResult:
    """Outcome of delivering a payload to a representation endpoint."""

    ok: bool
    status_code: int | None = None
    body: Any = None
    error: str | None = None


class RepresentationTransport(Protocol):
    """Delivers a payload to a representation endpoint.

    Implementations raise ``DispatchFailed`` when delivery fails.
    """

    async def dispatch(
        self,
        method: str | None,
        url: str,
        payload: Any,
        credential: Credential | None,
    ) -> DispatchResult: ...
