"""Peer notifier: tells the provider connector an exchange phase completed.

Export triggers run as background tasks detached from the inbound request.
Each task yields a NotificationOutcome through its handle and through any
registered listeners; failures are logged and never raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from dataspace_core.enums import NotificationKind

if TYPE_CHECKING:
    import uuid
    from collections.abc import Awaitable, Callable

    from dataspace_core.clients import PeerClient
    from dataspace_core.models import DataExchange

logger = logging.getLogger(__name__)


@dataclass
class NotificationOutcome:
    kind: NotificationKind
    exchange_id: uuid.UUID
    ok: bool
    response: Any = None
    error: str | None = None


class NotificationHandle:
    """Handle on a detached notification task."""

    def __init__(self, kind: NotificationKind, exchange_id: uuid.UUID, task: asyncio.Task[NotificationOutcome]) -> None:
        self.kind = kind
        self.exchange_id = exchange_id
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    async def outcome(self) -> NotificationOutcome:
        return await asyncio.shield(self._task)


class PeerNotifier:
    def __init__(self, peer: PeerClient) -> None:
        self._peer = peer
        self._pending: set[asyncio.Task[NotificationOutcome]] = set()
        self._listeners: list[Callable[[NotificationOutcome], None]] = []

    def add_listener(self, listener: Callable[[NotificationOutcome], None]) -> None:
        self._listeners.append(listener)

    async def register_export(self, exchange: DataExchange) -> str:
        """Create the mirror exchange at the provider; returns the provider-side id.

        Raises PeerUnavailable. Awaited by the export pipeline.
        """
        payload = {
            "consumerDataExchange": str(exchange.id),
            "resourceId": exchange.resource_id,
            "purposeId": exchange.purpose_id,
            "contract": exchange.contract,
            "status": str(exchange.status),
        }
        return await self._peer.register_export(exchange.provider_endpoint, payload)

    def trigger_export(self, exchange: DataExchange) -> NotificationHandle:
        """Ask the provider to start exporting, without waiting for it."""
        task = asyncio.create_task(
            self._run(
                NotificationKind.TRIGGER_EXPORT,
                exchange.id,
                lambda: self._peer.trigger_export(exchange.provider_endpoint, str(exchange.id)),
            ),
            name=f"trigger-export-{exchange.id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return NotificationHandle(NotificationKind.TRIGGER_EXPORT, exchange.id, task)

    async def forward_import_result(self, exchange: DataExchange, payload: Any) -> NotificationOutcome:
        """Send a consumer API response back to the provider."""
        return await self._run(
            NotificationKind.FORWARD_IMPORT_RESULT,
            exchange.id,
            lambda: self._peer.forward_import_result(
                exchange.provider_endpoint, payload, str(exchange.id), exchange.correlation_id
            ),
        )

    async def drain(self) -> list[NotificationOutcome]:
        """Wait for every detached notification still running."""
        if not self._pending:
            return []
        return list(await asyncio.gather(*self._pending))

    async def _run(
        self,
        kind: NotificationKind,
        exchange_id: uuid.UUID,
        call: Callable[[], Awaitable[Any]],
    ) -> NotificationOutcome:
        try:
            response = await call()
            outcome = NotificationOutcome(kind=kind, exchange_id=exchange_id, ok=True, response=response)
            logger.info("Peer notification %s for exchange %s acknowledged", kind, exchange_id)
        except Exception as e:
            logger.warning("Peer notification %s for exchange %s failed: %s", kind, exchange_id, e)
            outcome = NotificationOutcome(kind=kind, exchange_id=exchange_id, ok=False, error=str(e))

        for listener in self._listeners:
            try:
                listener(outcome)
            except Exception:
                logger.warning("Notification listener failed", exc_info=True)
        return outcome
