"""Policy enforcement point used before data is released to a consumer resource."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from dataspace_core.settings import PEPSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: str = ""


class PolicyGate(Protocol):
    async def evaluate(self, resource_id: str, purpose_id: str, contract: str) -> PolicyDecision: ...


class AllowAllPolicyGate:
    """Gate used while policy enforcement is disabled."""

    async def evaluate(self, resource_id: str, purpose_id: str, contract: str) -> PolicyDecision:
        return PolicyDecision(allowed=True, reason="policy enforcement disabled")


class OPAPolicyGate:
    """Evaluates import authorization against an OPA-compatible decision endpoint.

    An unreachable or failing policy engine denies the import.
    """

    def __init__(
        self,
        settings: PEPSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or PEPSettings()
        self._client = client

    @property
    def decision_url(self) -> str:
        return f"{self._settings.url.rstrip('/')}/v1/data/{self._settings.policy_path.strip('/')}"

    async def evaluate(self, resource_id: str, purpose_id: str, contract: str) -> PolicyDecision:
        input_data = {
            "input": {
                "targetResource": resource_id,
                "purpose": purpose_id,
                "referenceURL": contract,
            }
        }

        try:
            if self._client is not None:
                resp = await self._client.post(self.decision_url, json=input_data, timeout=self._settings.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await client.post(self.decision_url, json=input_data, timeout=self._settings.timeout)
            resp.raise_for_status()
            result = resp.json()
        except Exception:
            logger.warning("Policy evaluation failed for %s, defaulting to deny", resource_id, exc_info=True)
            return PolicyDecision(allowed=False, reason="policy engine unavailable")

        allowed = bool(result.get("result", False)) if isinstance(result, dict) else False
        return PolicyDecision(allowed=allowed, reason="" if allowed else "denied by policy")


def build_policy_gate(settings: PEPSettings | None = None, client: httpx.AsyncClient | None = None) -> PolicyGate:
    """Select the gate implementation from ``PEP_ENABLED``."""
    settings = settings or PEPSettings()
    if not settings.enabled:
        return AllowAllPolicyGate()
    logger.info("Policy enforcement enabled via %s", settings.url)
    return OPAPolicyGate(settings, client=client)
