"""Shared plumbing for JSON service clients."""

from __future__ import annotations

from typing import Any

import httpx


def join_url(base: str, path: str) -> str:
    """Join a base address and a relative path with exactly one slash."""
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


def is_absolute(ref: str) -> bool:
    return ref.startswith(("http://", "https://"))


def unwrap_content(body: Any) -> Any:
    """Dataspace services wrap payloads as ``{"content": ...}``; accept both forms."""
    if isinstance(body, dict) and "content" in body:
        return body["content"]
    return body


class JSONServiceClient:
    """Base client for services addressed by absolute URLs or refs relative to a base URL.

    Args:
        base_url: Address that relative references are resolved against
        timeout: Request timeout in seconds
        client: Optional shared ``httpx.AsyncClient``; owned and closed here when omitted
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json", "User-Agent": "pdc-exchange/0.1.0"},
        )

    async def __aenter__(self) -> JSONServiceClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def resolve(self, ref: str) -> str:
        return ref if is_absolute(ref) else join_url(self.base_url, ref)

    async def get_json(self, ref: str) -> Any:
        """GET a reference and return the unwrapped JSON body.

        Raises:
            httpx.HTTPError: On transport failures and error statuses
            ValueError: If the body is not JSON
        """
        response = await self._client.get(self.resolve(ref), timeout=self.timeout)
        response.raise_for_status()
        return unwrap_content(response.json())

    async def post_json(self, url: str, payload: dict[str, Any]) -> Any:
        response = await self._client.post(url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        if not response.content:
            return None
        return unwrap_content(response.json())
