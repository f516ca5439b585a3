"""Credential lookup for representation endpoints."""

from __future__ import annotations

from typing import Protocol

from dataspace_core.models import Credential
from dataspace_core.settings import CredentialSettings


class CredentialStore(Protocol):
    async def get(self, credential_ref: str) -> Credential | None: ...


class StaticCredentialStore:
    """Credentials configured through ``CREDENTIALS_ENTRIES``."""

    def __init__(self, settings: CredentialSettings | None = None) -> None:
        settings = settings or CredentialSettings()
        self._entries = {ref: Credential(**values) for ref, values in settings.entries.items()}

    async def get(self, credential_ref: str) -> Credential | None:
        return self._entries.get(credential_ref)
