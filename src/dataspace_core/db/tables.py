"""SQLAlchemy 2.0 ORM mapped classes for the exchange engine."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

_IN_FLIGHT = text("status = 'PENDING'")


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class DataExchangeRow(Base):
    """Exchange record.

    The partial unique index allows a single PENDING exchange per
    (contract, resource, purpose, provider); terminal rows do not collide.
    """

    __tablename__ = "data_exchanges"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    correlation_id: Mapped[str | None] = mapped_column(String(255))
    provider_endpoint: Mapped[str] = mapped_column(String(500), nullable=False)
    resource_id: Mapped[str] = mapped_column(String(500), nullable=False)
    purpose_id: Mapped[str] = mapped_column(String(500), nullable=False)
    contract: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="PENDING")
    error: Mapped[str | None] = mapped_column(Text)
    status_history: Mapped[list[dict[str, object]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    __table_args__ = (
        Index(
            "ux_data_exchanges_in_flight",
            "contract",
            "resource_id",
            "purpose_id",
            "provider_endpoint",
            unique=True,
            postgresql_where=_IN_FLIGHT,
            sqlite_where=_IN_FLIGHT,
        ),
        Index("ux_data_exchanges_correlation", "provider_endpoint", "correlation_id", unique=True),
        Index("ix_data_exchanges_status", "status"),
    )
