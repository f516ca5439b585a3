"""Database connectivity: async SQLAlchemy engine and session management."""

from dataspace_core.db.engine import create_async_engine_factory, create_schema, get_async_session_factory
from dataspace_core.db.tables import Base, DataExchangeRow

__all__ = [
    "Base",
    "DataExchangeRow",
    "create_async_engine_factory",
    "create_schema",
    "get_async_session_factory",
]
