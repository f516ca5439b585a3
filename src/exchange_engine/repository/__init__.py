"""Exchange record persistence."""

from exchange_engine.repository.memory import InMemoryExchangeRepository
from exchange_engine.repository.postgres import PgExchangeRepository

__all__ = ["InMemoryExchangeRepository", "PgExchangeRepository"]
