"""Headline persistence backends."""

from __future__ import annotations

from newsframes.core import Config

from .base import HeadlineRecord, HeadlineStore
from .memory import InMemoryHeadlineStore


def create_store(config: Config) -> HeadlineStore:
    """Build the store selected by `storage.backend`."""
    storage = config.storage
    if storage.backend == "postgres":
        # Lazy import: psycopg is only needed for the postgres backend.
        from .postgres import PostgresHeadlineStore

        return PostgresHeadlineStore(
            dsn=storage.dsn,
            table=storage.table,
            min_size=storage.pool_min_size,
            max_size=storage.pool_max_size,
        )
    return InMemoryHeadlineStore()


__all__ = ["HeadlineRecord", "HeadlineStore", "InMemoryHeadlineStore", "create_store"]
