"""PostgresHeadlineStore - one row per analysed headline."""

from __future__ import annotations

import logging

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from newsframes.core.exceptions import StorageError

from .base import HeadlineRecord, HeadlineStore

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS {table} (
    headline_id TEXT PRIMARY KEY,
    input_headline TEXT NOT NULL,
    flipped_headline TEXT NOT NULL,
    human_flipped_headline TEXT NOT NULL DEFAULT '',
    created_at TIMESTAMPTZ NOT NULL,
    snapshots JSONB NOT NULL DEFAULT '{{}}'::jsonb
)
"""


class PostgresHeadlineStore(HeadlineStore):
    """Postgres-backed store on an async connection pool.

    The pool is opened lazily on first use so building the pipeline never
    touches the network.
    """

    def __init__(
        self,
        *,
        dsn: str,
        table: str = "news_frames",
        min_size: int = 1,
        max_size: int = 5,
    ) -> None:
        if not dsn:
            raise StorageError("PostgresHeadlineStore requires storage.dsn")
        self._pool = AsyncConnectionPool(dsn, min_size=min_size, max_size=max_size, open=False)
        self._table = sql.Identifier(table)
        self._ready = False

    async def _ensure_ready(self) -> None:
        if self._ready:
            return
        await self._pool.open()
        async with self._pool.connection() as conn:
            await conn.execute(sql.SQL(_CREATE_TABLE).format(table=self._table))
        self._ready = True

    async def save(self, record: HeadlineRecord) -> str:
        try:
            await self._ensure_ready()
            async with self._pool.connection() as conn:
                await conn.execute(
                    sql.SQL(
                        "INSERT INTO {table} (headline_id, input_headline, flipped_headline, "
                        "human_flipped_headline, created_at, snapshots) "
                        "VALUES (%s, %s, %s, %s, %s, %s)"
                    ).format(table=self._table),
                    [
                        record.headline_id,
                        record.input_headline,
                        record.flipped_headline,
                        record.human_flipped_headline,
                        record.created_at,
                        Jsonb(record.snapshots),
                    ],
                )
        except psycopg.Error as e:
            raise StorageError(f"Database error: {e}") from e
        logger.info("Stored headline record %s", record.headline_id)
        return record.headline_id

    async def get(self, headline_id: str) -> HeadlineRecord | None:
        try:
            await self._ensure_ready()
            async with self._pool.connection() as conn:
                cur = conn.cursor(row_factory=dict_row)
                await cur.execute(
                    sql.SQL("SELECT * FROM {table} WHERE headline_id = %s").format(
                        table=self._table
                    ),
                    [headline_id],
                )
                row = await cur.fetchone()
        except psycopg.Error as e:
            raise StorageError(f"Database error: {e}") from e
        return HeadlineRecord.model_validate(row) if row else None

    async def close(self) -> None:
        await self._pool.close()


__all__ = ["PostgresHeadlineStore"]
