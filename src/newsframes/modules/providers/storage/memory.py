"""In-process store, used by default and in tests."""

from __future__ import annotations

import logging

from .base import HeadlineRecord, HeadlineStore

logger = logging.getLogger(__name__)


class InMemoryHeadlineStore(HeadlineStore):
    def __init__(self) -> None:
        self._records: dict[str, HeadlineRecord] = {}

    async def save(self, record: HeadlineRecord) -> str:
        self._records[record.headline_id] = record
        logger.debug("Stored headline record %s in memory", record.headline_id)
        return record.headline_id

    async def get(self, headline_id: str) -> HeadlineRecord | None:
        return self._records.get(headline_id)

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["InMemoryHeadlineStore"]
