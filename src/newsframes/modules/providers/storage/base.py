"""Persistence contract for analysed headlines.

The store is append-only from this system's point of view: records are
created once per run and never updated or deleted here.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HeadlineRecord(BaseModel):
    """One persisted run."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    headline_id: str = Field(default_factory=_new_id)
    input_headline: str
    flipped_headline: str
    # Filled in later by a human reviewer, never by the pipeline.
    human_flipped_headline: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    # Optional auxiliary results (per-analyzer reverted headlines, error flags).
    snapshots: dict[str, Any] = Field(default_factory=dict)


class HeadlineStore(ABC):
    """Durable store for `HeadlineRecord`s."""

    @abstractmethod
    async def save(self, record: HeadlineRecord) -> str:
        """Write one record and return its id. Raises `StorageError`."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, headline_id: str) -> HeadlineRecord | None:
        """Fetch a record by id, or None if it does not exist."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release pooled resources (no-op by default)."""
        return None


__all__ = ["HeadlineRecord", "HeadlineStore"]
