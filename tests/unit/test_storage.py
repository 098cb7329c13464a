"""Headline stores: record defaults, in-memory store, backend selection."""

from __future__ import annotations

from datetime import timezone

import pytest

from newsframes.core.config import Config
from newsframes.core.exceptions import StorageError
from newsframes.modules.providers.storage import (
    HeadlineRecord,
    InMemoryHeadlineStore,
    create_store,
)


class TestHeadlineRecord:
    def test_defaults(self):
        record = HeadlineRecord(input_headline="Dog bites man", flipped_headline="Man bitten")
        assert record.headline_id
        assert record.human_flipped_headline == ""
        assert record.created_at.tzinfo is timezone.utc
        assert record.snapshots == {}

    def test_ids_are_unique(self):
        ids = {
            HeadlineRecord(input_headline="a", flipped_headline="b").headline_id for _ in range(50)
        }
        assert len(ids) == 50

    def test_records_are_immutable(self):
        record = HeadlineRecord(input_headline="a", flipped_headline="b")
        with pytest.raises(ValueError):
            record.flipped_headline = "c"  # type: ignore[misc]


class TestInMemoryStore:
    @pytest.mark.asyncio
    async def test_save_and_get(self):
        store = InMemoryHeadlineStore()
        record = HeadlineRecord(
            input_headline="Dog bites man",
            flipped_headline="Man bitten",
            snapshots={"speculative_reverted_headline": "N/A"},
        )
        headline_id = await store.save(record)

        assert headline_id == record.headline_id
        assert await store.get(headline_id) == record
        assert await store.get("missing") is None
        assert len(store) == 1
        await store.close()


class TestCreateStore:
    def test_memory_is_the_default(self):
        assert isinstance(create_store(Config()), InMemoryHeadlineStore)

    def test_postgres_requires_dsn(self):
        cfg = Config.model_validate({"storage": {"backend": "postgres", "dsn": ""}})
        with pytest.raises(StorageError, match="storage.dsn"):
            create_store(cfg)
