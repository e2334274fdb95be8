"""
MemoPad Backend — Memo Store Unit Tests
========================================

What:  Tests for the storage adapter against a real SQLite file.
Why:   Every route depends on these four operations behaving exactly.
How:   Each test gets a fresh database from the memo_store fixture; faults are
       injected with unittest.mock or by breaking the schema.

What we test:
    ✅ Empty table lists as an empty list
    ✅ Inserted memos are listed once each, in creation order
    ✅ Missing ids return None, never an error
    ✅ Concurrent inserts get distinct ids
    ✅ Deleted ids are not reused
    ✅ User text is bound, not spliced into SQL
    ✅ Preparation and execution failures raise different errors
"""

import asyncio

import pytest
from unittest.mock import patch
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError

from memopad.exceptions import (
    DatabaseError,
    StatementExecutionError,
    StatementPreparationError,
)


class TestMemoStoreReads:
    """Tests for list_all and get_by_id."""

    @pytest.mark.asyncio
    async def test_list_all_empty(self, memo_store):
        """Empty table is a normal outcome, not an error."""
        assert await memo_store.list_all() == []

    @pytest.mark.asyncio
    async def test_list_all_in_creation_order(self, memo_store):
        first = await memo_store.insert("buy milk")
        second = await memo_store.insert("call mom")

        memos = await memo_store.list_all()

        assert [(m.id, m.text) for m in memos] == [
            (first.id, "buy milk"),
            (second.id, "call mom"),
        ]

    @pytest.mark.asyncio
    async def test_get_by_id_found(self, memo_store):
        created = await memo_store.insert("water plants")

        memo = await memo_store.get_by_id(created.id)

        assert memo is not None
        assert memo.id == created.id
        assert memo.text == "water plants"

    @pytest.mark.asyncio
    async def test_get_by_id_missing_returns_none(self, memo_store):
        """An id that was never inserted is the not-found sentinel."""
        await memo_store.insert("something")
        assert await memo_store.get_by_id(9999) is None


class TestMemoStoreInsert:
    """Tests for insert."""

    @pytest.mark.asyncio
    async def test_insert_assigns_id(self, memo_store):
        memo = await memo_store.insert("buy milk")

        assert isinstance(memo.id, int)
        assert memo.text == "buy milk"

    @pytest.mark.asyncio
    async def test_insert_accepts_empty_text(self, memo_store):
        memo = await memo_store.insert("")
        assert (await memo_store.get_by_id(memo.id)).text == ""

    @pytest.mark.asyncio
    async def test_each_insert_listed_exactly_once(self, memo_store):
        texts = ["a", "b", "c", "a"]
        for t in texts:
            await memo_store.insert(t)

        memos = await memo_store.list_all()

        assert len(memos) == 4
        assert len({m.id for m in memos}) == 4
        assert [m.text for m in memos] == texts

    @pytest.mark.asyncio
    async def test_concurrent_inserts_get_distinct_ids(self, memo_store):
        texts = [f"memo {i}" for i in range(10)]

        created = await asyncio.gather(*(memo_store.insert(t) for t in texts))

        assert len({m.id for m in created}) == 10
        assert sorted(m.text for m in await memo_store.list_all()) == sorted(texts)

    @pytest.mark.asyncio
    async def test_text_is_bound_not_interpolated(self, memo_store):
        """SQL-looking text is stored verbatim and the table survives."""
        hostile = "x'); DROP TABLE memos; --"

        memo = await memo_store.insert(hostile)

        assert (await memo_store.get_by_id(memo.id)).text == hostile
        assert len(await memo_store.list_all()) == 1


class TestMemoStoreDelete:
    """Tests for delete."""

    @pytest.mark.asyncio
    async def test_delete_returns_removed_memo(self, memo_store):
        memo = await memo_store.insert("temporary")

        removed = await memo_store.delete(memo.id)

        assert removed == memo
        assert await memo_store.get_by_id(memo.id) is None

    @pytest.mark.asyncio
    async def test_delete_missing_returns_none(self, memo_store):
        assert await memo_store.delete(12345) is None

    @pytest.mark.asyncio
    async def test_deleted_id_is_not_reused(self, memo_store):
        await memo_store.insert("first")
        last = await memo_store.insert("second")
        await memo_store.delete(last.id)

        replacement = await memo_store.insert("third")

        assert replacement.id > last.id


class TestMemoStoreErrors:
    """Tests for error translation."""

    @pytest.mark.asyncio
    async def test_preparation_failure(self, memo_store):
        with patch(
            "memopad.services.memo_store.select",
            side_effect=ArgumentError("cannot build statement"),
        ):
            with pytest.raises(StatementPreparationError) as exc_info:
                await memo_store.list_all()

        assert exc_info.value.context["operation"] == "list_all"
        assert isinstance(exc_info.value, DatabaseError)

    @pytest.mark.asyncio
    async def test_insert_preparation_failure(self, memo_store):
        with patch(
            "memopad.services.memo_store.insert",
            side_effect=ArgumentError("cannot build statement"),
        ):
            with pytest.raises(StatementPreparationError):
                await memo_store.insert("never stored")

    @pytest.mark.asyncio
    async def test_execution_failure(self, memo_store):
        async with memo_store.engine.begin() as conn:
            await conn.execute(text("DROP TABLE memos"))

        with pytest.raises(StatementExecutionError) as exc_info:
            await memo_store.insert("no table")

        assert exc_info.value.context["operation"] == "insert"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_execution_failure_on_lookup(self, memo_store):
        async with memo_store.engine.begin() as conn:
            await conn.execute(text("DROP TABLE memos"))

        with pytest.raises(StatementExecutionError) as exc_info:
            await memo_store.get_by_id(1)

        assert exc_info.value.context["memo_id"] == 1


class TestMemoStoreLifecycle:
    """Tests for create_schema and ping."""

    @pytest.mark.asyncio
    async def test_create_schema_is_idempotent(self, memo_store):
        memo = await memo_store.insert("kept")

        await memo_store.create_schema()

        assert await memo_store.list_all() == [memo]

    @pytest.mark.asyncio
    async def test_ping(self, memo_store):
        assert await memo_store.ping() is True
