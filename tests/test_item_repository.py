import asyncio

import asyncpg
import pytest

from core.search_config import SearchConfig
from repository.item_repository import ItemRepository
from service.search_service import SearchService
from util.errors import ItemStoreError

from fakes import FakeEngine


class FakePool:
    def __init__(self, rows=None, row=None, error=None):
        self.rows = rows or []
        self.row = row
        self.error = error
        self.calls = []

    async def fetch(self, sql, *args):
        self.calls.append((sql, args))
        if self.error:
            raise self.error
        return self.rows

    async def fetchrow(self, sql, *args):
        self.calls.append((sql, args))
        if self.error:
            raise self.error
        return self.row


class TestItemRepository:

    async def test_fetch_ranked_passes_ids_and_ranks(self):
        pool = FakePool(rows=[{"id": 3, "rank": 1}, {"id": 7, "rank": 0}])

        rows = await ItemRepository(pool).fetch_ranked([(7, 0), (3, 1)], caller_id=4)

        sql, args = pool.calls[0]
        assert args == ([7, 3], [0, 1], 4)
        assert "unnest" in sql
        assert "ORDER BY r.rank" in sql
        assert rows == [{"id": 3, "rank": 1}, {"id": 7, "rank": 0}]

    async def test_fetch_ranked_empty_skips_query(self):
        pool = FakePool()

        assert await ItemRepository(pool).fetch_ranked([]) == []
        assert pool.calls == []

    async def test_get_returns_item(self):
        pool = FakePool(row={"id": 42, "title": "Lightning", "text": None})

        item = await ItemRepository(pool).get(42)

        assert item.id == 42
        assert item.title == "Lightning"

    async def test_get_missing(self):
        assert await ItemRepository(FakePool(row=None)).get(1) is None

    async def test_driver_errors_are_wrapped(self):
        pool = FakePool(error=asyncpg.PostgresError("boom"))

        with pytest.raises(ItemStoreError):
            await ItemRepository(pool).fetch_ranked([(1, 0)])
        with pytest.raises(ItemStoreError):
            await ItemRepository(pool).get(1)

    async def test_connection_errors_are_wrapped(self):
        pool = FakePool(error=ConnectionRefusedError())

        with pytest.raises(ItemStoreError):
            await ItemRepository(pool).fetch_ranked([(1, 0)])

    @pytest.mark.parametrize(
        "error",
        [asyncpg.InterfaceError("pool is closing"), asyncio.TimeoutError()],
    )
    async def test_pool_errors_are_wrapped(self, error):
        pool = FakePool(error=error)

        with pytest.raises(ItemStoreError):
            await ItemRepository(pool).fetch_ranked([(1, 0)])
        with pytest.raises(ItemStoreError):
            await ItemRepository(pool).get(1)

    async def test_closing_pool_degrades_search_to_empty(self):
        pool = FakePool(error=asyncpg.InterfaceError("pool is closing"))
        service = SearchService(
            SearchConfig(index="item"), FakeEngine(ids=[1]), ItemRepository(pool)
        )

        page = await service.search("bitcoin")

        assert page.items == []
        assert page.cursor is None
