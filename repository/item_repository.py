# repository/item_repository.py
import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple
import asyncpg
from config.database import get_pool
from model.search import Item
from util.errors import ItemStoreError
from util.timing import timed
import logging

logger = logging.getLogger(__name__)

# closed pools and acquire timeouts surface as InterfaceError / TimeoutError
STORE_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    asyncio.TimeoutError,
    OSError,
)

# r carries the engine rank next to each id; a plain IN (...) would lose it.
RANKED_ITEMS_SQL = """
    WITH r(id, rank) AS (
        SELECT * FROM unnest($1::int[], $2::int[])
    )
    SELECT "Item".*, r.rank,
           ("Bookmark"."itemId" IS NOT NULL) AS "meBookmark"
    FROM "Item"
    JOIN r ON "Item".id = r.id
    LEFT JOIN "Bookmark"
           ON "Bookmark"."itemId" = "Item".id
          AND "Bookmark"."userId" = $3
    ORDER BY r.rank ASC
"""

ITEM_BY_ID_SQL = 'SELECT "Item".* FROM "Item" WHERE "Item".id = $1'


class ItemRepository:
    """
    Read-only access to the "Item" table, the store of record behind search.

    Every asyncpg / connection failure surfaces as ItemStoreError so the search
    service can degrade without knowing about the driver.
    """

    def __init__(self, pool: Optional[asyncpg.Pool] = None) -> None:
        self._pool_override = pool

    async def _pool(self) -> asyncpg.Pool:
        return self._pool_override or await get_pool()

    async def fetch_ranked(
        self, ranked: Sequence[Tuple[int, int]], *, caller_id: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Batch fetch by id. Each row comes back with its `rank`.
        `meBookmark` is only ever true for an identified caller.
        """
        if not ranked:
            return []
        ids = [i for i, _ in ranked]
        ranks = [r for _, r in ranked]
        try:
            pool = await self._pool()
            with timed(logger, "store.fetch_ranked", n=len(ids)) as fields:
                rows = await pool.fetch(RANKED_ITEMS_SQL, ids, ranks, caller_id)
                fields["rows"] = len(rows)
        except STORE_ERRORS as e:
            logger.error("store.fetch_ranked.error err=%s", type(e).__name__)
            raise ItemStoreError("Item lookup failed") from e
        return [dict(r) for r in rows]

    async def get(self, item_id: int) -> Optional[Item]:
        try:
            pool = await self._pool()
            with timed(logger, "store.get", id=item_id):
                row = await pool.fetchrow(ITEM_BY_ID_SQL, item_id)
        except STORE_ERRORS as e:
            logger.error("store.get.error id=%s err=%s", item_id, type(e).__name__)
            raise ItemStoreError("Item lookup failed") from e
        return Item.model_validate(dict(row)) if row is not None else None
