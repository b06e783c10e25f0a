# service/search_service.py
from datetime import datetime
from typing import List, Optional
from core.entities import SearchQueryDocument
from core.query_parser import parse_query
from core.reconciler import hits_from_response, reconcile
from core.related_builder import build_related_query
from core.search_builder import build_search_query
from core.search_config import SearchConfig
from model.search import (
    Caller,
    ContentType,
    Cursor,
    Item,
    ItemsPage,
    SortMode,
    TimeWindow,
)
from repository.item_repository import ItemRepository
from repository.search_index_repository import SearchIndexRepository
from util.cursor import decode_cursor, next_cursor_encoded
from util.enums import ErrorMessage
from util.errors import AppError, ItemStoreError, SearchEngineError
from util.functions import as_utc
import logging

logger = logging.getLogger(__name__)


def _empty_page() -> ItemsPage:
    return ItemsPage(items=[], cursor=None)


class SearchService:
    """
    Entry points for full-text search and related-item lookups.

    Search is best effort: engine or store failures are logged and answered
    with an empty, final page instead of an error.
    """

    def __init__(
        self,
        config: SearchConfig,
        engine: SearchIndexRepository,
        items: ItemRepository,
    ) -> None:
        self._config = config
        self._engine = engine
        self._items = items

    async def search(
        self,
        q: Optional[str],
        *,
        cursor: Optional[str] = None,
        sort: SortMode = SortMode.relevance,
        what: ContentType = ContentType.all,
        when: TimeWindow = TimeWindow.forever,
        window_from: Optional[datetime] = None,
        window_to: Optional[datetime] = None,
        caller: Optional[Caller] = None,
    ) -> ItemsPage:
        decoded = decode_cursor(cursor)
        caller_id = caller.id if caller else None

        if (
            when == TimeWindow.custom
            and window_from
            and window_to
            and as_utc(window_from) > as_utc(window_to)
        ):
            raise AppError.of(ErrorMessage.INVALID_TIME_WINDOW)

        doc = build_search_query(
            parse_query(q or ""),
            sort=sort,
            what=what,
            when=when,
            window_from=window_from,
            window_to=window_to,
            cursor=decoded,
            caller_id=caller_id,
            config=self._config,
        )
        if doc is None:
            logger.info(
                "search.shortcircuit what=%s authed=%s", what.value, caller_id is not None
            )
            return _empty_page()

        items = await self._run(doc, caller_id, op="search")
        return self._page(items, decoded, self._config.page_size)

    async def related(
        self,
        *,
        title: Optional[str] = None,
        item_id: Optional[int] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
        min_match: Optional[str] = None,
        caller: Optional[Caller] = None,
    ) -> ItemsPage:
        decoded = decode_cursor(cursor)
        caller_id = caller.id if caller else None
        page_size = limit or self._config.page_size

        try:
            doc = await build_related_query(
                title=title,
                item_id=item_id,
                cursor=decoded,
                page_size=page_size,
                min_match=min_match,
                lookup=self._items.get,
                config=self._config,
            )
        except ItemStoreError:
            logger.error("related.lookup.error id=%s", item_id)
            return _empty_page()

        if doc is None:
            logger.info("related.shortcircuit id=%s", item_id)
            return _empty_page()

        items = await self._run(doc, caller_id, op="related")
        return self._page(items, decoded, page_size)

    async def _run(
        self, doc: SearchQueryDocument, caller_id: Optional[int], *, op: str
    ) -> List[Item]:
        # engine first, store second: the store needs the engine's ids
        try:
            body = await self._engine.search(doc)
        except SearchEngineError as e:
            logger.error("%s.engine.error err=%s", op, e)
            return []

        hits = hits_from_response(body)
        try:
            items = await reconcile(hits, self._items, caller_id=caller_id)
        except ItemStoreError as e:
            logger.error("%s.store.error err=%s", op, e)
            return []

        logger.info(
            "%s.ok offset=%d hits=%d items=%d", op, doc.offset, len(hits), len(items)
        )
        return items

    @staticmethod
    def _page(items: List[Item], cursor: Cursor, page_size: int) -> ItemsPage:
        # A full page is taken to mean there may be more; a short one ends paging.
        if len(items) == page_size:
            return ItemsPage(items=items, cursor=next_cursor_encoded(cursor, page_size))
        return ItemsPage(items=items, cursor=None)
