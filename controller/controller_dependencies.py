# controller/controller_dependencies.py
from typing import Optional
from fastapi import Header
from config.settings import settings
from core.search_config import SearchConfig
from model.search import Caller
from repository.item_repository import ItemRepository
from repository.search_index_repository import SearchIndexRepository
from service.search_service import SearchService


def get_search_service() -> SearchService:
    auth = None
    if settings.OPENSEARCH_USERNAME:
        auth = (settings.OPENSEARCH_USERNAME, settings.OPENSEARCH_PASSWORD or "")
    _engine = SearchIndexRepository(
        settings.OPENSEARCH_URL,
        auth=auth,
        timeout=settings.OPENSEARCH_TIMEOUT_SECONDS,
    )
    _items = ItemRepository()
    return SearchService(SearchConfig.from_settings(settings), _engine, _items)


async def get_caller(
    user_id: Optional[int] = Header(default=None, alias="X-User-Id"),
) -> Optional[Caller]:
    # The gateway in front of this service authenticates and forwards the id.
    return Caller(id=user_id) if user_id is not None else None
