# controller/search_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, Request, status
from config.rate_limit import SEARCH_LIMIT, limiter
from controller.controller_dependencies import get_caller, get_search_service
from model.api import RelatedRequest, SearchRequest
from model.search import Caller, ItemsPage
from service.search_service import SearchService
from util.constants import InternalURIs

search_router = APIRouter()


@search_router.post(
    InternalURIs.SEARCH,
    response_model=ItemsPage,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(SEARCH_LIMIT)
async def search(
    request: Request,
    payload: SearchRequest,
    caller: Optional[Caller] = Depends(get_caller),
    service: SearchService = Depends(get_search_service),
) -> ItemsPage:
    return await service.search(
        payload.q,
        cursor=payload.cursor,
        sort=payload.sort,
        what=payload.what,
        when=payload.when,
        window_from=payload.windowFrom,
        window_to=payload.windowTo,
        caller=caller,
    )


@search_router.post(
    InternalURIs.RELATED,
    response_model=ItemsPage,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(SEARCH_LIMIT)
async def related(
    request: Request,
    payload: RelatedRequest,
    caller: Optional[Caller] = Depends(get_caller),
    service: SearchService = Depends(get_search_service),
) -> ItemsPage:
    return await service.related(
        title=payload.title,
        item_id=payload.id,
        cursor=payload.cursor,
        limit=payload.limit,
        min_match=payload.minMatch,
        caller=caller,
    )
