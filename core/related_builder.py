# core/related_builder.py
from typing import Any, Awaitable, Callable, Dict, List, Optional
from core.entities import (
    EmbeddingScoring,
    LexicalScoring,
    ScoringStrategy,
    SearchQueryDocument,
)
from core.search_config import SearchConfig, neural_clauses
from model.search import Cursor, Item
from util.constants import EXCLUDED_SOURCE_FIELDS, ItemStatus
from util.types import ItemRef
import logging

logger = logging.getLogger(__name__)

ItemLookup = Callable[[int], Awaitable[Optional[Item]]]

DEFAULT_MIN_MATCH = "10%"
MIN_WVOTES = 0.2


def _more_like_this(
    config: SearchConfig,
    *,
    title: Optional[str],
    item_id: Optional[int],
    min_match: Optional[str],
) -> Dict[str, Any]:
    like: List[Any] = []
    if item_id:
        like.append(ItemRef(_index=config.index, _id=str(item_id)))
    if title:
        like.append(title)

    return {
        "more_like_this": {
            "fields": ["title", "text"],
            "like": like,
            "min_term_freq": 1,
            "min_doc_freq": 1,
            "max_doc_freq": 5,
            "min_word_length": 2,
            "max_query_terms": 25,
            "minimum_should_match": min_match or DEFAULT_MIN_MATCH,
            "boost_terms": 100,
        }
    }


async def _embedding_strategy(
    config: SearchConfig,
    *,
    title: Optional[str],
    item_id: Optional[int],
    k: int,
    lookup: ItemLookup,
) -> Optional[EmbeddingScoring]:
    title_query = text_query = title
    if item_id:
        item = await lookup(item_id)
        if item is not None:
            title_query = item.title or item.text
            text_query = item.text or item.title
        else:
            logger.warning("related.lookup.missing id=%s", item_id)

    if not title_query or not text_query:
        return None

    # The title embedding is queried with the body and vice versa.
    return EmbeddingScoring(
        neural=neural_clauses(config, title_query=text_query, text_query=title_query, k=k)
    )


def _filters(item_id: Optional[int], min_match: Optional[str]) -> List[Dict[str, Any]]:
    must_not: List[Dict[str, Any]] = [{"exists": {"field": "parentId"}}]
    if item_id:
        must_not.append({"term": {"id": item_id}})

    return [
        {
            "bool": {
                "should": [
                    {"match": {"status": ItemStatus.ACTIVE}},
                    {"match": {"status": ItemStatus.NOSATS}},
                ],
                "minimum_should_match": 1,
                "must_not": must_not,
            }
        },
        {"range": {"wvotes": {"gte": 0 if min_match else MIN_WVOTES}}},
    ]


async def build_related_query(
    *,
    title: Optional[str],
    item_id: Optional[int],
    cursor: Cursor,
    page_size: int,
    min_match: Optional[str],
    lookup: ItemLookup,
    config: SearchConfig,
) -> Optional[SearchQueryDocument]:
    """
    Build a "more items like this one" query.

    The reference is an item id, a raw title, or both. Returns None when there
    is nothing to compare against, which callers turn into an empty page.

    Without a model id the engine's more_like_this does the work; with one, two
    neural clauses look for neighbours of the reference title and text.
    """
    title = (title or "").strip() or None
    if not item_id and not title:
        return None

    strategy: ScoringStrategy
    if config.neural_enabled:
        embedding = await _embedding_strategy(
            config,
            title=title,
            item_id=item_id,
            k=cursor.offset + page_size,
            lookup=lookup,
        )
        if embedding is None:
            return None
        strategy = embedding
    else:
        strategy = LexicalScoring(
            clauses=[
                _more_like_this(
                    config, title=title, item_id=item_id, min_match=min_match
                )
            ],
            occur="should",
        )

    query = {
        "function_score": {
            "query": {
                "bool": {
                    **strategy.bool_clauses(),
                    "filter": _filters(item_id, min_match),
                }
            },
            "functions": [
                {
                    "field_value_factor": {
                        "field": "wvotes",
                        "modifier": "none",
                        "factor": 1,
                        "missing": 0,
                    }
                }
            ],
            "boost_mode": "multiply",
        }
    }

    return SearchQueryDocument(
        index=config.index,
        body={
            "from": cursor.offset,
            "size": page_size,
            "_source": {"excludes": list(EXCLUDED_SOURCE_FIELDS)},
            "query": query,
        },
    )
