# core/search_builder.py
from datetime import datetime, timedelta
from typing import Any, Dict, Final, List, Optional, Tuple
from core.entities import (
    HybridScoring,
    LexicalScoring,
    ParsedQuery,
    ScoringStrategy,
    SearchQueryDocument,
)
from core.search_config import SearchConfig, neural_clauses
from model.search import ContentType, Cursor, SortMode, TimeWindow
from util.constants import (
    EXCLUDED_SOURCE_FIELDS,
    HIGHLIGHT_TAG,
    ItemStatus,
)
from util.functions import as_utc, strip_prefix

TEXT_FIELDS: Final[List[str]] = ["title", "text"]
WEIGHTED_TEXT_FIELDS: Final[List[str]] = ["title^100", "text"]

WINDOW_LENGTHS: Final[Dict[TimeWindow, timedelta]] = {
    TimeWindow.day: timedelta(days=1),
    TimeWindow.week: timedelta(weeks=1),
    TimeWindow.month: timedelta(days=30),
    TimeWindow.year: timedelta(days=365),
}

# sort -> (ranking field, modifier, boost_mode)
RANKING: Final[Dict[SortMode, Tuple[str, str, str]]] = {
    SortMode.relevance: ("wvotes", "none", "multiply"),
    SortMode.comments: ("ncomments", "square", "multiply"),
    SortMode.sats: ("sats", "none", "multiply"),
    SortMode.recent: ("createdAt", "square", "replace"),
}


def window_start(when: TimeWindow, now: datetime) -> Optional[datetime]:
    """
    Lower bound for a preset window ending at `now`; None means unbounded.
    """
    length = WINDOW_LENGTHS.get(when)
    return now - length if length else None


def created_at_range(
    when: TimeWindow,
    cursor: Cursor,
    window_from: Optional[datetime] = None,
    window_to: Optional[datetime] = None,
) -> Dict[str, str]:
    """
    The upper bound never passes the cursor time, so items created while the
    caller pages through results stay out of later pages.
    """
    upper = cursor.time
    if when == TimeWindow.custom:
        lower = as_utc(window_from) if window_from else None
        if window_to:
            upper = min(as_utc(window_to), cursor.time)
    else:
        lower = window_start(when, cursor.time)

    bounds = {"lte": upper.isoformat()}
    if lower is not None:
        bounds["gte"] = lower.isoformat()
    return bounds


def _content_type_filters(
    what: ContentType, caller_id: Optional[int]
) -> List[Dict[str, Any]]:
    if what == ContentType.posts:
        return [{"bool": {"must_not": {"exists": {"field": "parentId"}}}}]
    if what == ContentType.comments:
        return [{"bool": {"must": {"exists": {"field": "parentId"}}}}]
    if what == ContentType.bookmarks and caller_id is not None:
        return [{"match": {"bookmarkedBy": caller_id}}]
    return []


def _directive_filters(parsed: ParsedQuery) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    if parsed.author_directive:
        name = parsed.author_directive[1:].lower()
        out.append(
            {
                "wildcard": {
                    "user.name": {"value": f"*{name}*", "case_insensitive": True}
                }
            }
        )
    if parsed.territory_directive:
        out.append({"match": {"sub.name": parsed.territory_directive[1:]}})
    return out


def _visibility_filter(caller_id: Optional[int]) -> Dict[str, Any]:
    should: List[Dict[str, Any]] = [
        {"match": {"status": ItemStatus.ACTIVE}},
        {"match": {"status": ItemStatus.NOSATS}},
    ]
    if caller_id is not None:
        # callers always see their own items, whatever the status
        should.append({"match": {"userId": caller_id}})
    return {"bool": {"should": should, "minimum_should_match": 1}}


def query_text_for(parsed: ParsedQuery) -> Tuple[str, bool]:
    """
    Fold a url: directive into the text to match.
    Returns (query_text, url_only) where url_only means the url was the only term.
    """
    text = parsed.free_text.strip()
    if not parsed.url_directive:
        return text, False

    domain = strip_prefix(strip_prefix(parsed.url_directive, "url:"), "www.")
    if not domain:
        return text, False
    if not text:
        return f"{domain} www.{domain}", True
    return f"{text} {domain}", False


def _lexical_clauses(
    parsed: ParsedQuery, query_text: str, url_only: bool, sort: SortMode
) -> List[Dict[str, Any]]:
    clauses: List[Dict[str, Any]] = [
        {"multi_match": {"query": phrase, "type": "phrase", "fields": TEXT_FIELDS}}
        for phrase in parsed.quoted_phrases
        if phrase.strip()
    ]
    if not query_text:
        return clauses

    clauses.append(
        {
            "multi_match": {
                "query": query_text,
                "type": "best_fields",
                "fields": WEIGHTED_TEXT_FIELDS,
                "minimum_should_match": 1 if url_only else "100%",
                "boost": 1000,
            }
        }
    )
    if sort == SortMode.recent and not url_only:
        # recency replaces relevance, so only exact phrase hits are let through
        clauses.append(
            {
                "multi_match": {
                    "query": query_text,
                    "type": "phrase",
                    "fields": WEIGHTED_TEXT_FIELDS,
                    "boost": 1000,
                }
            }
        )
    else:
        clauses.append(
            {
                "multi_match": {
                    "query": query_text,
                    "type": "most_fields",
                    "fields": WEIGHTED_TEXT_FIELDS,
                    "fuzziness": "AUTO",
                    "prefix_length": 3,
                    "minimum_should_match": 1 if url_only else "60%",
                }
            }
        )
    return clauses


def choose_strategy(
    parsed: ParsedQuery,
    *,
    query_text: str,
    url_only: bool,
    sort: SortMode,
    cursor: Cursor,
    config: SearchConfig,
) -> ScoringStrategy:
    lexical = _lexical_clauses(parsed, query_text, url_only, sort)
    if query_text and config.neural_enabled and sort != SortMode.recent:
        return HybridScoring(
            neural=neural_clauses(
                config,
                title_query=query_text,
                text_query=query_text,
                k=cursor.offset + config.page_size,
            ),
            lexical=lexical,
        )
    return LexicalScoring(clauses=lexical)


def _ranking_functions(sort: SortMode) -> List[Dict[str, Any]]:
    field, modifier, _ = RANKING[sort]
    functions: List[Dict[str, Any]] = [
        {"field_value_factor": {"field": field, "modifier": modifier, "factor": 1.2}}
    ]
    if sort != SortMode.recent:
        # small nudges toward discussed and fresh items
        functions.append(
            {"field_value_factor": {"field": "ncomments", "modifier": "ln1p", "factor": 1}}
        )
        functions.append(
            {"field_value_factor": {"field": "createdAt", "modifier": "log1p", "factor": 1}}
        )
    return functions


def _highlight() -> Dict[str, Any]:
    tags = {"pre_tags": [HIGHLIGHT_TAG], "post_tags": [HIGHLIGHT_TAG]}
    return {
        "fields": {
            "title": {"number_of_fragments": 0, **tags},
            "text": {"number_of_fragments": 5, "order": "score", **tags},
        }
    }


def build_search_query(
    parsed: ParsedQuery,
    *,
    sort: SortMode = SortMode.relevance,
    what: ContentType = ContentType.all,
    when: TimeWindow = TimeWindow.forever,
    window_from: Optional[datetime] = None,
    window_to: Optional[datetime] = None,
    cursor: Cursor,
    caller_id: Optional[int] = None,
    config: SearchConfig,
) -> Optional[SearchQueryDocument]:
    """
    Compile a parsed query into an engine request.

    Returns None when there is nothing to search for, or when bookmarks are
    asked for without a caller (bookmarks are per caller).
    """
    if parsed.is_empty:
        return None
    if what == ContentType.bookmarks and caller_id is None:
        return None

    query_text, url_only = query_text_for(parsed)
    strategy = choose_strategy(
        parsed,
        query_text=query_text,
        url_only=url_only,
        sort=sort,
        cursor=cursor,
        config=config,
    )
    scored = strategy.bool_clauses()

    _, _, boost_mode = RANKING[sort]
    if not scored:
        # directive-only: nothing to score, order purely by the ranking field
        boost_mode = "replace"

    filters = [
        *_content_type_filters(what, caller_id),
        *_directive_filters(parsed),
        _visibility_filter(caller_id),
        {"range": {"createdAt": created_at_range(when, cursor, window_from, window_to)}},
        {"range": {"wvotes": {"gte": 0}}},
    ]

    body = {
        "from": cursor.offset,
        "size": config.page_size,
        "_source": {"excludes": list(EXCLUDED_SOURCE_FIELDS)},
        "query": {
            "function_score": {
                "query": {"bool": {**scored, "filter": filters}},
                "functions": _ranking_functions(sort),
                "boost_mode": boost_mode,
            }
        },
        "highlight": _highlight(),
    }

    return SearchQueryDocument(
        index=config.index,
        body=body,
        search_pipeline=config.search_pipeline
        if isinstance(strategy, HybridScoring)
        else None,
    )
