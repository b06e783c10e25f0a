# core/reconciler.py
from typing import Any, Dict, List, Mapping, Optional, Sequence
from core.entities import RankedHit
from model.search import Item
from repository.item_repository import ItemRepository
from util.functions import join_fragments
from util.types import EngineHit
import logging

logger = logging.getLogger(__name__)


def _hit_id(hit: EngineHit) -> Optional[int]:
    source = hit.get("_source") or {}
    raw = source.get("id", hit.get("_id"))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def hits_from_response(body: Mapping[str, Any]) -> List[RankedHit]:
    """
    Engine response -> RankedHit list in engine order.
    Hits without a usable id are skipped but keep their rank slot.
    """
    raw_hits: List[EngineHit] = (body.get("hits") or {}).get("hits") or []
    out: List[RankedHit] = []
    for rank, hit in enumerate(raw_hits):
        hid = _hit_id(hit) if isinstance(hit, dict) else None
        if hid is None:
            logger.warning("reconcile.hit.no_id rank=%d", rank)
            continue
        hl = hit.get("highlight") or {}
        out.append(
            RankedHit(
                id=hid,
                rank=rank,
                title_highlight=list(hl.get("title") or []),
                text_highlight=list(hl.get("text") or []),
            )
        )
    return out


def _with_highlights(row: Dict[str, Any], hit: Optional[RankedHit]) -> Item:
    item = Item.model_validate(row)
    title_hl = hit.title_highlight if hit else []
    item.searchTitle = title_hl[0] if title_hl else item.title
    item.searchText = join_fragments(hit.text_highlight if hit else None)
    return item


async def reconcile(
    hits: Sequence[RankedHit],
    store: ItemRepository,
    caller_id: Optional[int] = None,
) -> List[Item]:
    """
    Fetch the records behind `hits` from the store of record, in engine order.

    The store has no notion of relevance, so the rank travels with each id and
    rows are put back in rank order here. Ids the store no longer knows about
    are dropped, which can leave the page short.
    """
    if not hits:
        return []

    rows = await store.fetch_ranked(
        [(h.id, h.rank) for h in hits], caller_id=caller_id
    )
    by_id = {h.id: h for h in hits}
    rows = sorted(rows, key=lambda r: r["rank"])

    items = [_with_highlights(dict(r), by_id.get(r["id"])) for r in rows]
    if len(items) < len(hits):
        logger.info("reconcile.missing hits=%d items=%d", len(hits), len(items))
    return items
