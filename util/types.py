# util/types.py
from typing import Any, Dict, List, TypedDict


# Flow: Narrow types for the parts of an engine response we read.
class HitHighlight(TypedDict, total=False):
    title: List[str]
    text: List[str]


class EngineHit(TypedDict, total=False):
    _id: str
    _score: float
    _source: Dict[str, Any]
    highlight: HitHighlight


class ItemRef(TypedDict):
    _index: str
    _id: str
