# util/functions.py
from datetime import datetime, timezone
from typing import Optional, Sequence
from util.constants import HIGHLIGHT_SEPARATOR


def as_utc(value: datetime) -> datetime:
    """
    - Naive datetimes are taken to be UTC.
    - Aware datetimes are converted to UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def join_fragments(fragments: Optional[Sequence[str]]) -> Optional[str]:
    """
    Join highlight fragments into one excerpt; None when there is nothing to show.
    """
    parts = [f for f in fragments or [] if f]
    if not parts:
        return None
    return HIGHLIGHT_SEPARATOR.join(parts)


def strip_prefix(value: str, prefix: str) -> str:
    return value[len(prefix) :] if value.startswith(prefix) else value
