# util/cursor.py
import base64
import binascii
from datetime import datetime, timezone
from typing import Optional
from pydantic import ValidationError
from model.search import Cursor
from util.enums import ErrorMessage
from util.errors import AppError
from util.functions import as_utc


def new_cursor(now: Optional[datetime] = None) -> Cursor:
    return Cursor(offset=0, time=as_utc(now or datetime.now(timezone.utc)))


def decode_cursor(token: Optional[str]) -> Cursor:
    """
    Opaque token -> Cursor. No token starts a new paging session frozen at "now".
    """
    if not token:
        return new_cursor()
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
        cursor = Cursor.model_validate_json(raw)
    except (ValueError, binascii.Error, ValidationError):
        raise AppError.of(ErrorMessage.INVALID_CURSOR) from None
    return cursor.model_copy(update={"time": as_utc(cursor.time)})


def encode_cursor(cursor: Cursor) -> str:
    return base64.urlsafe_b64encode(cursor.model_dump_json().encode("utf-8")).decode(
        "ascii"
    )


def next_cursor_encoded(cursor: Cursor, page_size: int) -> str:
    # Same frozen time, next window
    return encode_cursor(
        Cursor(offset=cursor.offset + page_size, time=cursor.time)
    )
