# model/search.py
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class SortMode(str, Enum):
    relevance = "relevance"
    comments = "comments"
    sats = "sats"
    recent = "recent"


class ContentType(str, Enum):
    all = "all"
    posts = "posts"
    comments = "comments"
    bookmarks = "bookmarks"


class TimeWindow(str, Enum):
    day = "day"
    week = "week"
    month = "month"
    year = "year"
    forever = "forever"
    custom = "custom"


class Cursor(BaseModel):
    offset: int = Field(default=0, ge=0)
    time: datetime


class Caller(BaseModel):
    id: int


class Item(BaseModel):
    """
    A store-of-record row. Columns we do not name are carried through untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    title: str | None = None
    text: str | None = None
    url: str | None = None
    parentId: int | None = None
    userId: int | None = None
    subName: str | None = None
    status: str | None = None
    createdAt: datetime | None = None
    ncomments: int = 0
    wvotes: float = 0
    meBookmark: bool = False

    # Set on the way out of a search; never stored.
    searchTitle: str | None = None
    searchText: str | None = None


class ItemsPage(BaseModel):
    items: list[Item]
    cursor: str | None = None
