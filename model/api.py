# model/api.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from model.search import ContentType, SortMode, TimeWindow


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    q: str | None = None
    cursor: str | None = None
    sort: SortMode = SortMode.relevance
    what: ContentType = ContentType.all
    when: TimeWindow = TimeWindow.forever
    # Only read when `when` is "custom"
    windowFrom: datetime | None = Field(default=None, alias="from")
    windowTo: datetime | None = Field(default=None, alias="to")


class RelatedRequest(BaseModel):
    title: str | None = None
    id: int | None = None
    cursor: str | None = None
    limit: int | None = Field(default=None, ge=1, le=100)
    minMatch: str | None = None
