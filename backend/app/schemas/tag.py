from datetime import datetime
from typing import List, Optional
from app.schemas.base import CamelModel


class TagCreate(CamelModel):
    # Validated and normalized by the tag service
    title: Optional[str] = None


class TagSummary(CamelModel):
    id: int
    title: str


class Tag(TagSummary):
    created_at: Optional[datetime] = None


class TagList(CamelModel):
    count: int
    tags: List[Tag]


class TagCreateResult(CamelModel):
    message: str
    tag: Tag
