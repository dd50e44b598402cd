from datetime import datetime
from typing import List, Optional
from app.models.content import ContentType
from app.schemas.base import CamelModel
from app.schemas.tag import Tag, TagSummary
from app.schemas.user import UserPublic


class ContentCreate(CamelModel):
    # Presence and enum membership are checked by the content service so the
    # same rules apply to every caller.
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    link: Optional[str] = None
    tag_ids: Optional[List[int]] = None


class ContentUpdate(CamelModel):
    """Partial update; only fields present in the request body are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    link: Optional[str] = None
    tag_ids: Optional[List[int]] = None


class ContentTagsAttach(CamelModel):
    tag_ids: List[int]


class Content(CamelModel):
    id: int
    title: str
    description: str
    link: Optional[str] = None
    type: ContentType
    user_id: int
    created_at: datetime
    updated_at: datetime
    tags: List[Tag] = []
    user: UserPublic


class ContentHomeItem(CamelModel):
    """Lighter projection for the landing view: no owner block."""

    id: int
    type: ContentType
    title: str
    description: str
    link: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    tags: List[TagSummary] = []


class ContentResult(CamelModel):
    message: str
    content: Content


class ContentDetail(CamelModel):
    content: Content


class ContentList(CamelModel):
    count: int
    contents: List[Content]


class ContentTypeList(CamelModel):
    type: ContentType
    count: int
    contents: List[Content]


class ContentHomeList(CamelModel):
    count: int
    contents: List[ContentHomeItem]


class Message(CamelModel):
    message: str
