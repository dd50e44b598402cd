from app.schemas.tag import Tag, TagSummary, TagCreate, TagList, TagCreateResult
from app.schemas.user import (
    UserSignup,
    UserLogin,
    UserPublic,
    AuthResult,
    CurrentUser,
)
from app.schemas.content import (
    Content,
    ContentCreate,
    ContentUpdate,
    ContentTagsAttach,
    ContentHomeItem,
    ContentResult,
    ContentDetail,
    ContentList,
    ContentTypeList,
    ContentHomeList,
    Message,
)

__all__ = [
    "Tag",
    "TagSummary",
    "TagCreate",
    "TagList",
    "TagCreateResult",
    "UserSignup",
    "UserLogin",
    "UserPublic",
    "AuthResult",
    "CurrentUser",
    "Content",
    "ContentCreate",
    "ContentUpdate",
    "ContentTagsAttach",
    "ContentHomeItem",
    "ContentResult",
    "ContentDetail",
    "ContentList",
    "ContentTypeList",
    "ContentHomeList",
    "Message",
]
