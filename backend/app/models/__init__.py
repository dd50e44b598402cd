from .user import User
from .tag import Tag
from .content import Content, ContentType, content_tags

__all__ = [
    "User",
    "Tag",
    "Content",
    "ContentType",
    "content_tags",
]
