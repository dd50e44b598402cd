import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Table,
    Enum,
    Index,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base


class ContentType(str, enum.Enum):
    YOUTUBE = "youtube"
    TWITTER = "twitter"
    VIDEO = "video"
    ARTICLE = "article"
    PODCAST = "podcast"
    BOOK = "book"
    COURSE = "course"
    OTHER = "other"


# Many-to-many association table for contents and tags
content_tags = Table(
    "content_tags",
    Base.metadata,
    Column(
        "content_id",
        Integer,
        ForeignKey("contents.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    ),
)


class Content(Base):
    __tablename__ = "contents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    link = Column(String, nullable=True)
    type = Column(
        Enum(
            ContentType,
            name="content_type",
            native_enum=False,
            create_constraint=True,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="contents")
    tags = relationship("Tag", secondary=content_tags, back_populates="contents")

    __table_args__ = (
        Index("idx_contents_user_created", "user_id", "created_at"),
    )
