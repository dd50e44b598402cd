"""
Tag service - global, normalized labels shared by every user.

Tags are created lazily on first use and reused afterwards. The unique index
on ``tags.title`` decides races between concurrent creators of the same title.
"""

import logging
from typing import Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api.validation import MAX_ID
from app.core.exceptions import ValidationError, NotFoundError
from app.models.tag import Tag

logger = logging.getLogger(__name__)

TAGS_NOT_FOUND_MESSAGE = "One or more tags not found"


def normalize_tag_title(raw_title) -> str:
    """Trim and lower-case a tag title, rejecting blank input."""
    if not isinstance(raw_title, str) or not raw_title.strip():
        raise ValidationError("Tag title is required")
    return raw_title.strip().lower()


class TagService:
    """Service for listing, creating and resolving tags."""

    def __init__(self, db: Session):
        self.db = db

    def list_tags(self) -> List[Tag]:
        """All tags, ordered by title in plain code-point order."""
        tags = self.db.query(Tag).all()
        # Sorted here rather than in SQL so the order does not depend on
        # the database collation.
        return sorted(tags, key=lambda tag: tag.title)

    def get_by_title(self, title: str) -> Optional[Tag]:
        return self.db.query(Tag).filter(Tag.title == title).first()

    def create_or_get(self, raw_title) -> Tuple[Tag, bool]:
        """
        Return the tag for ``raw_title``, creating it if needed.

        Returns:
            (tag, created) where ``created`` is False when the tag already existed

        Raises:
            ValidationError: If the title is empty after trimming
        """
        title = normalize_tag_title(raw_title)

        existing = self.get_by_title(title)
        if existing:
            return existing, False

        tag = Tag(title=title)
        self.db.add(tag)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request inserted the same title first; use its row.
            self.db.rollback()
            winner = self.get_by_title(title)
            if winner is None:
                raise
            logger.info(f"Tag '{title}' was created concurrently, reusing id {winner.id}")
            return winner, False

        self.db.refresh(tag)
        logger.info(f"Created tag {tag.id} '{tag.title}'")
        return tag, True

    def resolve_ids(self, tag_ids: Iterable[int]) -> List[Tag]:
        """
        Load tags by id, preserving request order and dropping duplicates.

        Raises:
            NotFoundError: If any id does not match an existing tag
        """
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return []

        # Ids outside the column range can never match and some drivers
        # refuse to bind them.
        lookup_ids = [tag_id for tag_id in unique_ids if 1 <= tag_id <= MAX_ID]
        tags = self.db.query(Tag).filter(Tag.id.in_(lookup_ids)).all() if lookup_ids else []
        if len(tags) != len(unique_ids):
            found = {tag.id for tag in tags}
            missing = [tag_id for tag_id in unique_ids if tag_id not in found]
            logger.info(f"Unknown tag ids requested: {missing}")
            raise NotFoundError(TAGS_NOT_FOUND_MESSAGE)

        by_id = {tag.id: tag for tag in tags}
        return [by_id[tag_id] for tag_id in unique_ids]
