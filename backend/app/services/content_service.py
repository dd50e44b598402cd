"""
Content service - owner-scoped CRUD for saved links and notes.

Every lookup filters on ``(id, user_id)`` in a single query, so content owned
by somebody else behaves exactly like content that does not exist. Writes are
validated completely before anything is mutated and are committed as one
transaction.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, Query, selectinload, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import ValidationError, NotFoundError
from app.models.content import Content, ContentType
from app.models.tag import Tag
from app.services.tag_service import TagService, TAGS_NOT_FOUND_MESSAGE

logger = logging.getLogger(__name__)

CONTENT_NOT_FOUND_MESSAGE = "Content not found"
UPDATABLE_FIELDS = frozenset({"title", "description", "link", "type", "tag_ids"})


def parse_content_type(value) -> ContentType:
    """Coerce a raw value into a ContentType, rejecting anything unknown."""
    if isinstance(value, ContentType):
        return value
    try:
        return ContentType(value)
    except (ValueError, TypeError):
        raise ValidationError("Invalid content type")


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field.capitalize()} must be a non-empty string")
    return value


def _normalize_link(link) -> Optional[str]:
    if link is None or link == "":
        return None
    if not isinstance(link, str):
        raise ValidationError("Link must be a string")
    return link


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ContentService:
    """Service for a user's saved content and its tag associations."""

    def __init__(self, db: Session):
        self.db = db
        self.tags = TagService(db)

    # Queries

    def _owned(self, owner_id: int) -> Query:
        return self.db.query(Content).filter(Content.user_id == owner_id)

    def _owned_detailed(self, owner_id: int) -> Query:
        return self._owned(owner_id).options(
            selectinload(Content.tags), joinedload(Content.user)
        )

    def _get_owned(self, owner_id: int, content_id: int, detailed: bool = False) -> Content:
        query = self._owned_detailed(owner_id) if detailed else self._owned(owner_id)
        content = query.filter(Content.id == content_id).first()
        if content is None:
            raise NotFoundError(CONTENT_NOT_FOUND_MESSAGE)
        return content

    @staticmethod
    def _newest_first(query: Query) -> Query:
        return query.order_by(Content.created_at.desc(), Content.id.desc())

    def list_for_owner(
        self,
        owner_id: int,
        content_type: Optional[Any] = None,
        tag_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Content]:
        """
        List the owner's content, newest first.

        Args:
            owner_id: ID of the calling user
            content_type: Only content of this type
            tag_id: Only content associated with this tag
            search: Case-insensitive substring of the title or description

        Raises:
            ValidationError: If ``content_type`` is not a known content type
        """
        query = self._owned_detailed(owner_id)

        if content_type is not None:
            query = query.filter(Content.type == parse_content_type(content_type))

        if tag_id is not None:
            query = query.filter(Content.tags.any(Tag.id == tag_id))

        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.filter(
                or_(
                    Content.title.ilike(pattern, escape="\\"),
                    Content.description.ilike(pattern, escape="\\"),
                )
            )

        return self._newest_first(query).all()

    def list_home(self, owner_id: int) -> List[Content]:
        """Everything the owner saved, newest first, for the landing view."""
        query = self._owned(owner_id).options(selectinload(Content.tags))
        return self._newest_first(query).all()

    def list_by_type(
        self,
        owner_id: int,
        content_type: Any,
        tag_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Content]:
        return self.list_for_owner(
            owner_id, content_type=content_type, tag_id=tag_id, search=search
        )

    def get_by_id(self, owner_id: int, content_id: int) -> Content:
        return self._get_owned(owner_id, content_id, detailed=True)

    # Writes

    def _commit(self, attaching_tags: bool) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if attaching_tags:
                # A tag row vanished between validation and insert.
                raise NotFoundError(TAGS_NOT_FOUND_MESSAGE)
            raise
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def create(
        self,
        owner_id: int,
        title: Optional[str],
        description: Optional[str],
        content_type: Any,
        link: Optional[str] = None,
        tag_ids: Optional[Iterable[int]] = None,
    ) -> Content:
        """
        Create content owned by ``owner_id``.

        Raises:
            ValidationError: Missing title/description/type, or unknown type
            NotFoundError: Any of ``tag_ids`` does not exist; nothing is saved
        """
        if not title or not description or not content_type:
            raise ValidationError("Title, description, and type are required")

        content_type = parse_content_type(content_type)
        title = _require_text(title, "title")
        description = _require_text(description, "description")
        link = _normalize_link(link)
        tags = self.tags.resolve_ids(tag_ids) if tag_ids else []

        content = Content(
            user_id=owner_id,
            title=title,
            description=description,
            link=link,
            type=content_type,
        )
        content.tags = tags
        self.db.add(content)
        self._commit(attaching_tags=bool(tags))

        logger.info(
            f"User {owner_id} created content {content.id} ({content_type.value}) with {len(tags)} tags"
        )
        return self.get_by_id(owner_id, content.id)

    def update(self, owner_id: int, content_id: int, patch: Dict[str, Any]) -> Content:
        """
        Apply a partial update.

        Only keys present in ``patch`` are touched. A present ``tag_ids``
        (including an empty list or None) replaces the whole tag set.

        Raises:
            NotFoundError: Content missing or owned by someone else, or an
                unknown tag id; in either case nothing is changed
            ValidationError: Unknown type or blank title/description
        """
        content = self._get_owned(owner_id, content_id, detailed=True)
        patch = {key: value for key, value in patch.items() if key in UPDATABLE_FIELDS}

        # Validate everything before touching the row
        changes: Dict[str, Any] = {}
        if "type" in patch:
            changes["type"] = parse_content_type(patch["type"])
        if "title" in patch:
            changes["title"] = _require_text(patch["title"], "title")
        if "description" in patch:
            changes["description"] = _require_text(patch["description"], "description")
        if "link" in patch:
            changes["link"] = _normalize_link(patch["link"])

        replace_tags = "tag_ids" in patch
        new_tags: List[Tag] = []
        if replace_tags and patch["tag_ids"]:
            new_tags = self.tags.resolve_ids(patch["tag_ids"])

        for field, value in changes.items():
            setattr(content, field, value)
        if replace_tags:
            content.tags = new_tags
        if changes or replace_tags:
            content.updated_at = datetime.utcnow()

        self._commit(attaching_tags=bool(new_tags))

        if changes or replace_tags:
            updated_fields = sorted(changes) + (["tags"] if replace_tags else [])
            logger.info(
                f"User {owner_id} updated content {content_id} (fields: {updated_fields})"
            )
        return self.get_by_id(owner_id, content_id)

    def attach_tags(self, owner_id: int, content_id: int, tag_ids: Iterable[int]) -> Content:
        """Add tags to content; tags already attached are left as they are."""
        content = self._get_owned(owner_id, content_id, detailed=True)
        tags = self.tags.resolve_ids(tag_ids)

        attached = {tag.id for tag in content.tags}
        added = [tag for tag in tags if tag.id not in attached]
        if added:
            content.tags.extend(added)
            content.updated_at = datetime.utcnow()
        self._commit(attaching_tags=bool(added))

        logger.info(f"User {owner_id} attached {len(added)} tags to content {content_id}")
        return self.get_by_id(owner_id, content_id)

    def detach_tag(self, owner_id: int, content_id: int, tag_id: int) -> Content:
        """Remove one tag from content; detaching an absent tag is a no-op."""
        content = self._get_owned(owner_id, content_id, detailed=True)

        remaining = [tag for tag in content.tags if tag.id != tag_id]
        if len(remaining) != len(content.tags):
            content.tags = remaining
            content.updated_at = datetime.utcnow()
            self._commit(attaching_tags=False)
            logger.info(f"User {owner_id} detached tag {tag_id} from content {content_id}")

        return self.get_by_id(owner_id, content_id)

    def delete(self, owner_id: int, content_id: int) -> None:
        """Permanently delete content and its tag associations."""
        content = self._get_owned(owner_id, content_id)
        self.db.delete(content)
        self._commit(attaching_tags=False)

        logger.info(f"User {owner_id} deleted content {content_id}")
