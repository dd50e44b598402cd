from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.schemas.tag import TagCreate, TagList, TagCreateResult
from app.services.tag_service import TagService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=TagList)
def get_tags(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Get every tag in the system, ordered by title.

    Tags are shared between users, so no ownership filter applies.
    """
    tags = TagService(db).list_tags()
    return {"count": len(tags), "tags": tags}


@router.post("", response_model=TagCreateResult, status_code=status.HTTP_201_CREATED)
def create_tag(
    payload: TagCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a tag, or return the existing one with the same normalized title.

    - 201 when the tag was created, 200 when it already existed
    """
    tag, created = TagService(db).create_or_get(payload.title)

    if not created:
        response.status_code = status.HTTP_200_OK
        return {"message": "Tag already exists", "tag": tag}

    logger.info(f"User {current_user.id} created tag {tag.id}")
    return {"message": "Tag created successfully", "tag": tag}
