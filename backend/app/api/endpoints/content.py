from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.auth import get_current_user
from app.api.validation import parse_content_id, parse_optional_tag_id, parse_tag_id
from app.models.content import ContentType
from app.models.user import User
from app.schemas.content import (
    ContentCreate,
    ContentUpdate,
    ContentTagsAttach,
    ContentResult,
    ContentDetail,
    ContentList,
    ContentTypeList,
    ContentHomeList,
    Message,
)
from app.services.content_service import ContentService

router = APIRouter()


@router.post("", response_model=ContentResult, status_code=status.HTTP_201_CREATED)
def create_content(
    payload: ContentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Save a new piece of content for the current user.

    - Title, description and type are required; type must be a known value
    - Optional tagIds must all refer to existing tags, otherwise nothing is saved
    """
    content = ContentService(db).create(
        owner_id=current_user.id,
        title=payload.title,
        description=payload.description,
        content_type=payload.type,
        link=payload.link,
        tag_ids=payload.tag_ids,
    )
    return {"message": "Content created successfully", "content": content}


@router.get("", response_model=ContentList)
def list_contents(
    content_type: Optional[str] = Query(None, alias="type", description="Only content of this type"),
    tag_id: Optional[str] = Query(None, alias="tagId", description="Only content with this tag"),
    search: Optional[str] = Query(None, description="Substring of title or description"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List the current user's content, newest first.

    Filters are optional and combine with AND; search is case-insensitive.
    """
    contents = ContentService(db).list_for_owner(
        current_user.id,
        content_type=content_type or None,
        tag_id=parse_optional_tag_id(tag_id),
        search=search,
    )
    return {"count": len(contents), "contents": contents}


@router.get("/home", response_model=ContentHomeList)
def list_home_contents(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Landing view: all content without the owner block, tags as id/title only."""
    contents = ContentService(db).list_home(current_user.id)
    return {"count": len(contents), "contents": contents}


def _type_route(content_type: ContentType):
    def list_contents_of_type(
        tag_id: Optional[str] = Query(None, alias="tagId"),
        search: Optional[str] = Query(None),
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        contents = ContentService(db).list_by_type(
            current_user.id,
            content_type,
            tag_id=parse_optional_tag_id(tag_id),
            search=search,
        )
        return {"type": content_type, "count": len(contents), "contents": contents}

    list_contents_of_type.__name__ = f"list_{content_type.value}_contents"
    list_contents_of_type.__doc__ = f"List the current user's {content_type.value} content."
    return list_contents_of_type


# Registered before /{content_id} so the fixed paths win
for _content_type in ContentType:
    router.add_api_route(
        f"/{_content_type.value}",
        _type_route(_content_type),
        methods=["GET"],
        response_model=ContentTypeList,
    )


@router.get("/{content_id}", response_model=ContentDetail)
def get_content(
    content_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get one piece of content owned by the current user."""
    content = ContentService(db).get_by_id(current_user.id, parse_content_id(content_id))
    return {"content": content}


@router.put("/{content_id}", response_model=ContentResult)
def update_content(
    content_id: str,
    payload: ContentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Partially update content.

    - Fields left out of the body keep their current value
    - tagIds, when present, replaces the full tag set ([] removes all tags)
    """
    content = ContentService(db).update(
        current_user.id,
        parse_content_id(content_id),
        payload.model_dump(exclude_unset=True),
    )
    return {"message": "Content updated successfully", "content": content}


@router.delete("/{content_id}", response_model=Message)
def delete_content(
    content_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Permanently delete content; the tags themselves are kept."""
    ContentService(db).delete(current_user.id, parse_content_id(content_id))
    return {"message": "Content deleted successfully"}


@router.post("/{content_id}/tags", response_model=ContentResult)
def attach_content_tags(
    content_id: str,
    payload: ContentTagsAttach,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add tags to content, keeping the ones already attached."""
    content = ContentService(db).attach_tags(
        current_user.id, parse_content_id(content_id), payload.tag_ids
    )
    return {"message": "Tags attached successfully", "content": content}


@router.delete("/{content_id}/tags/{tag_id}", response_model=ContentResult)
def detach_content_tag(
    content_id: str,
    tag_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove a single tag from content."""
    content = ContentService(db).detach_tag(
        current_user.id, parse_content_id(content_id), parse_tag_id(tag_id)
    )
    return {"message": "Tag detached successfully", "content": content}
