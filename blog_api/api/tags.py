from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from blog_api.database import get_db
from blog_api.schemas import (
    AddTagToPostInput,
    CreateTagInput,
    PostTagResponse,
    SuccessResponse,
    TagResponse,
)
from blog_api.services import tags as tag_service

router = APIRouter(prefix="/api", tags=["tags"])


@router.post("/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(data: CreateTagInput, db: Session = Depends(get_db)):
    return tag_service.create_tag(db, data)


@router.get("/tags", response_model=List[TagResponse])
def get_tags(db: Session = Depends(get_db)):
    return tag_service.get_tags(db)


# --- Post/Tag association Endpoints ---

@router.post("/posts/{post_id}/tags/{tag_id}", response_model=PostTagResponse, status_code=status.HTTP_201_CREATED)
def add_tag_to_post(post_id: int, tag_id: int, db: Session = Depends(get_db)):
    """Attach a tag to a post. Both must exist and the pair must be new."""
    return tag_service.add_tag_to_post(db, AddTagToPostInput(post_id=post_id, tag_id=tag_id))


@router.delete("/posts/{post_id}/tags/{tag_id}", response_model=SuccessResponse)
def remove_tag_from_post(post_id: int, tag_id: int, db: Session = Depends(get_db)):
    """Detach a tag; succeeds even if it was never attached"""
    return {"success": tag_service.remove_tag_from_post(db, AddTagToPostInput(post_id=post_id, tag_id=tag_id))}


@router.get("/posts/{post_id}/tags", response_model=List[TagResponse])
def get_tags_for_post(post_id: int, db: Session = Depends(get_db)):
    return tag_service.get_tags_for_post(db, post_id)
