from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from blog_api.database import get_db
from blog_api.schemas import (
    CreatePostInput,
    GetPostsInput,
    PostResponse,
    PostStatus,
    SuccessResponse,
    UpdatePostInput,
)
from blog_api.services import posts as post_service

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(data: CreatePostInput, db: Session = Depends(get_db)):
    """Create a post. Publishing on creation stamps published_at."""
    return post_service.create_post(db, data)


@router.get("", response_model=List[PostResponse])
def get_posts(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category_id: Optional[int] = None,
    uncategorized: bool = False,
    post_status: Optional[PostStatus] = Query(None, alias="status"),
    author_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """
    List posts, newest first.

    `uncategorized=true` selects posts without a category and wins over
    `category_id`.
    """
    filters = {"limit": limit, "offset": offset, "status": post_status, "author_id": author_id}
    if uncategorized:
        filters["category_id"] = None
    elif category_id is not None:
        filters["category_id"] = category_id

    return post_service.get_posts(db, GetPostsInput(**filters))


@router.get("/slug/{slug}", response_model=Optional[PostResponse])
def get_post_by_slug(slug: str, db: Session = Depends(get_db)):
    return post_service.get_post_by_slug(db, slug)


@router.get("/{post_id}", response_model=Optional[PostResponse])
def get_post_by_id(post_id: int, db: Session = Depends(get_db)):
    """Fetch one post and count the view"""
    return post_service.get_post_by_id(db, post_id)


@router.put("", response_model=PostResponse)
def update_post(data: UpdatePostInput, db: Session = Depends(get_db)):
    return post_service.update_post(db, data)


@router.delete("/{post_id}", response_model=SuccessResponse)
def delete_post(post_id: int, db: Session = Depends(get_db)):
    """Delete a post with its comments and tag links"""
    return {"success": post_service.delete_post(db, post_id)}


@router.post("/{post_id}/like", response_model=PostResponse)
def like_post(post_id: int, db: Session = Depends(get_db)):
    return post_service.like_post(db, post_id)
