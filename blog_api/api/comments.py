from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from blog_api.database import get_db
from blog_api.schemas import CommentResponse, CreateCommentInput, GetCommentsInput, SuccessResponse
from blog_api.services import comments as comment_service

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(data: CreateCommentInput, db: Session = Depends(get_db)):
    """Create a comment or a reply. New comments wait for approval."""
    return comment_service.create_comment(db, data)


@router.get("/post/{post_id}", response_model=List[CommentResponse])
def get_comments(
    post_id: int,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    approved_only: bool = True,
    db: Session = Depends(get_db)
):
    """Comments for a post, oldest first"""
    data = GetCommentsInput(post_id=post_id, limit=limit, offset=offset, approved_only=approved_only)
    return comment_service.get_comments(db, data)


@router.get("/pending", response_model=List[CommentResponse])
def get_pending_comments(db: Session = Depends(get_db)):
    """Moderation queue across all posts"""
    return comment_service.get_pending_comments(db)


@router.put("/{comment_id}/approve", response_model=CommentResponse)
def approve_comment(comment_id: int, db: Session = Depends(get_db)):
    return comment_service.approve_comment(db, comment_id)


@router.delete("/{comment_id}", response_model=SuccessResponse)
def delete_comment(comment_id: int, db: Session = Depends(get_db)):
    """Delete a comment and its whole reply thread; missing ids are a no-op."""
    return {"success": comment_service.delete_comment(db, comment_id)}
