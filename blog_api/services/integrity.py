"""
Referential-integrity checks run before any write.

Every check takes the session plus the ids/values it needs and either returns
the referenced row or raises a BlogError. Callers chain them in order, so the
first failing precondition aborts the operation before anything is written.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blog_api.errors import ConflictError, InvariantViolationError, NotFoundError
from blog_api.models import Category, Comment, Post, PostTag, Tag, User

logger = logging.getLogger(__name__)


def _require(db: Session, model, entity_id: int, label: str):
    row = db.query(model).filter(model.id == entity_id).first()
    if row is None:
        logger.warning("%s with id %s not found", label, entity_id)
        raise NotFoundError(f"{label} with id {entity_id} not found")
    return row


def require_user(db: Session, user_id: int) -> User:
    return _require(db, User, user_id, "User")


def require_author(db: Session, author_id: int) -> User:
    return _require(db, User, author_id, "Author")


def require_category(db: Session, category_id: int) -> Category:
    return _require(db, Category, category_id, "Category")


def require_post(db: Session, post_id: int) -> Post:
    return _require(db, Post, post_id, "Post")


def require_tag(db: Session, tag_id: int) -> Tag:
    return _require(db, Tag, tag_id, "Tag")


def require_comment(db: Session, comment_id: int) -> Comment:
    return _require(db, Comment, comment_id, "Comment")


def require_parent_comment(db: Session, parent_id: int, post_id: int) -> Comment:
    """The parent must exist and sit on the same post as the new reply."""
    parent = _require(db, Comment, parent_id, "Parent comment")
    if parent.post_id != post_id:
        logger.warning(
            "Parent comment %s is on post %s, reply targets post %s",
            parent_id, parent.post_id, post_id,
        )
        raise InvariantViolationError(
            f"Parent comment must belong to the same post "
            f"(comment {parent_id} is on post {parent.post_id}, not post {post_id})"
        )
    return parent


def ensure_unique(db: Session, column, value, label: str, exclude_id: int | None = None) -> None:
    """Raise ConflictError when another row already holds `value` in `column`."""
    model = column.class_
    query = db.query(model.id).filter(column == value)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        logger.warning("%s with %s '%s' already exists", label, column.key, value)
        raise ConflictError(f"{label} with {column.key} '{value}' already exists")


def ensure_not_tagged(db: Session, post_id: int, tag_id: int) -> None:
    existing = db.query(PostTag.id).filter(
        PostTag.post_id == post_id,
        PostTag.tag_id == tag_id
    ).first()
    if existing is not None:
        logger.warning("Tag %s is already associated with post %s", tag_id, post_id)
        raise ConflictError(f"Tag is already associated with this post (post {post_id}, tag {tag_id})")


def commit_or_conflict(db: Session, message: str) -> None:
    """
    Commit, turning a constraint violation from the store into ConflictError.

    The pre-checks above catch the common case; this covers two requests
    racing on the same unique value.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error("Store rejected write: %s", e.orig)
        raise ConflictError(message) from e
    except Exception:
        db.rollback()
        logger.exception("Write failed, session rolled back")
        raise


def commit_or_rollback(db: Session) -> None:
    """Commit, or roll the session back and re-raise."""
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Write failed, session rolled back")
        raise
