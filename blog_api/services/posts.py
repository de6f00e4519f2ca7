import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from blog_api.models import Comment, Post, PostTag
from blog_api.schemas import CreatePostInput, GetPostsInput, UpdatePostInput
from blog_api.services.integrity import (
    commit_or_conflict,
    ensure_unique,
    require_author,
    require_category,
    require_post,
)

logger = logging.getLogger(__name__)

# Columns a partial update may not clear
REQUIRED_POST_FIELDS = ("title", "slug", "content", "media_type")


def apply_status(post: Post, status: str, now: datetime | None = None) -> Post:
    """
    Move a post to `status`.

    Any transition is allowed. `published_at` is stamped the first time the
    post becomes published and is never touched again, so
    published -> draft -> published keeps the original timestamp.
    """
    post.status = status
    if status == "published" and post.published_at is None:
        post.published_at = now or datetime.now(timezone.utc)
    return post


def create_post(db: Session, data: CreatePostInput) -> Post:
    require_author(db, data.author_id)
    if data.category_id is not None:
        require_category(db, data.category_id)
    ensure_unique(db, Post.slug, data.slug, "Post")

    post = Post(
        title=data.title,
        slug=data.slug,
        content=data.content,
        excerpt=data.excerpt,
        featured_image_url=data.featured_image_url,
        media_type=data.media_type,
        media_url=data.media_url,
        author_id=data.author_id,
        category_id=data.category_id,
        view_count=0,
        like_count=0
    )
    apply_status(post, data.status)

    db.add(post)
    commit_or_conflict(db, f"Post with slug '{data.slug}' already exists")
    db.refresh(post)

    logger.info("Created post %s (%s, %s)", post.id, post.slug, post.status)
    return post


def get_posts(db: Session, data: GetPostsInput) -> list[Post]:
    query = db.query(Post)

    if "category_id" in data.model_fields_set:
        if data.category_id is None:
            query = query.filter(Post.category_id.is_(None))
        else:
            query = query.filter(Post.category_id == data.category_id)

    if data.status:
        query = query.filter(Post.status == data.status)

    if data.author_id is not None:
        query = query.filter(Post.author_id == data.author_id)

    return (
        query.order_by(Post.created_at.desc(), Post.id.desc())
        .offset(data.offset)
        .limit(data.limit)
        .all()
    )


def _bump_counters(db: Session, post_id: int, values: dict) -> None:
    # Increments are computed by the store from the current row value
    try:
        db.query(Post).filter(Post.id == post_id).update(values, synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Counter update failed for post %s", post_id)
        raise


def _read_and_count_view(db: Session, post: Post | None) -> Post | None:
    if post is None:
        return None

    _bump_counters(db, post.id, {Post.view_count: Post.view_count + 1})
    db.refresh(post)
    return post


def get_post_by_id(db: Session, post_id: int) -> Post | None:
    """Fetch a post and count the read. Returns None for an unknown id."""
    post = db.query(Post).filter(Post.id == post_id).first()
    return _read_and_count_view(db, post)


def get_post_by_slug(db: Session, slug: str) -> Post | None:
    post = db.query(Post).filter(Post.slug == slug).first()
    return _read_and_count_view(db, post)


def update_post(db: Session, data: UpdatePostInput) -> Post:
    post = require_post(db, data.id)
    changes = data.model_dump(exclude_unset=True, exclude={"id", "status"})

    if changes.get("category_id") is not None:
        require_category(db, changes["category_id"])

    if changes.get("slug") is not None and changes["slug"] != post.slug:
        ensure_unique(db, Post.slug, changes["slug"], "Post", exclude_id=post.id)

    for field, value in changes.items():
        if value is None and field in REQUIRED_POST_FIELDS:
            continue
        setattr(post, field, value)

    if data.status is not None:
        previous = post.status
        apply_status(post, data.status)
        if previous != data.status:
            logger.info("Post %s status %s -> %s", post.id, previous, data.status)

    post.updated_at = func.now()
    commit_or_conflict(db, f"Post with slug '{post.slug}' already exists")
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: int) -> bool:
    """
    Delete a post together with the rows it owns.

    Comments and tag associations go first; users, categories and tags are
    shared and stay.
    """
    require_post(db, post_id)

    try:
        comments = db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session=False)
        post_tags = db.query(PostTag).filter(PostTag.post_id == post_id).delete(synchronize_session=False)
        db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Post deletion failed for post %s", post_id)
        raise

    db.expire_all()
    logger.info("Deleted post %s with %s comments and %s tag links", post_id, comments, post_tags)
    return True


def like_post(db: Session, post_id: int) -> Post:
    post = require_post(db, post_id)

    _bump_counters(db, post_id, {Post.like_count: Post.like_count + 1, Post.updated_at: func.now()})
    db.refresh(post)
    return post
