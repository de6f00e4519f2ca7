import logging

from sqlalchemy.orm import Session

from blog_api.models import PostTag, Tag
from blog_api.schemas import AddTagToPostInput, CreateTagInput
from blog_api.services.integrity import (
    commit_or_conflict,
    ensure_not_tagged,
    ensure_unique,
    require_post,
    require_tag,
)

logger = logging.getLogger(__name__)


def create_tag(db: Session, data: CreateTagInput) -> Tag:
    ensure_unique(db, Tag.name, data.name, "Tag")
    ensure_unique(db, Tag.slug, data.slug, "Tag")

    tag = Tag(name=data.name, slug=data.slug)
    db.add(tag)
    commit_or_conflict(db, f"Tag with name '{data.name}' or slug '{data.slug}' already exists")
    db.refresh(tag)

    logger.info("Created tag %s (%s)", tag.id, tag.slug)
    return tag


def get_tags(db: Session) -> list[Tag]:
    return db.query(Tag).order_by(Tag.name.asc()).all()


def add_tag_to_post(db: Session, data: AddTagToPostInput) -> PostTag:
    require_post(db, data.post_id)
    require_tag(db, data.tag_id)
    ensure_not_tagged(db, data.post_id, data.tag_id)

    post_tag = PostTag(post_id=data.post_id, tag_id=data.tag_id)
    db.add(post_tag)
    commit_or_conflict(db, f"Tag is already associated with this post (post {data.post_id}, tag {data.tag_id})")
    db.refresh(post_tag)

    logger.info("Tagged post %s with tag %s", data.post_id, data.tag_id)
    return post_tag


def remove_tag_from_post(db: Session, data: AddTagToPostInput) -> bool:
    """Remove the association if present. Removing a missing one is not an error."""
    try:
        removed = db.query(PostTag).filter(
            PostTag.post_id == data.post_id,
            PostTag.tag_id == data.tag_id
        ).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Removing tag %s from post %s failed", data.tag_id, data.post_id)
        raise

    if removed:
        logger.info("Removed tag %s from post %s", data.tag_id, data.post_id)
    return True


def get_tags_for_post(db: Session, post_id: int) -> list[Tag]:
    return (
        db.query(Tag)
        .join(PostTag, PostTag.tag_id == Tag.id)
        .filter(PostTag.post_id == post_id)
        .order_by(Tag.name.asc())
        .all()
    )
