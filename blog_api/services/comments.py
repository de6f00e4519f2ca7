import logging

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from blog_api.models import Comment
from blog_api.schemas import CreateCommentInput, GetCommentsInput
from blog_api.services.integrity import (
    commit_or_rollback,
    require_comment,
    require_parent_comment,
    require_post,
)

logger = logging.getLogger(__name__)


def create_comment(db: Session, data: CreateCommentInput) -> Comment:
    require_post(db, data.post_id)
    if data.parent_id is not None:
        require_parent_comment(db, data.parent_id, data.post_id)

    comment = Comment(
        content=data.content,
        author_name=data.author_name,
        author_email=data.author_email,
        author_website=data.author_website,
        post_id=data.post_id,
        parent_id=data.parent_id,
        is_approved=False  # moderation always starts pending
    )
    db.add(comment)
    commit_or_rollback(db)
    db.refresh(comment)

    logger.info("Created comment %s on post %s (parent %s)", comment.id, comment.post_id, comment.parent_id)
    return comment


def get_comments(db: Session, data: GetCommentsInput) -> list[Comment]:
    query = db.query(Comment).filter(Comment.post_id == data.post_id)

    if data.approved_only:
        query = query.filter(Comment.is_approved == True)

    return (
        query.order_by(Comment.created_at.asc(), Comment.id.asc())
        .offset(data.offset)
        .limit(data.limit)
        .all()
    )


def get_pending_comments(db: Session) -> list[Comment]:
    """All comments still waiting for approval, oldest first."""
    return (
        db.query(Comment)
        .filter(Comment.is_approved == False)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def approve_comment(db: Session, comment_id: int) -> Comment:
    comment = require_comment(db, comment_id)

    comment.is_approved = True
    comment.updated_at = func.now()
    commit_or_rollback(db)
    db.refresh(comment)

    logger.info("Approved comment %s", comment_id)
    return comment


def collect_subtree(db: Session, comment_id: int) -> list[list[int]]:
    """
    Return the ids of the thread rooted at `comment_id`, grouped by depth.

    levels[0] is [comment_id], levels[1] its direct replies, and so on. The
    walk keeps an explicit frontier instead of recursing, so a deep thread
    costs one query per level. An unknown id yields [].
    """
    if db.query(Comment.id).filter(Comment.id == comment_id).first() is None:
        return []

    levels = [[comment_id]]
    seen = {comment_id}
    frontier = [comment_id]

    while frontier:
        rows = db.query(Comment.id).filter(Comment.parent_id.in_(frontier)).all()
        children = [row.id for row in rows if row.id not in seen]
        if not children:
            break
        seen.update(children)
        levels.append(children)
        frontier = children

    return levels


def delete_comment(db: Session, comment_id: int) -> bool:
    """
    Delete a comment and every reply beneath it.

    Levels are removed deepest first, so no comment is deleted while it still
    has replies. Deleting an id that does not exist succeeds and does nothing.
    """
    levels = collect_subtree(db, comment_id)
    if not levels:
        logger.debug("Comment %s already absent, nothing to delete", comment_id)
        return True

    try:
        for ids in reversed(levels):
            db.query(Comment).filter(Comment.id.in_(ids)).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Comment deletion failed for comment %s", comment_id)
        raise

    db.expire_all()
    logger.info("Deleted comment %s and %s replies", comment_id, sum(len(ids) for ids in levels) - 1)
    return True
