"""
BLOG MODERATION HELPER
Quick script to moderate comments and seed categories/tags in the database.

Usage:
    python manage_blog.py --pending
    python manage_blog.py --approve 42
    python manage_blog.py --delete-comment 42
    python manage_blog.py --posts
    python manage_blog.py --create-category "Python" "python" [--color "#3776ab"]
    python manage_blog.py --create-tag "FastAPI" "fastapi"
"""

import sys

from pydantic import ValidationError

from blog_api.config import DEFAULT_CATEGORY_COLOR, setup_logging
from blog_api.database import SessionLocal, engine, Base
from blog_api.errors import BlogError
from blog_api.models import Post
from blog_api.schemas import CreateCategoryInput, CreateTagInput
from blog_api.services import categories as category_service
from blog_api.services import comments as comment_service
from blog_api.services import tags as tag_service


def list_pending():
    """List comments waiting for approval"""
    db = SessionLocal()

    try:
        comments = comment_service.get_pending_comments(db)

        if not comments:
            print("No pending comments.")
            return

        print("\nPENDING COMMENTS:\n")
        print(f"{'ID':<8} {'Post':<8} {'Reply to':<10} {'Author':<25} {'Content':<40}")
        print("-" * 95)

        for c in comments:
            parent = c.parent_id if c.parent_id else "-"
            preview = c.content if len(c.content) <= 37 else c.content[:37] + "..."
            print(f"{c.id:<8} {c.post_id:<8} {parent:<10} {c.author_name:<25} {preview:<40}")

        print()
    finally:
        db.close()


def approve(comment_id):
    """Approve a comment"""
    db = SessionLocal()

    try:
        comment = comment_service.approve_comment(db, comment_id)
        print(f"Comment {comment.id} on post {comment.post_id} approved")
        return True
    except BlogError as e:
        print(f"Error: {e.message}")
        return False
    finally:
        db.close()


def delete_thread(comment_id):
    """Delete a comment and every reply beneath it"""
    db = SessionLocal()

    try:
        levels = comment_service.collect_subtree(db, comment_id)
        if not levels:
            print(f"Comment {comment_id} does not exist, nothing to delete")
            return True

        total = sum(len(ids) for ids in levels)
        comment_service.delete_comment(db, comment_id)
        print(f"Deleted comment {comment_id} ({total} comment(s) in thread)")
        return True
    finally:
        db.close()


def list_posts():
    """List all posts with their status"""
    db = SessionLocal()

    try:
        posts = db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()

        if not posts:
            print("No posts found.")
            return

        print(f"\n{'ID':<8} {'Status':<12} {'Published':<20} {'Views':<8} {'Likes':<8} {'Slug':<40}")
        print("-" * 96)

        for p in posts:
            published = p.published_at.strftime("%Y-%m-%d %H:%M") if p.published_at else "-"
            print(f"{p.id:<8} {p.status:<12} {published:<20} {p.view_count:<8} {p.like_count:<8} {p.slug:<40}")

        print()
    finally:
        db.close()


def create_category(name, slug, color=DEFAULT_CATEGORY_COLOR):
    db = SessionLocal()

    try:
        category = category_service.create_category(db, CreateCategoryInput(name=name, slug=slug, color=color))
        print(f"Category created: {category.name} ({category.slug}) id={category.id}")
        return True
    except (BlogError, ValidationError) as e:
        print(f"Error: {e}")
        return False
    finally:
        db.close()


def create_tag(name, slug):
    db = SessionLocal()

    try:
        tag = tag_service.create_tag(db, CreateTagInput(name=name, slug=slug))
        print(f"Tag created: {tag.name} ({tag.slug}) id={tag.id}")
        return True
    except (BlogError, ValidationError) as e:
        print(f"Error: {e}")
        return False
    finally:
        db.close()


def main(argv):
    if len(argv) < 2:
        print(__doc__)
        return 1

    command = argv[1]

    if command == "--pending":
        list_pending()
        return 0

    if command == "--posts":
        list_posts()
        return 0

    if command in ("--approve", "--delete-comment"):
        if len(argv) < 3 or not argv[2].isdigit():
            print(f"Usage: python manage_blog.py {command} <comment_id>")
            return 1
        handler = approve if command == "--approve" else delete_thread
        return 0 if handler(int(argv[2])) else 1

    if command == "--create-category":
        if len(argv) < 4:
            print("Usage: python manage_blog.py --create-category <name> <slug> [--color #RRGGBB]")
            return 1
        color = DEFAULT_CATEGORY_COLOR
        if "--color" in argv[4:]:
            i = argv.index("--color")
            if i + 1 < len(argv):
                color = argv[i + 1]
        return 0 if create_category(argv[2], argv[3], color) else 1

    if command == "--create-tag":
        if len(argv) < 4:
            print("Usage: python manage_blog.py --create-tag <name> <slug>")
            return 1
        return 0 if create_tag(argv[2], argv[3]) else 1

    print(f"Unknown command: {command}")
    print(__doc__)
    return 1


if __name__ == "__main__":
    setup_logging("WARNING")
    Base.metadata.create_all(bind=engine)
    sys.exit(main(sys.argv))
