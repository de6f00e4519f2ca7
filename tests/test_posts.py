import warnings
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from blog_api.errors import ConflictError, NotFoundError
from blog_api.models import Category, Comment, Post, PostTag, Tag, User
from blog_api.schemas import AddTagToPostInput, GetPostsInput, UpdatePostInput
from blog_api.services import posts, tags


# ==============================================================================
# Creation
# ==============================================================================


def test_create_draft_post(db, author, make_post):
    post = make_post(title="Hello", slug="hello")

    assert post.id is not None
    assert post.status == "draft"
    assert post.published_at is None
    assert post.media_type == "text"
    assert post.author_id == author.id
    assert post.category_id is None
    assert post.view_count == 0
    assert post.like_count == 0


def test_create_published_post_stamps_published_at(db, make_post):
    post = make_post(status="published")

    assert post.status == "published"
    assert isinstance(post.published_at, datetime)


def test_create_post_with_category(db, make_post, make_category):
    category = make_category()

    post = make_post(category_id=category.id)

    assert post.category_id == category.id


def test_create_post_missing_author(db, make_post):
    with pytest.raises(NotFoundError, match="Author with id 999 not found"):
        make_post(author_id=999)
    assert db.query(Post).count() == 0


def test_create_post_missing_category(db, make_post):
    with pytest.raises(NotFoundError, match="Category with id 999 not found"):
        make_post(category_id=999)
    assert db.query(Post).count() == 0


def test_create_post_checks_author_before_category(db, make_post):
    with pytest.raises(NotFoundError, match="Author"):
        make_post(author_id=999, category_id=999)


def test_create_post_duplicate_slug(db, make_post):
    make_post(slug="same")

    with pytest.raises(ConflictError, match="slug 'same' already exists"):
        make_post(slug="same")
    assert db.query(Post).filter(Post.slug == "same").count() == 1


# ==============================================================================
# Status lifecycle
# ==============================================================================


def test_apply_status_stamps_on_first_publish():
    post = Post(status="draft")
    first = datetime(2024, 1, 1, 12, 0, 0)

    posts.apply_status(post, "published", now=first)
    assert post.published_at == first

    posts.apply_status(post, "draft", now=datetime(2024, 2, 1))
    assert post.status == "draft"
    assert post.published_at == first

    posts.apply_status(post, "published", now=datetime(2024, 3, 1))
    assert post.published_at == first


@pytest.mark.parametrize("status", ["draft", "archived"])
def test_apply_status_non_published_leaves_latch_empty(status):
    post = Post(status="draft")

    posts.apply_status(post, status)

    assert post.status == status
    assert post.published_at is None


def test_update_draft_to_published_sets_published_at(db, make_post):
    post = make_post()

    updated = posts.update_post(db, UpdatePostInput(id=post.id, status="published"))

    assert updated.status == "published"
    assert updated.published_at is not None


def test_republish_keeps_first_published_at(db, make_post):
    post = make_post()
    first = posts.update_post(db, UpdatePostInput(id=post.id, status="published")).published_at

    back_to_draft = posts.update_post(db, UpdatePostInput(id=post.id, status="draft"))
    assert back_to_draft.status == "draft"
    assert back_to_draft.published_at == first

    archived = posts.update_post(db, UpdatePostInput(id=post.id, status="archived"))
    assert archived.published_at == first

    republished = posts.update_post(db, UpdatePostInput(id=post.id, status="published"))
    assert republished.status == "published"
    assert republished.published_at == first


def test_created_published_then_cycled_keeps_published_at(db, make_post):
    post = make_post(status="published")
    first = post.published_at

    posts.update_post(db, UpdatePostInput(id=post.id, status="draft"))
    again = posts.update_post(db, UpdatePostInput(id=post.id, status="published"))

    assert again.published_at == first


# ==============================================================================
# Update
# ==============================================================================


def test_update_only_given_fields(db, make_post):
    post = make_post(title="Original", excerpt="short")

    updated = posts.update_post(db, UpdatePostInput(id=post.id, title="Renamed"))

    assert updated.title == "Renamed"
    assert updated.excerpt == "short"
    assert updated.content == post.content
    assert updated.status == "draft"


def test_update_clears_category_and_nullable_fields(db, make_post, make_category):
    category = make_category()
    post = make_post(category_id=category.id, excerpt="short")

    updated = posts.update_post(db, UpdatePostInput(id=post.id, category_id=None, excerpt=None))

    assert updated.category_id is None
    assert updated.excerpt is None


def test_update_missing_post(db):
    with pytest.raises(NotFoundError, match="Post with id 999 not found"):
        posts.update_post(db, UpdatePostInput(id=999, title="x"))


def test_update_missing_category(db, make_post):
    post = make_post()

    with pytest.raises(NotFoundError, match="Category with id 999 not found"):
        posts.update_post(db, UpdatePostInput(id=post.id, category_id=999))


def test_update_slug_taken_by_other_post(db, make_post):
    make_post(slug="taken")
    post = make_post(slug="mine")

    with pytest.raises(ConflictError, match="already exists"):
        posts.update_post(db, UpdatePostInput(id=post.id, slug="taken"))


def test_update_keeping_own_slug(db, make_post):
    post = make_post(slug="mine")

    updated = posts.update_post(db, UpdatePostInput(id=post.id, slug="mine", title="New title"))

    assert updated.slug == "mine"
    assert updated.title == "New title"


# ==============================================================================
# Listing, views and likes
# ==============================================================================


def test_get_posts_newest_first_with_pagination(db, make_post):
    created = [make_post().id for _ in range(4)]

    first_page = posts.get_posts(db, GetPostsInput(limit=2))
    second_page = posts.get_posts(db, GetPostsInput(limit=2, offset=2))

    assert [p.id for p in first_page] == [created[3], created[2]]
    assert [p.id for p in second_page] == [created[1], created[0]]


def test_get_posts_filters(db, make_user, make_post, make_category):
    other_author = make_user()
    category = make_category()
    in_category = make_post(category_id=category.id, status="published")
    uncategorized = make_post()
    by_other = make_post(author_id=other_author.id)

    by_category = posts.get_posts(db, GetPostsInput(category_id=category.id))
    no_category = posts.get_posts(db, GetPostsInput(category_id=None))
    published = posts.get_posts(db, GetPostsInput(status="published"))
    by_author = posts.get_posts(db, GetPostsInput(author_id=other_author.id))
    everything = posts.get_posts(db, GetPostsInput())

    assert [p.id for p in by_category] == [in_category.id]
    assert {p.id for p in no_category} == {uncategorized.id, by_other.id}
    assert [p.id for p in published] == [in_category.id]
    assert [p.id for p in by_author] == [by_other.id]
    assert len(everything) == 3


def test_get_post_by_id_counts_views(db, make_post):
    post = make_post()

    first = posts.get_post_by_id(db, post.id)
    assert first.view_count == 1

    second = posts.get_post_by_id(db, post.id)
    assert second.view_count == 2


def test_get_post_by_slug_counts_views(db, make_post):
    make_post(slug="read-me")

    post = posts.get_post_by_slug(db, "read-me")

    assert post.slug == "read-me"
    assert post.view_count == 1


def test_get_missing_post_returns_none(db):
    assert posts.get_post_by_id(db, 999) is None
    assert posts.get_post_by_slug(db, "nope") is None


def test_like_post(db, make_post):
    post = make_post()

    posts.like_post(db, post.id)
    liked = posts.like_post(db, post.id)

    assert liked.like_count == 2
    assert liked.view_count == 0


def test_like_missing_post(db):
    with pytest.raises(NotFoundError, match="Post with id 5 not found"):
        posts.like_post(db, 5)


# ==============================================================================
# Deletion
# ==============================================================================


def test_delete_post_cascades_owned_rows_only(db, author, make_post, make_category, make_tag, make_comment):
    category = make_category()
    tag = make_tag()
    doomed = make_post(category_id=category.id)
    survivor = make_post(category_id=category.id)
    doomed_id = doomed.id

    root = make_comment(doomed_id)
    make_comment(doomed_id, parent_id=root.id)
    kept_comment = make_comment(survivor.id)
    tags.add_tag_to_post(db, AddTagToPostInput(post_id=doomed_id, tag_id=tag.id))
    tags.add_tag_to_post(db, AddTagToPostInput(post_id=survivor.id, tag_id=tag.id))

    assert posts.delete_post(db, doomed_id) is True

    assert db.query(Post).filter(Post.id == doomed_id).first() is None
    assert db.query(Comment).filter(Comment.post_id == doomed_id).count() == 0
    assert db.query(PostTag).filter(PostTag.post_id == doomed_id).count() == 0

    # Shared resources and the other post are untouched
    assert db.query(User).filter(User.id == author.id).count() == 1
    assert db.query(Category).filter(Category.id == category.id).count() == 1
    assert db.query(Tag).filter(Tag.id == tag.id).count() == 1
    assert [row.id for row in db.query(Comment.id).filter(Comment.post_id == survivor.id)] == [kept_comment.id]
    assert db.query(PostTag).filter(PostTag.post_id == survivor.id).count() == 1


def test_delete_missing_post(db):
    with pytest.raises(NotFoundError, match="Post with id 404 not found"):
        posts.delete_post(db, 404)


# ==============================================================================
# URL fields and counters
# ==============================================================================


def test_update_post_url_fields(db, make_post):
    post = make_post()

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        updated = posts.update_post(db, UpdatePostInput(
            id=post.id,
            media_type="image",
            media_url="https://cdn.example.com/media/a.png",
            featured_image_url="https://cdn.example.com/cover.jpg"
        ))

    assert updated.media_url == "https://cdn.example.com/media/a.png"
    assert updated.featured_image_url == "https://cdn.example.com/cover.jpg"
    assert [str(w.message) for w in caught if "serializ" in str(w.message)] == []


def test_counters_cannot_go_negative(db, make_post, monkeypatch):
    post = make_post()
    post_id = post.id
    rollbacks = []
    real_rollback = db.rollback
    monkeypatch.setattr(db, "rollback", lambda: rollbacks.append(post_id) or real_rollback())

    with pytest.raises(IntegrityError):
        posts._bump_counters(db, post_id, {Post.like_count: -1})

    assert rollbacks == [post_id]
    # Session is usable again and the row kept its count
    assert posts.like_post(db, post_id).like_count == 1


def test_negative_view_count_rejected_by_store(db, make_post):
    post = make_post()

    with pytest.raises(IntegrityError):
        db.query(Post).filter(Post.id == post.id).update({Post.view_count: -3})
    db.rollback()

    assert db.query(Post.view_count).filter(Post.id == post.id).scalar() == 0
