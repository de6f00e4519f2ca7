"""Database models package."""

from blog_api.models.user import User
from blog_api.models.category import Category
from blog_api.models.post import Post, POST_STATUSES, MEDIA_TYPES
from blog_api.models.tag import Tag, PostTag
from blog_api.models.comment import Comment

__all__ = [
    'User',
    'Category',
    'Post',
    'POST_STATUSES',
    'MEDIA_TYPES',
    'Tag',
    'PostTag',
    'Comment'
]
