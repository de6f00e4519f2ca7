from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field, HttpUrl, PlainSerializer

from blog_api.config import DEFAULT_CATEGORY_COLOR

PostStatus = Literal["draft", "published", "archived"]
MediaType = Literal["text", "image", "video"]

# Validated as an http(s) URL, stored as plain text
UrlStr = Annotated[HttpUrl, AfterValidator(str), PlainSerializer(str)]


# --- Users ---

class CreateUserInput(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    full_name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=8)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[UrlStr] = None


class LoginInput(BaseModel):
    email: EmailStr
    password: str


class UpdateUserInput(BaseModel):
    id: int
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[UrlStr] = None


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    full_name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Categories ---

class CreateCategoryInput(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    slug: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    color: str
    created_at: datetime

    class Config:
        from_attributes = True


# --- Posts ---

class CreatePostInput(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    featured_image_url: Optional[UrlStr] = None
    media_type: MediaType = "text"
    media_url: Optional[UrlStr] = None
    status: PostStatus = "draft"
    category_id: Optional[int] = None
    author_id: int


class UpdatePostInput(BaseModel):
    """Partial update: only the fields the caller sent are applied."""

    id: int
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    featured_image_url: Optional[UrlStr] = None
    media_type: Optional[MediaType] = None
    media_url: Optional[UrlStr] = None
    status: Optional[PostStatus] = None
    category_id: Optional[int] = None


class GetPostsInput(BaseModel):
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    # An explicit None selects uncategorized posts; leaving it unset means any
    category_id: Optional[int] = None
    status: Optional[PostStatus] = None
    author_id: Optional[int] = None


class PostResponse(BaseModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    featured_image_url: Optional[str] = None
    media_type: MediaType
    media_url: Optional[str] = None
    status: PostStatus
    published_at: Optional[datetime] = None
    author_id: int
    category_id: Optional[int] = None
    view_count: int
    like_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Tags ---

class CreateTagInput(BaseModel):
    name: str = Field(min_length=1, max_length=30)
    slug: str = Field(min_length=1, max_length=30)


class AddTagToPostInput(BaseModel):
    post_id: int
    tag_id: int


class TagResponse(BaseModel):
    id: int
    name: str
    slug: str
    created_at: datetime

    class Config:
        from_attributes = True


class PostTagResponse(BaseModel):
    id: int
    post_id: int
    tag_id: int
    created_at: datetime

    class Config:
        from_attributes = True


# --- Comments ---

class CreateCommentInput(BaseModel):
    content: str = Field(min_length=1, max_length=1000)
    author_name: str = Field(min_length=1, max_length=100)
    author_email: EmailStr
    author_website: Optional[UrlStr] = None
    post_id: int
    parent_id: Optional[int] = None


class GetCommentsInput(BaseModel):
    post_id: int
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    approved_only: bool = True


class CommentResponse(BaseModel):
    id: int
    content: str
    author_name: str
    author_email: str
    author_website: Optional[str] = None
    post_id: int
    parent_id: Optional[int] = None
    is_approved: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Misc ---

class SuccessResponse(BaseModel):
    success: bool


class HealthResponse(BaseModel):
    status: str
    timestamp: str
