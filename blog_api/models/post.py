from sqlalchemy import CheckConstraint, Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from blog_api.database import Base

POST_STATUSES = ("draft", "published", "archived")
MEDIA_TYPES = ("text", "image", "video")


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("view_count >= 0", name="ck_post_view_count"),
        CheckConstraint("like_count >= 0", name="ck_post_like_count"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, index=True, nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(String(500))
    featured_image_url = Column(String(500))
    media_type = Column(Enum(*MEDIA_TYPES, name="media_type"), default="text", nullable=False)
    media_url = Column(String(500))
    status = Column(Enum(*POST_STATUSES, name="post_status"), default="draft", nullable=False, index=True)
    published_at = Column(DateTime(timezone=True))  # set once, on first publish
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True)
    view_count = Column(Integer, default=0, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    author = relationship("User", back_populates="posts")
    category = relationship("Category", back_populates="posts")

    def __repr__(self):
        return f"<Post(id={self.id}, slug='{self.slug}', status='{self.status}')>"
