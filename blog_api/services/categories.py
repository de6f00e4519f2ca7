import logging

from sqlalchemy.orm import Session

from blog_api.models import Category
from blog_api.schemas import CreateCategoryInput
from blog_api.services.integrity import commit_or_conflict, ensure_unique

logger = logging.getLogger(__name__)


def create_category(db: Session, data: CreateCategoryInput) -> Category:
    ensure_unique(db, Category.name, data.name, "Category")
    ensure_unique(db, Category.slug, data.slug, "Category")

    category = Category(
        name=data.name,
        slug=data.slug,
        description=data.description,
        color=data.color
    )
    db.add(category)
    commit_or_conflict(db, f"Category with name '{data.name}' or slug '{data.slug}' already exists")
    db.refresh(category)

    logger.info("Created category %s (%s)", category.id, category.slug)
    return category


def get_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()
