from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from blog_api.database import get_db
from blog_api.schemas import CategoryResponse, CreateCategoryInput
from blog_api.services import categories as category_service

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(data: CreateCategoryInput, db: Session = Depends(get_db)):
    return category_service.create_category(db, data)


@router.get("", response_model=List[CategoryResponse])
def get_categories(db: Session = Depends(get_db)):
    """All categories, alphabetical"""
    return category_service.get_categories(db)
