from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from blog_api.database import get_db
from blog_api.schemas import CreateUserInput, LoginInput, UpdateUserInput, UserResponse
from blog_api.services import users as user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: CreateUserInput, db: Session = Depends(get_db)):
    """Register a new author. The password is stored hashed and never returned."""
    return user_service.create_user(db, data)


@router.post("/login", response_model=UserResponse)
def login_user(data: LoginInput, db: Session = Depends(get_db)):
    """Check email/password and return the matching user"""
    return user_service.login_user(db, data)


@router.get("/{user_id}", response_model=Optional[UserResponse])
def get_user_by_id(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user_by_id(db, user_id)


@router.put("", response_model=UserResponse)
def update_user(data: UpdateUserInput, db: Session = Depends(get_db)):
    """Partially update a profile; omitted fields keep their value."""
    return user_service.update_user(db, data)
