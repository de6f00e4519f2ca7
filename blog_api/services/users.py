import logging

from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from werkzeug.security import check_password_hash, generate_password_hash

from blog_api.errors import AuthenticationError
from blog_api.models import User
from blog_api.schemas import CreateUserInput, LoginInput, UpdateUserInput
from blog_api.services.integrity import commit_or_conflict, ensure_unique, require_user

logger = logging.getLogger(__name__)


def create_user(db: Session, data: CreateUserInput) -> User:
    ensure_unique(db, User.email, data.email, "User")
    ensure_unique(db, User.username, data.username, "User")

    user = User(
        email=data.email,
        username=data.username,
        password_hash=generate_password_hash(data.password),
        full_name=data.full_name,
        bio=data.bio,
        avatar_url=data.avatar_url,
        is_verified=False
    )
    db.add(user)
    commit_or_conflict(db, f"User with email '{data.email}' or username '{data.username}' already exists")
    db.refresh(user)

    logger.info("Created user %s (%s)", user.id, user.username)
    return user


def login_user(db: Session, data: LoginInput) -> User:
    """Check credentials and return the user. Sessions/tokens live elsewhere."""
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not check_password_hash(user.password_hash, data.password):
        logger.warning("Failed login for %s", data.email)
        raise AuthenticationError("Invalid email or password")
    return user


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def update_user(db: Session, data: UpdateUserInput) -> User:
    user = require_user(db, data.id)
    changes = data.model_dump(exclude_unset=True, exclude={"id"})

    if changes.get("username") is not None:
        ensure_unique(db, User.username, changes["username"], "User", exclude_id=user.id)

    for field, value in changes.items():
        # username and full_name are required columns; None means "leave it"
        if value is None and field in ("username", "full_name"):
            continue
        setattr(user, field, value)

    # Bump updated_at even when nothing else changed
    user.updated_at = func.now()
    commit_or_conflict(db, f"User with username '{user.username}' already exists")
    db.refresh(user)
    return user
