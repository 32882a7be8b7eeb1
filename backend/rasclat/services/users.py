import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..core.security import hash_password
from ..models.radio import User

logger = logging.getLogger(__name__)


def create_user(db: Session, username: str, password: str, email: Optional[str] = None,
                first_name: Optional[str] = None, last_name: Optional[str] = None) -> User:
    """Username and email are stored lowercase."""
    username = username.strip().lower()
    user = User(
        username=username,
        email=(email or f"{username}@localhost").strip().lower(),
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("created user %s", username)
    return user


def ensure_admin(db: Session) -> Optional[User]:
    """Create the bootstrap admin from BACKEND_ADMIN_* when it does not exist yet."""
    settings = get_settings()
    if not settings.admin_username or not settings.admin_password:
        return None
    username = settings.admin_username.strip().lower()
    existing = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if existing is not None:
        return existing
    return create_user(db, username, settings.admin_password, email=settings.admin_email)
