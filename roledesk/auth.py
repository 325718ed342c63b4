import logging

from sqlalchemy.orm import Session

from Security.Password_hash import hash_password, needs_rehash, verify_password
from .models import User

logger = logging.getLogger("roledesk.auth")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == normalize_email(email)).first()


def authenticate_user(db: Session, email: str, password: str):
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        db.commit()
        logger.info("Upgraded password hash for user %s", user.id)
    return user
