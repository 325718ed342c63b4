from pathlib import Path
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from .database import get_db
from .models import User

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def resolve_identity(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """Return the User behind the session cookie, or None for anonymous requests."""
    session = request.scope.get("session")
    if not session:
        return None
    user_id = session.get("user_id")
    if not user_id:
        return None
    return db.get(User, user_id)


def get_current_user(user: Optional[User] = Depends(resolve_identity)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_verified(user: User = Depends(get_current_user)) -> User:
    if not user.is_verified:
        raise HTTPException(status_code=403, detail="Email verification required")
    return user


def login_session(request: Request, user: User) -> None:
    """Start a fresh session for ``user``; anything left from a previous login is dropped."""
    request.session.clear()
    request.session["user_id"] = user.id


def logout_session(request: Request) -> None:
    request.session.clear()
