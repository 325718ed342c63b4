from fastapi import Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from Security.Password_hash import verify_password
from Security.audit_trail import audit
from .app_context import templates, get_current_user, logout_session
from .auth import get_user_by_email, normalize_email
from .database import get_db
from .models import User


def _edit_page(request: Request, user: User, status_code: int = 200, **extra):
    context = {"user": user, "status": request.query_params.get("status")}
    context.update(extra)
    return templates.TemplateResponse(request, "profile/edit.html", context, status_code=status_code)


def register_profile_routes(app):
    @app.get("/profile", response_class=HTMLResponse, name="profile.edit")
    async def profile_edit(request: Request, user: User = Depends(get_current_user)):
        return _edit_page(request, user)

    @app.patch("/profile", name="profile.update")
    async def profile_update(
        request: Request,
        name: str = Form(...),
        email: str = Form(...),
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        name = name.strip()
        email = normalize_email(email)
        if not name or not email:
            return _edit_page(request, user, 422, error="Name and email are required.")

        if email != user.email:
            existing = get_user_by_email(db, email)
            if existing and existing.id != user.id:
                return _edit_page(request, user, 422, error=f"Email '{email}' is already taken.")
            user.email = email
            user.email_verified_at = None
        user.name = name
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            db.refresh(user)
            return _edit_page(request, user, 422, error=f"Email '{email}' is already taken.")
        audit("profile_updated", user_id=user.id, details=f"email={user.email}")
        return RedirectResponse("/profile?status=profile-updated", status_code=303)

    @app.delete("/profile", name="profile.destroy")
    async def profile_destroy(
        request: Request,
        password: str = Form(...),
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        if not verify_password(password, user.password_hash):
            return _edit_page(request, user, 422, delete_error="The password is incorrect.")

        user_id = user.id
        db.delete(user)
        db.commit()
        logout_session(request)
        audit("profile_deleted", user_id=user_id)
        return RedirectResponse("/", status_code=303)
