from fastapi import Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from Security.Password_hash import hash_password
from Security.audit_trail import audit
from .app_context import templates, login_session, logout_session
from .auth import authenticate_user, get_user_by_email, normalize_email
from .database import get_db
from .enums import UserType
from .exceptions import DataIntegrityError
from .models import User

MIN_PASSWORD_LENGTH = 8

HOME_BY_TYPE = {
    UserType.ADMIN: "/admin/dashboard",
    UserType.MANAGER: "/manager/dashboard",
    UserType.USER: "/user/dashboard",
}


def _redirect_for_type(user: User) -> str:
    try:
        return HOME_BY_TYPE[user.user_type]
    except DataIntegrityError:
        return "/"


def register_web_auth_routes(app):
    @app.get("/login", response_class=HTMLResponse, name="login")
    async def login_page(request: Request):
        return templates.TemplateResponse(request, "auth/login.html", {})

    @app.post("/login", name="login.store")
    async def login_submit(
        request: Request,
        email: str = Form(...),
        password: str = Form(...),
        db: Session = Depends(get_db)
    ):
        user = authenticate_user(db, email, password)
        if not user:
            audit("auth_login_failed", user_id=None, details=f"email={normalize_email(email)}")
            return templates.TemplateResponse(
                request, "auth/login.html",
                {"error": "These credentials do not match our records.", "email": email},
                status_code=401
            )

        login_session(request, user)
        audit("auth_login_success", user_id=user.id, details=f"email={user.email};type={user.type}")
        return RedirectResponse(_redirect_for_type(user), status_code=303)

    @app.post("/logout", name="logout")
    async def logout(request: Request):
        existing_user_id = request.session.get("user_id")
        if existing_user_id:
            audit("auth_logout", user_id=existing_user_id, details="logout")
        logout_session(request)
        return RedirectResponse("/", status_code=303)

    @app.get("/register", response_class=HTMLResponse, name="register")
    async def register_page(request: Request):
        return templates.TemplateResponse(request, "auth/register.html", {})

    @app.post("/register", name="register.store")
    async def register_submit(
        request: Request,
        name: str = Form(...),
        email: str = Form(...),
        password: str = Form(...),
        password_confirmation: str = Form(...),
        db: Session = Depends(get_db)
    ):
        name = name.strip()
        email = normalize_email(email)

        def _fail(message: str):
            return templates.TemplateResponse(
                request, "auth/register.html",
                {"error": message, "name": name, "email": email},
                status_code=422
            )

        if not name or not email:
            return _fail("Name and email are required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            return _fail(f"The password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if password != password_confirmation:
            return _fail("The password confirmation does not match.")
        if get_user_by_email(db, email):
            return _fail(f"Email '{email}' is already taken.")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            type=UserType.USER,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return _fail(f"Email '{email}' is already taken.")

        login_session(request, user)
        audit("auth_register", user_id=user.id, details=f"email={user.email}")
        return RedirectResponse(_redirect_for_type(user), status_code=303)
