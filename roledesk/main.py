import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.middleware.sessions import SessionMiddleware

from Security.activity_logging import ActivityLoggingMiddleware
from Security.request_id import RequestIdMiddleware
from Security.security_config import SECURITY_SETTINGS, ensure_session_secret

from .admin_routes import register_admin_routes
from .app_context import templates, require_verified
from .database import Base, engine
from .error_handlers import register_error_handlers
from .manager_routes import register_manager_routes
from .models import User
from .profile_routes import register_profile_routes
from .user_routes import register_user_routes
from .web_auth_routes import register_web_auth_routes

logger = logging.getLogger("roledesk.main")

NO_CACHE_PREFIXES = ("/admin", "/manager", "/user", "/profile", "/dashboard")


def is_no_cache_path(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in NO_CACHE_PREFIXES)


def create_app() -> FastAPI:
    app = FastAPI(title="roledesk")

    app.add_middleware(ActivityLoggingMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=ensure_session_secret(),
        session_cookie=SECURITY_SETTINGS["SESSION_COOKIE"],
        max_age=SECURITY_SETTINGS["SESSION_MAX_AGE"],
        https_only=SECURITY_SETTINGS["FORCE_HTTPS"],
        same_site="lax",
    )
    app.add_middleware(RequestIdMiddleware)

    @app.get("/", response_class=HTMLResponse, name="welcome")
    async def welcome(request: Request):
        return templates.TemplateResponse(request, "welcome.html", {})

    @app.get("/dashboard", response_class=HTMLResponse, name="dashboard")
    async def dashboard(request: Request, user: User = Depends(require_verified)):
        return templates.TemplateResponse(request, "dashboard.html", {"user": user})

    register_web_auth_routes(app)
    register_profile_routes(app)
    register_admin_routes(app)
    register_manager_routes(app)
    register_user_routes(app)
    register_error_handlers(app)

    # Gated pages must not be served from the browser cache after logout.
    @app.middleware("http")
    async def add_no_cache_headers(request: Request, call_next):
        response = await call_next(request)
        if is_no_cache_path(request.url.path):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

    @app.on_event("startup")
    def startup_event():
        Base.metadata.create_all(bind=engine)
        for group in app.state.role_groups:
            logger.info("Route group %s -> %s", group.prefix, group.required.value)

    return app


app = create_app()
