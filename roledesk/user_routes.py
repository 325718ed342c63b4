from fastapi import Depends, Request
from fastapi.responses import HTMLResponse

from .app_context import templates, get_current_user
from .enums import UserType
from .models import User
from .route_groups import register_role_group, role_group


def register_user_routes(app):
    group = role_group("/user", UserType.USER)

    @group.router.get("/dashboard", response_class=HTMLResponse, name=group.route_name("dashboard"))
    async def user_dashboard(request: Request, user: User = Depends(get_current_user)):
        return templates.TemplateResponse(request, "user/dashboard.html", {"user": user})

    register_role_group(app, group)
    return group
