from fastapi import Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy import func
from sqlalchemy.orm import Session

from .app_context import templates, get_current_user
from .database import get_db
from .enums import UserType
from .models import User
from .route_groups import register_role_group, role_group


def register_admin_routes(app):
    group = role_group("/admin", UserType.ADMIN)

    @group.router.get("/dashboard", response_class=HTMLResponse, name=group.route_name("dashboard"))
    async def admin_dashboard(request: Request, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
        rows = db.query(User.type, func.count(User.id)).group_by(User.type).all()
        counts = {t.value: 0 for t in UserType}
        counts.update({user_type: total for user_type, total in rows})
        return templates.TemplateResponse(
            request, "admin/dashboard.html",
            {"user": user, "type_counts": counts},
        )

    register_role_group(app, group)
    return group
