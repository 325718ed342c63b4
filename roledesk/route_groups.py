"""
Prefix-scoped route groups gated by user type.

Every group router carries two dependencies, in order: the auth gate
(``get_current_user``) and the role gate (``require_type``). Handlers added
to ``group.router`` only run when both pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI

from .app_context import get_current_user
from .enums import UserType
from .exceptions import ConfigurationError
from .role_gate import parse_required_type, require_type

logger = logging.getLogger("roledesk.route_groups")


@dataclass(frozen=True)
class RoleGroup:
    prefix: str
    required: UserType
    name: str
    router: APIRouter = field(compare=False, repr=False)

    def route_name(self, endpoint: str) -> str:
        return f"{self.name}.{endpoint}"


def _normalize_prefix(prefix: Optional[str]) -> str:
    if not prefix or not prefix.startswith("/") or prefix == "/":
        raise ConfigurationError(f"Route group prefix must be a non-root path starting with '/': {prefix!r}")
    if prefix.endswith("/"):
        raise ConfigurationError(f"Route group prefix must not end with '/': {prefix!r}")
    return prefix


def role_group(prefix: str, required, name: Optional[str] = None) -> RoleGroup:
    prefix = _normalize_prefix(prefix)
    required_type = parse_required_type(required)
    router = APIRouter(
        prefix=prefix,
        dependencies=[Depends(get_current_user), Depends(require_type(required_type))],
    )
    return RoleGroup(prefix=prefix, required=required_type, name=name or prefix.strip("/"), router=router)


def _overlaps(a: str, b: str) -> bool:
    return a == b or a.startswith(b + "/") or b.startswith(a + "/")


def register_role_group(app: FastAPI, group: RoleGroup) -> None:
    """Mount ``group`` on ``app``. Call after the group's routes are defined."""
    registered = getattr(app.state, "role_groups", ())
    for existing in registered:
        if _overlaps(existing.prefix, group.prefix):
            raise ConfigurationError(
                f"Route group {group.prefix!r} overlaps already registered group {existing.prefix!r}"
            )
        if existing.name == group.name:
            raise ConfigurationError(f"Route group name {group.name!r} is already registered")
    if not group.router.routes:
        raise ConfigurationError(f"Route group {group.prefix!r} has no routes")

    app.include_router(group.router)
    app.state.role_groups = registered + (group,)
    logger.info("Registered route group %s requiring %s", group.prefix, group.required.value)
