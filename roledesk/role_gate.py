"""
Role gate for route groups.

A route group is bound to exactly one UserType when it is registered. For
every request entering the group, ``check_type`` compares the resolved
identity's type to that bound value and either lets the request through or
rejects it before the handler runs.

Matching is exact. An admin does not pass a manager gate.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status

from Security.audit_trail import audit
from .app_context import resolve_identity
from .enums import UserType
from .exceptions import ConfigurationError, DataIntegrityError
from .models import User

logger = logging.getLogger("roledesk.role_gate")


class GateState(str, enum.Enum):
    UNCHECKED = "unchecked"
    ALLOWED = "allowed"
    REJECTED = "rejected"


class RejectReason(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    DATA_INTEGRITY = "data_integrity"


@dataclass(frozen=True)
class GateResult:
    state: GateState
    required: UserType
    reason: Optional[RejectReason] = None
    user_id: Optional[int] = None

    @property
    def allowed(self) -> bool:
        return self.state is GateState.ALLOWED


def parse_required_type(value) -> UserType:
    """Validate a route group's required type. Bad values fail at startup."""
    if value is None or value == "":
        raise ConfigurationError("Route group is missing its required user type")
    try:
        return UserType.parse(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Route group requires unknown user type {value!r}; "
            f"expected one of {[t.value for t in UserType]}"
        ) from exc


def check_type(required: UserType, identity: Optional[User]) -> GateResult:
    """Decide whether ``identity`` may enter a group that requires ``required``."""
    if identity is None:
        return GateResult(GateState.REJECTED, required, RejectReason.UNAUTHENTICATED)

    try:
        actual = identity.user_type
    except DataIntegrityError:
        logger.error("Rejecting user %s: stored type %r is not a known user type", identity.id, identity.type)
        return GateResult(GateState.REJECTED, required, RejectReason.DATA_INTEGRITY, identity.id)

    if actual is not required:
        return GateResult(GateState.REJECTED, required, RejectReason.FORBIDDEN, identity.id)
    return GateResult(GateState.ALLOWED, required, user_id=identity.id)


def reject(result: GateResult) -> None:
    audit(
        "role_gate_rejected",
        user_id=result.user_id,
        details=f"required={result.required.value};reason={result.reason.value}",
    )
    if result.reason is RejectReason.UNAUTHENTICATED:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


def require_type(required):
    """
    Dependency factory: bind a required UserType to a gate.

    ``required`` is parsed here, so a typo in a route group definition stops
    the app from starting instead of rejecting every request.
    """
    required_type = parse_required_type(required)

    async def _require_type(identity: Optional[User] = Depends(resolve_identity)) -> User:
        result = check_type(required_type, identity)
        if not result.allowed:
            reject(result)
        return identity

    _require_type.required_type = required_type
    return _require_type
