"""Caller identity forwarded by the API gateway.

The gateway verifies credentials and forwards the subject as ``X-User-Id``
and its roles as a comma separated ``X-User-Roles`` header. Both are trusted
as-is here.
"""

from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Header

from user_service.core.exceptions import AuthenticationError, ForbiddenError
from user_service.domain.models import Role


@dataclass(frozen=True)
class Principal:
    user_id: str
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN.value in self.roles


def parse_roles(raw: Optional[str]) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(r.strip().lower() for r in raw.split(",") if r.strip())


def get_principal(
    x_user_id: Optional[str] = Header(default=None),
    x_user_roles: Optional[str] = Header(default=None),
) -> Principal:
    """Provide the authenticated caller; 401 when the gateway sent no identity."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError()
    return Principal(user_id=x_user_id.strip(), roles=parse_roles(x_user_roles))


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise ForbiddenError("Admin role required")
    return principal
