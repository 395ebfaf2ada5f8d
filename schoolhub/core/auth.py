from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from schoolhub.core.config import settings
from schoolhub.core.permissions import Permission, Role, has_permission

bearer_scheme = HTTPBearer(auto_error=True)


@dataclass(slots=True, frozen=True)
class Principal:
    user_id: UUID
    role: Role
    tenant_id: UUID | None
    email: str | None = None

    @property
    def is_superadmin(self) -> bool:
        return self.role is Role.SUPERADMIN


def _decode_jwt(token: str) -> dict:
    options = {"verify_aud": bool(settings.jwt_audience)}
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience or None,
            options=options,
        )
    except JWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        ) from exc


def principal_from_claims(claims: dict) -> Principal:
    subject = claims.get("sub")
    raw_role = claims.get("role")
    raw_tenant = claims.get("tenant_id")

    if not subject or not raw_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token is missing required claims",
        )

    try:
        user_id = UUID(str(subject))
        role = Role(raw_role)
        tenant_id = UUID(str(raw_tenant)) if raw_tenant else None
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token carries malformed claims",
        ) from exc

    return Principal(user_id=user_id, role=role, tenant_id=tenant_id, email=claims.get("email"))


async def require_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Principal:
    principal = principal_from_claims(_decode_jwt(credentials.credentials))
    request.state.principal = principal
    return principal


def require_permission(permission: Permission) -> Callable[..., Awaitable[Principal]]:
    async def _dependency(principal: Principal = Depends(require_principal)) -> Principal:
        if not has_permission(principal.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return principal

    return _dependency
