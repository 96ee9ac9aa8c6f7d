"""Dependency injection: session resolution, page gate enforcement, business context."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.identity import EmployeeIdentity, Identity, OwnerIdentity, Unauthenticated
from app.core.permissions import Action, Page, is_allowed
from app.db.base import get_db
from app.services.session import resolve_session

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


async def get_identity(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    return await resolve_session(db, token)


async def get_current_identity(
    identity: Identity = Depends(get_identity),
) -> OwnerIdentity | EmployeeIdentity:
    """Reject unauthenticated callers with 401."""
    if isinstance(identity, Unauthenticated):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def require_owner(
    identity: OwnerIdentity | EmployeeIdentity = Depends(get_current_identity),
) -> OwnerIdentity:
    if not isinstance(identity, OwnerIdentity):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Owner account required",
        )
    return identity


def require_page(page: Page, action: Action = Action.VIEW):
    """Dependency factory: checks the access table for ``page``/``action``."""

    async def checker(
        identity: OwnerIdentity | EmployeeIdentity = Depends(get_current_identity),
    ) -> OwnerIdentity | EmployeeIdentity:
        if isinstance(identity, OwnerIdentity) and identity.business is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Business setup is not complete",
            )
        if not is_allowed(identity, page, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"No {action.value} access to '{page.value}'",
            )
        return identity

    return checker
