"""
Role-based access control for routes that sit behind the access token.
"""

from typing import Callable, Iterable, Optional

from fastapi import Depends

from relief_auth.api.middleware.authentication.jwt_bearer import access_token_bearer
from relief_auth.core.exceptions.base import ForbiddenError
from relief_auth.core.service.auth.models.token import AccessTokenClaims
from relief_auth.core.service.auth.models.user import Role
from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)


def authorize(claims: Optional[AccessTokenClaims], allowed_roles: Iterable[Role]) -> None:
    """Raise ForbiddenError unless the claims carry one of `allowed_roles`."""
    if claims is None or claims.role is None:
        raise ForbiddenError("Access denied")

    if claims.role not in set(allowed_roles):
        logger.warning(
            "Insufficient permissions",
            extra={"user_id": claims.user_id, "role": claims.role.value}
        )
        raise ForbiddenError("Insufficient permissions")


def require_roles(*allowed_roles: Role) -> Callable:
    """Dependency factory: verified access claims restricted to `allowed_roles`."""

    async def dependency(claims: AccessTokenClaims = Depends(access_token_bearer)) -> AccessTokenClaims:
        authorize(claims, allowed_roles)
        return claims

    return dependency
