from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from relief_auth.core.dependencies import get_jwt_service
from relief_auth.core.exceptions.base import UnauthorizedError
from relief_auth.core.service.auth.jwt_service import JWTService
from relief_auth.core.service.auth.models.token import AccessTokenClaims
from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)


class AccessTokenBearer(HTTPBearer):
    """Resolves `Authorization: Bearer <access token>` into verified claims."""

    def __init__(self):
        super().__init__(auto_error=False)

    async def __call__(
        self,
        request: Request,
        jwt_service: JWTService = Depends(get_jwt_service)
    ) -> AccessTokenClaims:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if credentials is None:
            logger.warning("Missing or malformed authorization header", extra={"path": request.url.path})
            raise UnauthorizedError("Unauthorized")

        claims = jwt_service.verify_access_token(credentials.credentials)
        request.state.user_claims = claims
        return claims


access_token_bearer = AccessTokenBearer()
