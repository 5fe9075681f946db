from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from pydantic import ValidationError as PydanticValidationError

from relief_auth.core.exceptions.base import UnauthorizedError
from relief_auth.core.logger.logger import get_logger
from relief_auth.core.service.auth.models.token import (
    AccessTokenClaims, RefreshTokenClaims, TokenPair, TokenType
)
from relief_auth.core.service.auth.models.user import User
from relief_auth.infra.config.settings import Settings, get_settings

logger = get_logger(__name__)


class JWTService:
    """
    Mints and verifies stateless session tokens.

    Access and refresh tokens are signed with different secrets, so a token
    of one class never verifies as the other.
    """

    def __init__(self, config: Optional[Settings] = None):
        config = config or get_settings()
        self.algorithm = config.JWT_ALGORITHM
        self.access_secret = config.JWT_ACCESS_SECRET
        self.refresh_secret = config.JWT_REFRESH_SECRET
        self.access_token_expire_minutes = config.JWT_ACCESS_EXPIRE_MINUTES
        self.refresh_token_expire_days = config.JWT_REFRESH_EXPIRE_DAYS

    def _secret_for(self, token_type: TokenType) -> str:
        return self.access_secret if token_type == TokenType.ACCESS else self.refresh_secret

    def _create_token(
        self,
        claims: Dict[str, Any],
        token_type: TokenType,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        if expires_delta is None:
            if token_type == TokenType.ACCESS:
                expires_delta = timedelta(minutes=self.access_token_expire_minutes)
            else:
                expires_delta = timedelta(days=self.refresh_token_expire_days)

        issued_at = datetime.now(timezone.utc)
        to_encode = {
            **claims,
            "iat": issued_at,
            "exp": issued_at + expires_delta
        }

        return jwt.encode(to_encode, self._secret_for(token_type), algorithm=self.algorithm)

    def create_access_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        return self._create_token(
            {
                "userId": str(user.id),
                "role": user.role.value,
                "walletAddress": user.wallet_address
            },
            TokenType.ACCESS,
            expires_delta
        )

    def create_refresh_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        return self._create_token({"userId": str(user.id)}, TokenType.REFRESH, expires_delta)

    def generate_tokens(self, user: User) -> TokenPair:
        """Generate a new access and refresh token pair"""
        return TokenPair(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user)
        )

    def verify(self, token: str, secret: str) -> Dict[str, Any]:
        """
        Verify signature and expiry, returning the raw claims.
        Raises UnauthorizedError for anything that is not a valid token.
        """
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]}
            )
        except ExpiredSignatureError:
            logger.info("Token expired")
            raise UnauthorizedError("Token has expired")
        except InvalidTokenError as e:
            logger.warning("Invalid token", extra={"error": str(e)})
            raise UnauthorizedError("Invalid token")

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        payload = self.verify(token, self.access_secret)
        try:
            return AccessTokenClaims.model_validate(payload)
        except PydanticValidationError:
            logger.warning("Access token is missing claims")
            raise UnauthorizedError("Invalid token")

    def verify_refresh_token(self, token: str) -> RefreshTokenClaims:
        payload = self.verify(token, self.refresh_secret)
        try:
            return RefreshTokenClaims.model_validate(payload)
        except PydanticValidationError:
            logger.warning("Refresh token is missing claims")
            raise UnauthorizedError("Invalid token")
