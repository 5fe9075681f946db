from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from relief_auth.core.service.auth.models.user import Role


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class AccessTokenClaims(BaseModel):
    """Claims carried by an access token"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", description="Subject user id")
    role: Role = Field(..., description="User role at issuance")
    wallet_address: str = Field(..., alias="walletAddress", description="Registered wallet address")
    iat: int = Field(..., description="Issued at (unix seconds)")
    exp: int = Field(..., description="Expiration (unix seconds)")


class RefreshTokenClaims(BaseModel):
    """Claims carried by a refresh token"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", description="Subject user id")
    iat: int = Field(..., description="Issued at (unix seconds)")
    exp: int = Field(..., description="Expiration (unix seconds)")


class TokenPair(BaseModel):
    """Access/refresh pair minted on login"""
    access_token: str
    refresh_token: str
