"""
Output DTOs for authentication API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from relief_auth.core.service.auth.models.token import TokenPair
from relief_auth.core.service.auth.models.user import User


class CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PrecheckResponseDto(CamelResponse):
    wallet_address: str = Field(..., description="Wallet that must sign the message")
    nonce: str = Field(..., description="Nonce to embed in the sign-in message")


class NonceResponseDto(CamelResponse):
    nonce: str = Field(..., description="Nonce to embed in the sign-in message")


class MessageResponseDto(CamelResponse):
    message: str


class PublicUserDto(CamelResponse):
    """User projection returned on login; never exposes hash or nonce."""

    id: str
    name: str
    email: str
    role: str
    status: str

    @classmethod
    def from_user(cls, user: User) -> "PublicUserDto":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role.value,
            status=user.status.value
        )


class UserProfileDto(PublicUserDto):
    """User projection returned by /auth/me."""

    wallet_address: str

    @classmethod
    def from_user(cls, user: User) -> "UserProfileDto":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            wallet_address=user.wallet_address,
            role=user.role.value,
            status=user.status.value
        )


class TokenPairResponseDto(CamelResponse):
    access_token: str = Field(..., description="Short-lived bearer token")
    refresh_token: str = Field(..., description="Long-lived refresh token")

    @classmethod
    def from_pair(cls, tokens: TokenPair) -> "TokenPairResponseDto":
        return cls(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


class LoginResponseDto(TokenPairResponseDto):
    user: PublicUserDto
