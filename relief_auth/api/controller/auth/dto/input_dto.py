"""
Input DTOs for authentication API endpoints.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from relief_auth.core.service.auth.models.user import Role, SELF_REGISTRABLE_ROLES

WALLET_ADDRESS_PATTERN = re.compile(r'^0x[a-fA-F0-9]{40}$')
BCRYPT_MAX_PASSWORD_BYTES = 72


class CamelModel(BaseModel):
    """Accepts camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PrecheckRequestDto(CamelModel):
    """DTO for precheck request. Presence is enforced by the service."""

    email: Optional[str] = Field(None, description="Registered email")


class NonceRequestDto(CamelModel):
    """DTO for nonce-by-wallet request."""

    wallet_address: Optional[str] = Field(None, description="Registered wallet address")


class RegisterRequestDto(CamelModel):
    """DTO for registration request."""

    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Unique email")
    password: str = Field(..., description="Password for the traditional credential")
    confirm_password: str = Field(..., description="Must equal password")
    wallet_address: str = Field(..., description="0x-prefixed, 40 hex characters")
    role: Role = Field(..., description="One of DONOR, BENEFICIARY, VENDOR, ADMIN, ORACLE")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError('Name must contain at least 2 characters')
        return v

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('Password must contain at least 8 characters')
        if len(v.encode('utf-8')) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f'Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes')
        return v

    @field_validator('confirm_password')
    @classmethod
    def validate_confirm_password(cls, v, info: ValidationInfo):
        if len(v) < 8:
            raise ValueError('Password must contain at least 8 characters')
        password = info.data.get('password')
        if password is not None and v != password:
            raise ValueError("Passwords don't match")
        return v

    @field_validator('wallet_address')
    @classmethod
    def validate_wallet_address(cls, v):
        v = v.strip()
        if not WALLET_ADDRESS_PATTERN.match(v):
            raise ValueError('Invalid wallet address')
        return v

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        if v not in SELF_REGISTRABLE_ROLES:
            raise ValueError(f'Role {v.value} cannot self-register')
        return v


class LoginRequestDto(CamelModel):
    """DTO for SIWE login request."""

    email: Optional[str] = Field(None, description="Registered email")
    message: Optional[str] = Field(None, description="Full EIP-4361 message text that was signed")
    signature: Optional[str] = Field(None, description="Hex-encoded personal_sign signature")


class RefreshTokenRequestDto(CamelModel):
    """DTO for token refresh request."""

    refresh_token: Optional[str] = Field(None, description="Valid refresh token")
