"""
User domain model
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Platform roles"""
    DONOR = "DONOR"
    BENEFICIARY = "BENEFICIARY"
    VENDOR = "VENDOR"
    ADMIN = "ADMIN"
    ORACLE = "ORACLE"
    GOVERNMENT = "GOVERNMENT"


# GOVERNMENT accounts are provisioned by administrators only
SELF_REGISTRABLE_ROLES = frozenset({
    Role.DONOR,
    Role.BENEFICIARY,
    Role.VENDOR,
    Role.ADMIN,
    Role.ORACLE,
})


class AccountStatus(str, Enum):
    """Account status, administered outside of the login flow"""
    PENDING = "pending"
    ACTIVE = "active"
    BLOCKED = "blocked"
    SUSPENDED = "suspended"

    @property
    def is_locked(self) -> bool:
        return self in (AccountStatus.BLOCKED, AccountStatus.SUSPENDED)


class User(BaseModel):
    """User as stored in the credential store"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    password_hash: Optional[str] = None
    wallet_address: str
    role: Role
    status: AccountStatus
    nonce: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
