"""
SQLAlchemy ORM models for database tables
"""

import uuid
from sqlalchemy import Column, String, DateTime, Index, Uuid, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UserModel(Base):
    """SQLAlchemy ORM model for users table"""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=True)
    wallet_address = Column(String(42), nullable=False)
    role = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False)
    nonce = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        # wallet addresses are unique regardless of checksum casing
        Index('uq_users_wallet_address_lower', func.lower(wallet_address), unique=True),
        Index('idx_users_role', 'role'),
        Index('idx_users_status', 'status'),
    )

    def __repr__(self):
        return f"<User(email='{self.email}', wallet_address='{self.wallet_address}', role='{self.role}')>"
