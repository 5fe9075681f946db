"""
Shared test configuration and fixtures.
"""

import os

# Must be set before relief_auth settings are first imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from httpx import ASGITransport, AsyncClient
from siwe import SiweMessage

from relief_auth.app import create_app
from relief_auth.core.service.auth.jwt_service import JWTService
from relief_auth.core.service.auth.models.user import AccountStatus, Role, User
from relief_auth.core.service.auth.nonce_service import NonceService
from relief_auth.core.service.auth.password_service import PasswordService
from relief_auth.core.service.auth.signature_verification import SignatureVerificationService
from relief_auth.core.service.auth.auth_service import AuthService
from relief_auth.infra.database import DatabaseManager, get_async_session
from relief_auth.infra.repository.user_repository import UserRepository

# Well-known development key (Hardhat account #0)
KNOWN_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
KNOWN_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


def iso_now(offset_seconds: int = 0) -> str:
    moment = datetime.now(timezone.utc) + timedelta(seconds=offset_seconds)
    return moment.isoformat(timespec="seconds").replace("+00:00", "Z")


def build_siwe_message(
    address: str,
    nonce: str,
    domain: str = "relief.example.com",
    statement: Optional[str] = "Sign in to the relief platform.",
    chain_id: int = 43114,
    issued_at: Optional[str] = None,
    expiration_time: Optional[str] = None,
    not_before: Optional[str] = None,
) -> str:
    return SiweMessage(
        domain=domain,
        address=address,
        statement=statement,
        uri=f"https://{domain}/login",
        version="1",
        chain_id=chain_id,
        nonce=nonce,
        issued_at=issued_at or iso_now(),
        expiration_time=expiration_time,
        not_before=not_before,
    ).prepare_message()


def sign_text(text: str, private_key) -> str:
    signed = Account.sign_message(encode_defunct(text=text), private_key=private_key)
    return "0x" + bytes(signed.signature).hex()


@pytest.fixture
def siwe_message_factory():
    return build_siwe_message


@pytest.fixture
def sign_message():
    return sign_text


@pytest.fixture
def test_wallet():
    """Create a random wallet for signing"""
    account = Account.create()
    return {
        'address': account.address,
        'key': account.key
    }


@pytest.fixture
def known_wallet():
    return {
        'address': KNOWN_ADDRESS,
        'key': KNOWN_PRIVATE_KEY
    }


@pytest.fixture
async def db_manager() -> AsyncGenerator[DatabaseManager, None]:
    """Fresh in-memory database per test"""
    manager = DatabaseManager("sqlite+aiosqlite:///:memory:")
    await manager.create_tables()
    try:
        yield manager
    finally:
        await manager.close()


@pytest.fixture
async def session(db_manager):
    async with db_manager.get_session_factory()() as session:
        yield session


@pytest.fixture
def user_repository(session) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def jwt_service() -> JWTService:
    return JWTService()


@pytest.fixture
def auth_service(user_repository, jwt_service) -> AuthService:
    return AuthService(
        user_repository=user_repository,
        nonce_service=NonceService(user_repository),
        signature_service=SignatureVerificationService(),
        jwt_service=jwt_service,
        password_service=PasswordService(rounds=4)
    )


@pytest.fixture
def app(db_manager):
    app = create_app()

    async def override_session():
        async with db_manager.get_session_factory()() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def create_user(user_repository):
    """Insert a user straight into the store"""
    async def _create(
        wallet_address: str,
        email: str = "ana@example.com",
        role: Role = Role.DONOR,
        status: AccountStatus = AccountStatus.ACTIVE,
        name: str = "Ana"
    ) -> User:
        return await user_repository.create(
            name=name,
            email=email,
            password_hash=None,
            wallet_address=wallet_address,
            role=role,
            status=status
        )
    return _create
