import jwt
import pytest
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from relief_auth.core.exceptions.base import UnauthorizedError
from relief_auth.core.service.auth.jwt_service import JWTService
from relief_auth.core.service.auth.models.user import AccountStatus, Role, User
from relief_auth.infra.config.settings import get_settings

settings = get_settings()

TEST_WALLET_ADDRESS = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"


@pytest.fixture
def user():
    return User(
        id=uuid4(),
        name="Ana",
        email="ana@example.com",
        wallet_address=TEST_WALLET_ADDRESS,
        role=Role.VENDOR,
        status=AccountStatus.ACTIVE
    )


def test_generate_tokens(jwt_service, user):
    """Should create two distinct, verifiable tokens"""
    tokens = jwt_service.generate_tokens(user)

    assert tokens.access_token
    assert tokens.refresh_token
    assert tokens.access_token != tokens.refresh_token

    access = jwt_service.verify_access_token(tokens.access_token)
    refresh = jwt_service.verify_refresh_token(tokens.refresh_token)

    assert access.user_id == str(user.id)
    assert access.role == Role.VENDOR
    assert access.wallet_address == TEST_WALLET_ADDRESS
    assert refresh.user_id == str(user.id)


def test_access_token_claim_shape(jwt_service, user):
    """Access token carries exactly userId, role, walletAddress, iat and exp"""
    token = jwt_service.create_access_token(user)
    payload = jwt.decode(token, settings.JWT_ACCESS_SECRET, algorithms=[settings.JWT_ALGORITHM])

    assert set(payload) == {"userId", "role", "walletAddress", "iat", "exp"}
    assert payload["role"] == "VENDOR"
    assert payload["exp"] - payload["iat"] == settings.JWT_ACCESS_EXPIRE_MINUTES * 60


def test_refresh_token_claim_shape(jwt_service, user):
    """Refresh token never carries role or wallet address"""
    token = jwt_service.create_refresh_token(user)
    payload = jwt.decode(token, settings.JWT_REFRESH_SECRET, algorithms=[settings.JWT_ALGORITHM])

    assert set(payload) == {"userId", "iat", "exp"}
    assert payload["exp"] - payload["iat"] == settings.JWT_REFRESH_EXPIRE_DAYS * 24 * 3600


def test_token_classes_use_distinct_secrets(jwt_service, user):
    """Should reject a token presented as the other class"""
    tokens = jwt_service.generate_tokens(user)

    with pytest.raises(UnauthorizedError) as exc_info:
        jwt_service.verify_refresh_token(tokens.access_token)
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid token"

    with pytest.raises(UnauthorizedError):
        jwt_service.verify_access_token(tokens.refresh_token)


def test_verify_expired_token(jwt_service, user):
    """Should reject expired token"""
    token = jwt_service.create_access_token(user, expires_delta=timedelta(seconds=-1))

    with pytest.raises(UnauthorizedError) as exc_info:
        jwt_service.verify_access_token(token)

    assert exc_info.value.message == "Token has expired"


def test_verify_tampered_token(jwt_service, user):
    token = jwt_service.create_access_token(user)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(UnauthorizedError) as exc_info:
        jwt_service.verify_access_token(tampered)

    assert exc_info.value.message == "Invalid token"


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_verify_garbage(jwt_service, token):
    with pytest.raises(UnauthorizedError):
        jwt_service.verify_access_token(token)


def test_verify_token_missing_claims(jwt_service):
    """Correctly signed token without the expected claims is still invalid"""
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"userId": str(uuid4()), "iat": now, "exp": now + timedelta(minutes=5)},
        settings.JWT_ACCESS_SECRET,
        algorithm=settings.JWT_ALGORITHM
    )

    with pytest.raises(UnauthorizedError):
        jwt_service.verify_access_token(token)


def test_verify_token_without_expiry(jwt_service, user):
    token = jwt.encode(
        {"userId": str(user.id), "role": "DONOR", "walletAddress": TEST_WALLET_ADDRESS},
        settings.JWT_ACCESS_SECRET,
        algorithm=settings.JWT_ALGORITHM
    )

    with pytest.raises(UnauthorizedError):
        jwt_service.verify_access_token(token)


def test_verify_returns_raw_claims(jwt_service, user):
    token = jwt_service.create_refresh_token(user)

    claims = jwt_service.verify(token, settings.JWT_REFRESH_SECRET)

    assert claims["userId"] == str(user.id)
    with pytest.raises(UnauthorizedError):
        jwt_service.verify(token, "some-other-secret")
