"""
Authentication orchestrator.

A login cycle moves Idle -> NoncePending (precheck / nonce) ->
Verified (signature checked, nonce consumed) -> SessionIssued, or ends
Rejected on any failure. Every failure is terminal for the call; clients
restart from precheck.
"""

from typing import Optional, Tuple

from pydantic import BaseModel

from relief_auth.core.exceptions.base import (
    ConflictError, ForbiddenError, InvalidStateError, NotFoundError, UnauthorizedError, ValidationError
)
from relief_auth.core.logger.logger import get_logger
from relief_auth.core.service.auth.jwt_service import JWTService
from relief_auth.core.service.auth.models.token import AccessTokenClaims, TokenPair
from relief_auth.core.service.auth.models.user import AccountStatus, Role, User
from relief_auth.core.service.auth.nonce_service import NonceService
from relief_auth.core.service.auth.password_service import PasswordService
from relief_auth.core.service.auth.signature_verification import (
    SignatureVerificationService, SiweErrorType, SiweVerificationResult
)
from relief_auth.infra.repository.user_repository import UserRepository

logger = get_logger(__name__)


class LoginResult(BaseModel):
    tokens: TokenPair
    user: User


def initial_status_for_role(role: Role) -> AccountStatus:
    """Donors start active, admins wait for manual promotion, everyone else awaits review"""
    if role == Role.DONOR:
        return AccountStatus.ACTIVE
    if role == Role.ADMIN:
        return AccountStatus.BLOCKED
    return AccountStatus.PENDING


def verification_details(result: SiweVerificationResult) -> dict:
    """
    Only malformed messages are described to the caller; nonce, timing and
    recovery failures all surface as the same generic category.
    """
    if result.error_type == SiweErrorType.INVALID_MESSAGE:
        return {"type": SiweErrorType.INVALID_MESSAGE.value, "reason": result.error}
    return {"type": "verification_failed"}


class AuthService:

    def __init__(
        self,
        user_repository: UserRepository,
        nonce_service: NonceService,
        signature_service: SignatureVerificationService,
        jwt_service: JWTService,
        password_service: PasswordService
    ):
        self.user_repository = user_repository
        self.nonce_service = nonce_service
        self.signature_service = signature_service
        self.jwt_service = jwt_service
        self.password_service = password_service

    async def precheck(self, email: Optional[str]) -> Tuple[str, str]:
        """Issue a nonce for a registered email; returns (wallet_address, nonce)"""
        if not email:
            raise ValidationError("Email is required")

        user = await self.user_repository.find_by_email(email.strip().lower())
        if not user:
            raise NotFoundError("User not found. Please register first.")

        nonce = await self.nonce_service.issue(user.id)
        return user.wallet_address, nonce

    async def nonce_for_wallet(self, wallet_address: Optional[str]) -> str:
        if not wallet_address:
            raise ValidationError("Wallet address is required")

        user = await self.user_repository.find_by_wallet(wallet_address.strip())
        if not user:
            raise NotFoundError("User not found")

        return await self.nonce_service.issue(user.id)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        wallet_address: str,
        role: Role
    ) -> User:
        """Create an account; the caller logs in separately"""
        email = email.strip().lower()
        if await self.user_repository.find_by_email(email):
            raise ConflictError("Email already exists")
        if await self.user_repository.find_by_wallet(wallet_address):
            raise ConflictError("Wallet address already exists")

        password_hash = await self.password_service.hash_async(password)
        status = initial_status_for_role(role)

        user = await self.user_repository.create(
            name=name,
            email=email,
            password_hash=password_hash,
            wallet_address=wallet_address,
            role=role,
            status=status
        )
        logger.info(
            "User registered",
            extra={"user_id": str(user.id), "role": role.value, "status": status.value}
        )
        return user

    async def login(
        self,
        email: Optional[str],
        message: Optional[str],
        signature: Optional[str]
    ) -> LoginResult:
        if not email or not message or not signature:
            raise ValidationError("Email, message, and signature are required")

        user = await self.user_repository.find_by_email(email.strip().lower())
        if not user:
            raise NotFoundError("User not found")

        if not user.nonce:
            raise InvalidStateError("Nonce not generated for user")

        verification = self.signature_service.verify(message, signature, user.nonce)
        if not verification.success:
            # nonce stays valid so a corrected message can be retried
            logger.warning(
                "Login rejected: signature verification failed",
                extra={"user_id": str(user.id), "error_type": verification.error_type}
            )
            raise UnauthorizedError("Invalid signature", verification_details(verification))

        if verification.address.lower() != user.wallet_address.lower():
            logger.warning(
                "Login rejected: wallet address mismatch",
                extra={"user_id": str(user.id), "recovered_address": verification.address}
            )
            raise UnauthorizedError("Wallet address mismatch")

        if not await self.user_repository.consume_nonce(user.id, user.nonce):
            # a concurrent login or a new precheck got there first
            raise InvalidStateError("Nonce not generated for user")

        # the nonce is spent even when the account turns out to be locked
        if user.status.is_locked:
            logger.warning(
                "Login rejected: account locked",
                extra={"user_id": str(user.id), "status": user.status.value}
            )
            raise ForbiddenError("Account is locked")

        tokens = self.jwt_service.generate_tokens(user)
        logger.info("Login successful", extra={"user_id": str(user.id), "role": user.role.value})
        return LoginResult(tokens=tokens, user=user)

    async def refresh(self, refresh_token: Optional[str]) -> TokenPair:
        """Exchange a refresh token for a new pair carrying current role/wallet"""
        if not refresh_token:
            raise ValidationError("Refresh token is required")

        claims = self.jwt_service.verify_refresh_token(refresh_token)
        user = await self.user_repository.find_by_id(claims.user_id)
        if not user:
            raise NotFoundError("User not found")

        if user.status.is_locked:
            raise ForbiddenError("Account is locked")

        return self.jwt_service.generate_tokens(user)

    async def me(self, claims: Optional[AccessTokenClaims]) -> User:
        if claims is None or not claims.user_id:
            raise UnauthorizedError("Unauthorized")

        user = await self.user_repository.find_by_id(claims.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
