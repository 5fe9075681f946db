"""
FastAPI dependency injection functions.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from relief_auth.infra.config.settings import get_settings
from relief_auth.infra.database import get_async_session
from relief_auth.infra.repository.user_repository import UserRepository
from relief_auth.core.service.auth.auth_service import AuthService
from relief_auth.core.service.auth.jwt_service import JWTService
from relief_auth.core.service.auth.nonce_service import NonceService
from relief_auth.core.service.auth.password_service import PasswordService
from relief_auth.core.service.auth.signature_verification import SignatureVerificationService


async def get_user_repository(session: AsyncSession = Depends(get_async_session)) -> UserRepository:
    """Get user repository bound to the request's session."""
    return UserRepository(session)


def get_jwt_service() -> JWTService:
    return JWTService(get_settings())


def get_signature_service() -> SignatureVerificationService:
    return SignatureVerificationService(domain=get_settings().SIWE_DOMAIN)


def get_password_service() -> PasswordService:
    return PasswordService(rounds=get_settings().BCRYPT_ROUNDS)


async def get_auth_service(
    user_repository: UserRepository = Depends(get_user_repository),
    jwt_service: JWTService = Depends(get_jwt_service),
    signature_service: SignatureVerificationService = Depends(get_signature_service),
    password_service: PasswordService = Depends(get_password_service)
) -> AuthService:
    """Get the authentication orchestrator with its collaborators."""
    return AuthService(
        user_repository=user_repository,
        nonce_service=NonceService(user_repository, length=get_settings().NONCE_LENGTH),
        signature_service=signature_service,
        jwt_service=jwt_service,
        password_service=password_service
    )
