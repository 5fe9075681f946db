"""
Authentication controller: wallet sign-in (SIWE) and session issuance.
"""

from fastapi import APIRouter, Depends, status

from relief_auth.api.controller.auth.dto.input_dto import (
    PrecheckRequestDto, NonceRequestDto, RegisterRequestDto, LoginRequestDto, RefreshTokenRequestDto
)
from relief_auth.api.controller.auth.dto.output_dto import (
    PrecheckResponseDto, NonceResponseDto, MessageResponseDto, LoginResponseDto,
    PublicUserDto, TokenPairResponseDto, UserProfileDto
)
from relief_auth.api.controller.auth.dto.error_responses import error_responses
from relief_auth.api.middleware.authentication.jwt_bearer import access_token_bearer
from relief_auth.core.dependencies import get_auth_service
from relief_auth.core.exceptions.base import BaseAPIException, InternalError
from relief_auth.core.service.auth.auth_service import AuthService
from relief_auth.core.service.auth.models.token import AccessTokenClaims
from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/precheck",
    response_model=PrecheckResponseDto,
    responses=error_responses(400, 404, 500)
)
async def precheck(
    request: PrecheckRequestDto,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Issue a sign-in nonce for a registered email.

    Returns the wallet that must sign and the nonce to embed in the message.
    Any previously issued, unused nonce for the user stops working.
    """
    try:
        wallet_address, nonce = await auth_service.precheck(request.email)
        return PrecheckResponseDto(wallet_address=wallet_address, nonce=nonce)

    except BaseAPIException:
        raise

    except Exception as e:
        logger.error(f"Failed to run precheck: {str(e)}", exc_info=True)
        raise InternalError()


@router.post(
    "/nonce",
    response_model=NonceResponseDto,
    responses=error_responses(400, 404, 500)
)
async def get_nonce(
    request: NonceRequestDto,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Issue a sign-in nonce for a registered wallet address."""
    try:
        nonce = await auth_service.nonce_for_wallet(request.wallet_address)
        return NonceResponseDto(nonce=nonce)

    except BaseAPIException:
        raise

    except Exception as e:
        logger.error(f"Failed to issue nonce: {str(e)}", exc_info=True)
        raise InternalError()


@router.post(
    "/register",
    response_model=MessageResponseDto,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 409, 500)
)
async def register(
    request: RegisterRequestDto,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new account.

    Donors are active immediately, admins start blocked until promoted,
    every other role starts pending. Registration does not log in.
    """
    try:
        await auth_service.register(
            name=request.name,
            email=request.email,
            password=request.password,
            wallet_address=request.wallet_address,
            role=request.role
        )
        return MessageResponseDto(message="Registration successful. Please login.")

    except BaseAPIException:
        raise

    except Exception as e:
        logger.error(f"Failed to register user: {str(e)}", exc_info=True)
        raise InternalError()


@router.post(
    "/login",
    response_model=LoginResponseDto,
    responses=error_responses(400, 401, 403, 404, 500)
)
async def login(
    request: LoginRequestDto,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Verify a signed sign-in message and return a session token pair.

    The message must embed the nonce issued by /precheck or /nonce and be
    signed by the user's registered wallet. A nonce is consumed by the
    first successful verification.
    """
    try:
        result = await auth_service.login(request.email, request.message, request.signature)
        return LoginResponseDto(
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
            user=PublicUserDto.from_user(result.user)
        )

    except BaseAPIException:
        raise

    except Exception as e:
        logger.error(f"Failed to login: {str(e)}", exc_info=True)
        raise InternalError()


@router.post(
    "/refresh",
    response_model=TokenPairResponseDto,
    responses=error_responses(400, 401, 403, 404, 500)
)
async def refresh_token(
    request: RefreshTokenRequestDto,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Exchange a valid refresh token for a new token pair."""
    try:
        tokens = await auth_service.refresh(request.refresh_token)
        return TokenPairResponseDto.from_pair(tokens)

    except BaseAPIException:
        raise

    except Exception as e:
        logger.error(f"Failed to refresh token: {str(e)}", exc_info=True)
        raise InternalError()


@router.get(
    "/me",
    response_model=UserProfileDto,
    responses=error_responses(401, 404, 500)
)
async def me(
    claims: AccessTokenClaims = Depends(access_token_bearer),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Return the profile of the user owning the bearer access token."""
    try:
        user = await auth_service.me(claims)
        return UserProfileDto.from_user(user)

    except BaseAPIException:
        raise

    except Exception as e:
        logger.error(f"Failed to load current user: {str(e)}", exc_info=True)
        raise InternalError()


@router.post("/logout", response_model=MessageResponseDto)
async def logout():
    """
    Acknowledge logout. Tokens are stateless and remain valid until they
    expire; clients discard them.
    """
    return MessageResponseDto(message="Logged out successfully")
