from fastapi import APIRouter, Depends

from relief_auth.api.middleware.authentication.jwt_bearer import access_token_bearer
from relief_auth.api.middleware.authorization.role_guard import require_roles
from relief_auth.core.service.auth.models.token import AccessTokenClaims
from relief_auth.core.service.auth.models.user import Role
from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/protected", tags=["Protected"])


@router.get("/whoami")
async def whoami(claims: AccessTokenClaims = Depends(access_token_bearer)):
    """Echo the verified access-token claims"""
    return {
        "userId": claims.user_id,
        "role": claims.role.value,
        "walletAddress": claims.wallet_address
    }


@router.get("/admin")
async def admin_area(claims: AccessTokenClaims = Depends(require_roles(Role.ADMIN, Role.GOVERNMENT))):
    """Reachable by administrators and government auditors only"""
    logger.info("Admin area accessed", extra={"user_id": claims.user_id, "role": claims.role.value})
    return {"message": f"Welcome, {claims.role.value.lower()}"}
