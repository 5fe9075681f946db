from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from relief_auth.infra.config.settings import settings
from relief_auth.infra.database import get_database_manager

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health():
    """Liveness probe; does not touch the database."""
    return {"status": "ok", "service": settings.APP_NAME, "version": settings.APP_VERSION}


@router.get("/health/ready")
async def readiness():
    """Readiness probe: the credential store must answer."""
    database_ok = await get_database_manager().ping()
    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if database_ok else "unavailable",
            "database": "healthy" if database_ok else "unhealthy"
        }
    )
