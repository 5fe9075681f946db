from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError

from relief_auth.infra.config.settings import settings
from relief_auth.infra.database import get_database_manager
from relief_auth.core.logger.logger import logger
from relief_auth.core.exceptions.base import BaseAPIException
from relief_auth.core.exceptions.handler import GlobalErrorHandler
from relief_auth.api.controller.auth.auth_controller import router as auth_router
from relief_auth.api.middleware.logging.request_logging import RequestLoggingMiddleware
from relief_auth.api.router import health, protected


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting auth service",
        extra={"service": settings.APP_NAME, "version": settings.APP_VERSION}
    )
    if settings.DB_CREATE_TABLES:
        await get_database_manager().create_tables()

    yield

    await get_database_manager().close()
    logger.info(
        "Shutting down auth service",
        extra={"service": settings.APP_NAME, "version": settings.APP_VERSION}
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="""
Relief platform authentication API.

## Flow
1. `POST /auth/precheck` (or `POST /auth/nonce`) issues a one-time nonce.
2. The wallet signs a Sign-In with Ethereum (EIP-4361) message embedding it.
3. `POST /auth/login` verifies the signature and returns access/refresh tokens.

Protected endpoints require `Authorization: Bearer <access token>`.
        """,
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
        max_age=600,  # 10 minutes
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(BaseAPIException, GlobalErrorHandler.api_exception_handler)
    app.add_exception_handler(RequestValidationError, GlobalErrorHandler.validation_error_handler)
    app.add_exception_handler(Exception, GlobalErrorHandler.general_exception_handler)

    app.include_router(health.router)
    app.include_router(auth_router)
    app.include_router(protected.router)

    return app
