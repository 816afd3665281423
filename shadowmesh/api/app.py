import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from shadowmesh.adapter.services.resend_email_sender import ResendEmailSender
from shadowmesh.app.services.clock import SystemClock
from shadowmesh.app.services.rate_limiter import RateLimiter
from shadowmesh.domain.exceptions import EntropyUnavailable
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_storage_error(request: Request, exc: SQLAlchemyError):
    logger.error(f"Storage error: {type(exc).__name__}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "STORAGE_UNAVAILABLE", "message": "Internal server error"}},
    )


async def handle_entropy_error(request: Request, exc: EntropyUnavailable):
    logger.error("Secure random source unavailable")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "ENTROPY_UNAVAILABLE", "message": "Internal server error"}},
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="ShadowMesh Auth API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Process-wide collaborators, one instance per app
    clock = SystemClock()
    app.state.clock = clock
    app.state.rate_limiter = RateLimiter(
        clock=clock, sweep_interval_seconds=ApplicationConfig.RATE_LIMIT_SWEEP_SECONDS
    )
    app.state.email_sender = ResendEmailSender(
        api_key=ApplicationConfig.RESEND_API_KEY,
        from_email=ApplicationConfig.RESEND_FROM_EMAIL,
        api_url=ApplicationConfig.RESEND_API_URL,
    )

    from shadowmesh.api.routes import admin, health_check, members

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(admin.router, tags=["Admin"])
    app.include_router(members.router, tags=["Members"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(SQLAlchemyError, handle_storage_error)
    app.add_exception_handler(EntropyUnavailable, handle_entropy_error)

    return app
