from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from shadowmesh.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from shadowmesh.api.error import ClientError
from shadowmesh.api.utils.jwt import verify_jwt
from shadowmesh.app.services.clock import Clock
from shadowmesh.app.services.email_sender import IEmailSender
from shadowmesh.app.services.rate_limiter import RateLimiter
from shadowmesh.domain.entities import TokenStage
from shadowmesh.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_email_sender(request: Request) -> IEmailSender:
    return request.app.state.email_sender


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify an admin JWT from the Authorization header.

    Accepts both token stages, so it guards the 2FA verify and status routes.

    Returns:
        Decoded JWT payload containing sub, email, stage

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)
    if payload is None or "sub" not in payload:
        raise ClientError(
            Error("UNAUTHORIZED", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload


async def get_fully_authenticated_admin(payload: dict = Depends(get_current_admin)) -> dict:
    """Like get_current_admin, but rejects tokens still waiting on 2FA"""
    if payload.get("stage") != TokenStage.full.value:
        raise ClientError(
            Error("TWO_FACTOR_REQUIRED", "Two-factor verification required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return payload
