from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig
from shadowmesh.domain.entities import TokenStage


def generate_admin_token(admin_id: UUID, email: str, stage: TokenStage) -> str:
    """
    Generate admin access token

    Args:
        admin_id: Admin UUID
        email: Admin email
        stage: TokenStage.password while 2FA is pending, TokenStage.full after

    Returns:
        JWT token string (HS256). Pending-2FA tokens are short-lived.
    """
    if stage == TokenStage.full:
        lifetime = timedelta(minutes=ApplicationConfig.ADMIN_TOKEN_MINUTES)
    else:
        lifetime = timedelta(minutes=ApplicationConfig.ADMIN_PENDING_2FA_TOKEN_MINUTES)

    now = datetime.now(UTC)
    payload = {
        "sub": str(admin_id),
        "email": email,
        "stage": stage.value,
        "exp": now + lifetime,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None
