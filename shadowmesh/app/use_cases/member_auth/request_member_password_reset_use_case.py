"""
Request Member Password Reset Use Case

Issues a single-use reset link by e-mail. The response never reveals
whether the address belongs to a member.
"""

import hashlib
import logging
from datetime import timedelta
from typing import Optional

from config import ApplicationConfig
from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.email_sender import EmailDeliveryError, IEmailSender
from shadowmesh.app.services.email_templates import password_reset_email
from shadowmesh.app.services.rate_limiter import PASSWORD_RESET_REQUEST, RateLimiter
from shadowmesh.app.services.secret_generator import generate_opaque_token
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberMessageResponse

logger = logging.getLogger(__name__)

RESET_TOKEN_LIFETIME = timedelta(hours=1)
GENERIC_MESSAGE = "If an account exists with this email, a password reset link has been sent."


def hash_reset_token(token: str) -> str:
    """Reset tokens are stored as SHA-256 hex digests"""
    return hashlib.sha256(token.encode()).hexdigest()


class RequestMemberPasswordResetUseCase:
    """
    Use case for requesting a member password reset.

    Business Rules:
    - Max 3 requests per email per hour
    - 256-bit opaque token, valid for 1 hour, replaces any previous token
    - Only the token hash is persisted
    - No email enumeration
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        email_sender: IEmailSender,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.email_sender = email_sender
        self.clock = clock or SystemClock()

    async def execute(self, email: str) -> Result[MemberMessageResponse]:
        normalized_email = email.strip().lower()

        decision = self.rate_limiter.consume(PASSWORD_RESET_REQUEST, normalized_email)
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many requests. Please try again later.")
            )

        generic_response = MemberMessageResponse(success=True, message=GENERIC_MESSAGE)

        async with self.uow:
            member = await self.uow.members.get_by_email(normalized_email)
            if member is None:
                return Return.ok(generic_response)

            token = generate_opaque_token()
            member.password_reset_token_hash = hash_reset_token(token)
            member.password_reset_expires_at = self.clock.now() + RESET_TOKEN_LIFETIME
            await self.uow.members.update(member)

            recipient = member.email

            await self.uow.commit()

        reset_link = f"{ApplicationConfig.PUBLIC_SITE_URL}/reset-password?token={token}"
        subject, html_body = password_reset_email(reset_link)
        try:
            await self.email_sender.send(recipient, subject, html_body)
        except EmailDeliveryError as exc:
            logger.warning(f"Failed to send password reset email: {exc}")

        return Return.ok(generic_response)
