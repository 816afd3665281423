"""
Request Admin Password Reset Use Case

Generates a numeric reset code and e-mails it to the admin.
"""

import logging
from datetime import timedelta
from typing import Optional

from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.email_sender import EmailDeliveryError, IEmailSender
from shadowmesh.app.services.email_templates import admin_password_reset_email
from shadowmesh.app.services.rate_limiter import PASSWORD_RESET_REQUEST, RateLimiter
from shadowmesh.app.services.secret_generator import generate_numeric_code
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.libs.result import Error, Result, Return
from .dtos import AdminPasswordResetRequestResponse

logger = logging.getLogger(__name__)

RESET_OTP_LIFETIME = timedelta(minutes=10)
GENERIC_MESSAGE = "If an account exists with this email, a password reset code has been sent."


class RequestAdminPasswordResetUseCase:
    """
    Use case for requesting an admin password reset.

    Business Rules:
    - Max 3 requests per email per hour
    - 6-digit code, valid for 10 minutes, replaces any previous code
    - No email enumeration (same response for valid/invalid emails)
    - E-mail delivery failure is logged, never reported to the caller
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

    async def execute(self, email: str) -> Result[AdminPasswordResetRequestResponse]:
        normalized_email = email.strip().lower()

        decision = self.rate_limiter.consume(PASSWORD_RESET_REQUEST, normalized_email)
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many requests. Please try again later.")
            )

        generic_response = AdminPasswordResetRequestResponse(success=True, message=GENERIC_MESSAGE)

        async with self.uow:
            admin = await self.uow.admins.get_by_email(normalized_email)
            if admin is None:
                return Return.ok(generic_response)

            otp = generate_numeric_code()
            admin.password_reset_otp = otp
            admin.password_reset_otp_expires_at = self.clock.now() + RESET_OTP_LIFETIME
            await self.uow.admins.update(admin)

            recipient = admin.email

            await self.uow.commit()

        subject, html_body = admin_password_reset_email(otp)
        try:
            await self.email_sender.send(recipient, subject, html_body)
        except EmailDeliveryError as exc:
            # Code is stored; the admin can request another one
            logger.warning(f"Failed to send admin password reset email: {exc}")

        return Return.ok(generic_response)
