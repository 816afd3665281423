"""
Send Member OTP Use Case

E-mails a backup one-time code for members who cannot reach their
authenticator app.
"""

import logging
from datetime import timedelta
from typing import Optional

from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.email_sender import EmailDeliveryError, IEmailSender
from shadowmesh.app.services.email_templates import verification_code_email
from shadowmesh.app.services.rate_limiter import OTP_REQUEST, RateLimiter
from shadowmesh.app.services.secret_generator import generate_numeric_code
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberMessageResponse

logger = logging.getLogger(__name__)

BACKUP_OTP_LIFETIME = timedelta(minutes=10)
GENERIC_MESSAGE = "If this email is registered, you will receive an OTP code."


class SendMemberOtpUseCase:
    """
    Business Rules:
    - Max 5 requests per email per hour
    - 6-digit code, valid for 10 minutes, single-use
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

        decision = self.rate_limiter.consume(OTP_REQUEST, normalized_email)
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many OTP requests. Please try again later.")
            )

        generic_response = MemberMessageResponse(success=True, message=GENERIC_MESSAGE)

        async with self.uow:
            member = await self.uow.members.get_by_email(normalized_email)
            if member is None:
                return Return.ok(generic_response)

            otp = generate_numeric_code()
            member.two_factor_otp = otp
            member.two_factor_otp_expires_at = self.clock.now() + BACKUP_OTP_LIFETIME
            await self.uow.members.update(member)

            recipient = member.email

            await self.uow.commit()

        subject, html_body = verification_code_email(otp)
        try:
            await self.email_sender.send(recipient, subject, html_body)
        except EmailDeliveryError as exc:
            logger.warning(f"Failed to send OTP email: {exc}")

        return Return.ok(generic_response)
