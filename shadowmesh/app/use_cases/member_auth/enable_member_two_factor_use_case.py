"""
Enable Member 2FA Use Case
"""

import logging
from typing import Optional
from uuid import UUID

from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.rate_limiter import TWO_FACTOR_VERIFY, RateLimiter
from shadowmesh.app.services.totp import find_matching_counter
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import AuditEvent, PrincipalType
from shadowmesh.domain.exceptions import InvalidSecret
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberMessageResponse

logger = logging.getLogger(__name__)


class EnableMemberTwoFactorUseCase:
    """
    Use case for enabling member 2FA.

    Business Rules:
    - Requires a secret from a prior setup call
    - Code must match the stored secret within +/- one step
    - Rate limited per member
    """

    def __init__(self, uow: UnitOfWork, rate_limiter: RateLimiter, clock: Optional[Clock] = None):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.clock = clock or SystemClock()

    async def execute(self, member_id: UUID, code: str) -> Result[MemberMessageResponse]:
        decision = self.rate_limiter.consume(TWO_FACTOR_VERIFY, f"member:{member_id}")
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many verification attempts. Please try again later.")
            )

        async with self.uow:
            member = await self.uow.members.get_by_id(member_id)
            if member is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Member not found"))

            if not member.two_factor_secret:
                return Return.err(
                    Error("NOT_CONFIGURED", "2FA not set up. Please set it up first.")
                )

            try:
                counter = find_matching_counter(
                    member.two_factor_secret,
                    code.strip(),
                    timestamp=self.clock.timestamp(),
                )
            except InvalidSecret:
                logger.error(f"Stored 2FA secret for member {member.id} is not valid base32")
                return Return.err(Error("INVALID_SECRET", "Stored 2FA secret is corrupt"))

            if counter is None:
                return Return.err(
                    Error(
                        "INVALID_CODE",
                        "Invalid code. Please enter the current code from your authenticator app.",
                    )
                )

            member.two_factor_enabled = True
            member.two_factor_last_counter = counter
            await self.uow.members.update(member)

            await self.uow.audit_events.create(
                AuditEvent(
                    principal_type=PrincipalType.member,
                    principal_id=member.id,
                    action="member_2fa_enabled",
                )
            )

            await self.uow.commit()

            return Return.ok(MemberMessageResponse(success=True, message="2FA enabled successfully"))
