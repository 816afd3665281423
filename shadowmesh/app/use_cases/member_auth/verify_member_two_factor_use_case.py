"""
Verify Member 2FA Use Case

Accepts either a TOTP code or the e-mailed backup code.
"""

import hmac
import logging
from typing import Optional
from uuid import UUID

from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.rate_limiter import TWO_FACTOR_VERIFY, RateLimiter
from shadowmesh.app.services.totp import find_matching_counter, is_six_digit_code
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import Member
from shadowmesh.domain.exceptions import InvalidSecret
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberTwoFactorVerifyResponse

logger = logging.getLogger(__name__)


class VerifyMemberTwoFactorUseCase:
    """
    Use case for verifying a member's second factor.

    Business Rules:
    - 2FA must be enabled
    - TOTP is tried first, rejecting steps at or before the last accepted one
    - Backup OTP is single-use and cleared on success or when found expired
    - Rate limited per member
    """

    def __init__(self, uow: UnitOfWork, rate_limiter: RateLimiter, clock: Optional[Clock] = None):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.clock = clock or SystemClock()

    async def execute(self, member_id: UUID, code: str) -> Result[MemberTwoFactorVerifyResponse]:
        """
        Errors:
            - TOO_MANY_REQUESTS: Verification rate limit exceeded
            - MEMBER_NOT_FOUND: Unknown member id
            - NOT_ENABLED: 2FA is not enabled for this member
            - INVALID_CODE: Neither TOTP nor backup code matched
        """
        decision = self.rate_limiter.consume(TWO_FACTOR_VERIFY, f"member:{member_id}")
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many verification attempts. Please try again later.")
            )

        candidate = code.strip()

        async with self.uow:
            member = await self.uow.members.get_by_id(member_id)
            if member is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Member not found"))

            if not member.two_factor_enabled or not member.two_factor_secret:
                return Return.err(Error("NOT_ENABLED", "2FA is not enabled for this account"))

            counter = self._match_totp(member, candidate)
            if counter is not None:
                member.two_factor_last_counter = counter
                await self.uow.members.update(member)
                await self.uow.commit()
                return Return.ok(MemberTwoFactorVerifyResponse(success=True, method="totp"))

            if member.two_factor_otp:
                expires_at = member.two_factor_otp_expires_at
                if expires_at is None or expires_at < self.clock.now():
                    member.two_factor_otp = None
                    member.two_factor_otp_expires_at = None
                    await self.uow.members.update(member)
                    await self.uow.commit()
                elif is_six_digit_code(candidate) and hmac.compare_digest(member.two_factor_otp, candidate):
                    member.two_factor_otp = None
                    member.two_factor_otp_expires_at = None
                    await self.uow.members.update(member)
                    await self.uow.commit()
                    return Return.ok(MemberTwoFactorVerifyResponse(success=True, method="otp"))

            return Return.err(Error("INVALID_CODE", "Invalid verification code"))

    def _match_totp(self, member: Member, candidate: str) -> Optional[int]:
        try:
            return find_matching_counter(
                member.two_factor_secret,
                candidate,
                timestamp=self.clock.timestamp(),
                last_accepted_counter=member.two_factor_last_counter,
            )
        except InvalidSecret:
            logger.error(f"Stored 2FA secret for member {member.id} is not valid base32")
            return None
