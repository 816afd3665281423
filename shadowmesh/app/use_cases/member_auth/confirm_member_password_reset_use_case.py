"""
Confirm Member Password Reset Use Case

Consumes a reset token and sets the member's new password.
"""

import logging
from typing import Optional

from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.credential_schemes import (
    DeterministicDerivationScheme,
    member_credential_scheme,
)
from shadowmesh.app.services.password_policy import MEMBER_PASSWORD_POLICY
from shadowmesh.app.services.rate_limiter import PASSWORD_RESET_VERIFY, RateLimiter
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import AuditEvent, PrincipalType
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberMessageResponse
from .request_member_password_reset_use_case import hash_reset_token

logger = logging.getLogger(__name__)


class ConfirmMemberPasswordResetUseCase:
    """
    Use case for completing a member password reset.

    Business Rules:
    - Max 5 attempts per client per 10 minutes
    - Passwords must match and satisfy the member policy (8+ chars, upper,
      lower, digit, special)
    - Token is single-use and expires after 1 hour
    - Unknown and expired tokens produce the same error
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        clock: Optional[Clock] = None,
        scheme: Optional[DeterministicDerivationScheme] = None,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.clock = clock or SystemClock()
        self.scheme = scheme or member_credential_scheme()

    async def execute(
        self,
        token: str,
        new_password: str,
        confirm_password: str,
        client_ip: Optional[str] = None,
    ) -> Result[MemberMessageResponse]:
        """
        Errors:
            - TOO_MANY_REQUESTS: Attempt limit exceeded for this client
            - PASSWORD_MISMATCH: new_password != confirm_password
            - WEAK_PASSWORD: Password policy violated
            - INVALID_OR_EXPIRED_TOKEN: Token unknown, used or expired
        """
        decision = self.rate_limiter.consume(PASSWORD_RESET_VERIFY, client_ip or "unknown")
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many attempts. Please try again later.")
            )

        if new_password != confirm_password:
            return Return.err(Error("PASSWORD_MISMATCH", "Passwords do not match"))

        policy_check = MEMBER_PASSWORD_POLICY.validate(new_password)
        if policy_check.is_err():
            return Return.err(policy_check.error)

        async with self.uow:
            member = await self.uow.members.get_by_reset_token_hash(hash_reset_token(token))
            if member is None:
                return Return.err(
                    Error("INVALID_OR_EXPIRED_TOKEN", "Invalid or expired reset token")
                )

            expires_at = member.password_reset_expires_at
            if expires_at is None or expires_at < self.clock.now():
                member.password_reset_token_hash = None
                member.password_reset_expires_at = None
                await self.uow.members.update(member)
                await self.uow.commit()
                return Return.err(
                    Error("INVALID_OR_EXPIRED_TOKEN", "Invalid or expired reset token")
                )

            member.password_hash = self.scheme.hash(new_password, str(member.id))
            member.password_reset_token_hash = None
            member.password_reset_expires_at = None
            await self.uow.members.update(member)

            await self.uow.audit_events.create(
                AuditEvent(
                    principal_type=PrincipalType.member,
                    principal_id=member.id,
                    action="member_password_reset",
                    event_metadata={"ip": client_ip},
                )
            )

            await self.uow.commit()
            logger.info(f"Password reset completed for member {member.id}")

            return Return.ok(
                MemberMessageResponse(
                    success=True,
                    message="Password has been reset successfully. You can now login with your new password.",
                )
            )
