"""
Verify Admin 2FA Use Case

Second login step: checks a TOTP code and upgrades the admin to a full token.
"""

import logging
from typing import Optional
from uuid import UUID

from shadowmesh.api.utils.jwt import generate_admin_token
from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.rate_limiter import TWO_FACTOR_VERIFY, RateLimiter
from shadowmesh.app.services.totp import find_matching_counter
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import TokenStage
from shadowmesh.domain.exceptions import InvalidSecret
from shadowmesh.libs.result import Error, Result, Return
from .dtos import AdminTwoFactorVerifyResponse

logger = logging.getLogger(__name__)


class VerifyAdminTwoFactorUseCase:
    """
    Use case for verifying an admin's TOTP code.

    Business Rules:
    - Rate limited per admin (not coupled to password lockout)
    - Requires a stored secret
    - Codes at or before the last accepted step are rejected (no replay)
    - Success issues a stage=full admin token
    """

    def __init__(self, uow: UnitOfWork, rate_limiter: RateLimiter, clock: Optional[Clock] = None):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.clock = clock or SystemClock()

    async def execute(self, admin_id: UUID, code: str) -> Result[AdminTwoFactorVerifyResponse]:
        decision = self.rate_limiter.consume(TWO_FACTOR_VERIFY, f"admin:{admin_id}")
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many verification attempts. Please try again later.")
            )

        async with self.uow:
            admin = await self.uow.admins.get_by_id(admin_id)
            if admin is None:
                return Return.err(Error("ADMIN_NOT_FOUND", "Admin account not found"))

            if not admin.two_factor_secret:
                return Return.err(Error("NOT_CONFIGURED", "2FA not configured"))

            try:
                counter = find_matching_counter(
                    admin.two_factor_secret,
                    code.strip(),
                    timestamp=self.clock.timestamp(),
                    last_accepted_counter=admin.two_factor_last_counter,
                )
            except InvalidSecret:
                logger.error(f"Stored 2FA secret for admin {admin.id} is not valid base32")
                return Return.err(Error("INVALID_SECRET", "Stored 2FA secret is corrupt"))

            if counter is None:
                return Return.err(Error("INVALID_CODE", "Invalid 2FA code"))

            admin.two_factor_last_counter = counter
            await self.uow.admins.update(admin)
            await self.uow.commit()

            return Return.ok(
                AdminTwoFactorVerifyResponse(
                    success=True,
                    message="2FA verified successfully",
                    access_token=generate_admin_token(admin.id, admin.email, TokenStage.full),
                )
            )
