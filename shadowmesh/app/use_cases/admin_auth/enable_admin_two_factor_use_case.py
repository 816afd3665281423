"""
Enable Admin 2FA Use Case

Turns on TOTP once the admin proves possession of the provisioned secret.
"""

import hmac
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
from .dtos import AdminTwoFactorResponse

logger = logging.getLogger(__name__)


class EnableAdminTwoFactorUseCase:
    """
    Use case for enabling admin 2FA.

    Business Rules:
    - Rate limited per admin before any HMAC work
    - Code must be valid for the submitted secret (+/- one 30s step)
    - Submitted secret must equal the stored (set-up) secret
    - The accepted step is remembered so the same code cannot be replayed
    """

    def __init__(self, uow: UnitOfWork, rate_limiter: RateLimiter, clock: Optional[Clock] = None):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.clock = clock or SystemClock()

    async def execute(self, admin_id: UUID, code: str, secret: str) -> Result[AdminTwoFactorResponse]:
        decision = self.rate_limiter.consume(TWO_FACTOR_VERIFY, f"admin:{admin_id}")
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many verification attempts. Please try again later.")
            )

        try:
            counter = find_matching_counter(secret, code.strip(), timestamp=self.clock.timestamp())
        except InvalidSecret:
            return Return.err(Error("INVALID_SECRET", "Secret is not a valid base32 string"))

        if counter is None:
            return Return.err(
                Error(
                    "INVALID_CODE",
                    "Invalid code. Please enter the current code from your authenticator app.",
                )
            )

        async with self.uow:
            admin = await self.uow.admins.get_by_id(admin_id)
            if admin is None:
                return Return.err(Error("ADMIN_NOT_FOUND", "Admin account not found"))

            stored = admin.two_factor_secret
            if not stored or not hmac.compare_digest(stored.encode(), secret.encode()):
                return Return.err(
                    Error("SECRET_MISMATCH", "Secret mismatch. Please restart 2FA setup.")
                )

            admin.two_factor_enabled = True
            admin.two_factor_last_counter = counter
            await self.uow.admins.update(admin)

            await self.uow.audit_events.create(
                AuditEvent(
                    principal_type=PrincipalType.admin,
                    principal_id=admin.id,
                    action="admin_2fa_enabled",
                )
            )

            await self.uow.commit()
            logger.info(f"2FA enabled for admin {admin.id}")

            return Return.ok(
                AdminTwoFactorResponse(success=True, message="2FA enabled successfully")
            )
