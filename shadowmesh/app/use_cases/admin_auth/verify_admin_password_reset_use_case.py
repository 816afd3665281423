"""
Verify Admin Password Reset Use Case

Checks the e-mailed reset code and, when a new password is supplied,
replaces the admin's password and clears any lockout.
"""

import hmac
import logging
from typing import Optional

from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.credential_schemes import AdaptiveHashScheme, admin_credential_scheme
from shadowmesh.app.services.password_policy import ADMIN_PASSWORD_POLICY
from shadowmesh.app.services.rate_limiter import PASSWORD_RESET_VERIFY, RateLimiter
from shadowmesh.app.services.totp import is_six_digit_code
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import AuditEvent, PrincipalType
from shadowmesh.libs.result import Error, Result, Return
from .dtos import AdminPasswordResetVerifyResponse

logger = logging.getLogger(__name__)


class VerifyAdminPasswordResetUseCase:
    """
    Use case for verifying an admin reset code.

    Business Rules:
    - Max 5 verification attempts per email per 10 minutes
    - Unknown email and wrong code produce the same error
    - Expired codes are cleared on any attempt; only the right code learns it expired
    - Without new_password: verify only, the code stays valid
    - With new_password: must match confirm_password and the admin policy
      (12+ chars, upper, lower, digit, special); code is consumed,
      login_attempts reset and locked_until cleared
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        clock: Optional[Clock] = None,
        scheme: Optional[AdaptiveHashScheme] = None,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.clock = clock or SystemClock()
        self.scheme = scheme or admin_credential_scheme()

    async def execute(
        self,
        email: str,
        otp: str,
        new_password: Optional[str] = None,
        confirm_password: Optional[str] = None,
    ) -> Result[AdminPasswordResetVerifyResponse]:
        """
        Errors:
            - TOO_MANY_REQUESTS: Verification rate limit exceeded
            - INVALID_CODE: Unknown email or wrong code
            - CODE_EXPIRED: Code older than 10 minutes
            - PASSWORD_MISMATCH: new_password != confirm_password
            - WEAK_PASSWORD: Password policy violated
        """
        normalized_email = email.strip().lower()

        decision = self.rate_limiter.consume(PASSWORD_RESET_VERIFY, normalized_email)
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many attempts. Please try again later.")
            )

        async with self.uow:
            admin = await self.uow.admins.get_by_email(normalized_email)
            if admin is None:
                return Return.err(Error("INVALID_CODE", "Invalid email or code"))

            stored = admin.password_reset_otp
            if not stored:
                return Return.err(Error("INVALID_CODE", "Invalid email or code"))

            candidate = otp.strip()
            matches = is_six_digit_code(candidate) and hmac.compare_digest(stored, candidate)

            expires_at = admin.password_reset_otp_expires_at
            if expires_at is None or expires_at < self.clock.now():
                admin.password_reset_otp = None
                admin.password_reset_otp_expires_at = None
                await self.uow.admins.update(admin)
                await self.uow.commit()
                if matches:
                    return Return.err(
                        Error("CODE_EXPIRED", "Code has expired. Please request a new one.")
                    )
                return Return.err(Error("INVALID_CODE", "Invalid email or code"))

            if not matches:
                return Return.err(Error("INVALID_CODE", "Invalid email or code"))

            if new_password is None:
                return Return.ok(
                    AdminPasswordResetVerifyResponse(
                        success=True,
                        message="Code verified. You can now set a new password.",
                        verified=True,
                    )
                )

            if new_password != confirm_password:
                return Return.err(Error("PASSWORD_MISMATCH", "Passwords do not match"))

            policy_check = ADMIN_PASSWORD_POLICY.validate(new_password)
            if policy_check.is_err():
                return Return.err(policy_check.error)

            admin.password_hash = self.scheme.hash(new_password)
            admin.password_reset_otp = None
            admin.password_reset_otp_expires_at = None
            admin.login_attempts = 0
            admin.locked_until = None
            await self.uow.admins.update(admin)

            await self.uow.audit_events.create(
                AuditEvent(
                    principal_type=PrincipalType.admin,
                    principal_id=admin.id,
                    action="admin_password_reset",
                )
            )

            await self.uow.commit()
            logger.info(f"Password reset completed for admin {admin.id}")

            return Return.ok(
                AdminPasswordResetVerifyResponse(
                    success=True,
                    message="Password has been reset successfully. You can now login with your new password.",
                )
            )
