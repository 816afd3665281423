"""
Admin Login Use Case

Password authentication for administrators with persistent lockout.
"""

import logging
from datetime import datetime
from typing import Optional

from shadowmesh.api.utils.jwt import generate_admin_token
from shadowmesh.app.services.clock import Clock, SystemClock
from shadowmesh.app.services.credential_schemes import (
    AdaptiveHashScheme,
    DeterministicDerivationScheme,
    admin_credential_scheme,
    legacy_admin_credential_scheme,
)
from shadowmesh.app.services.lockout import LockoutPolicy, LockoutState
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import AdminAccount, AuditEvent, PrincipalType, TokenStage
from shadowmesh.libs.result import Error, Result, Return
from .dtos import AdminLoginResponse

logger = logging.getLogger(__name__)

# Bounded retries for the conditional failed-attempt update
MAX_LOCKOUT_WRITE_RETRIES = 3


def invalid_credentials() -> Error:
    return Error("INVALID_CREDENTIALS", "Invalid email or password")


class AdminLoginUseCase:
    """
    Use case for admin password login.

    Business Rules:
    - Locked accounts fail fast without touching the password hash
    - 5 consecutive failures lock the account for 15 minutes
    - An expired lock is treated as Unlocked(0) on the next attempt
    - Unknown email and wrong password produce the same error, and an unknown
      email still costs one dummy hash
    - Success resets attempts, clears the lock, records last login time/IP
    - Legacy PBKDF2 hashes are upgraded to bcrypt on success
    - 2FA code is verified separately; the returned token is stage=password
      while 2FA is pending
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
        scheme: Optional[AdaptiveHashScheme] = None,
        legacy_scheme: Optional[DeterministicDerivationScheme] = None,
        lockout: Optional[LockoutPolicy] = None,
    ):
        self.uow = uow
        self.clock = clock or SystemClock()
        self.scheme = scheme or admin_credential_scheme()
        self.legacy_scheme = legacy_scheme or legacy_admin_credential_scheme()
        self.lockout = lockout or LockoutPolicy()

    async def execute(
        self, email: str, password: str, client_ip: Optional[str] = None
    ) -> Result[AdminLoginResponse]:
        """
        Execute admin login use case.

        Args:
            email: Admin email (normalized here)
            password: Plain text password
            client_ip: Caller address, recorded on success

        Returns:
            Result with AdminLoginResponse, or Error

        Errors:
            - ACCOUNT_LOCKED: Too many failed attempts, lock still active
            - INVALID_CREDENTIALS: Unknown email or wrong password
        """
        normalized_email = email.strip().lower()
        now = self.clock.now()

        async with self.uow:
            admin = await self.uow.admins.get_by_email(normalized_email)

            if admin is None:
                # Hash dummy password to maintain constant time
                self.scheme.dummy_verify()
                return Return.err(invalid_credentials())

            state = self.lockout.current(admin.login_attempts, admin.locked_until, now)
            if state.is_locked(now):
                minutes = state.minutes_remaining(now)
                return Return.err(
                    Error(
                        "ACCOUNT_LOCKED",
                        f"Account locked due to too many failed attempts. Try again in {minutes} minutes.",
                    )
                )

            if not self._password_matches(admin, password):
                new_state = await self._record_failure(admin, now)
                if new_state is not None and new_state.is_locked(now):
                    logger.warning(f"Admin account {admin.id} locked after {new_state.failed_attempts} failed attempts")
                    await self.uow.audit_events.create(
                        AuditEvent(
                            principal_type=PrincipalType.admin,
                            principal_id=admin.id,
                            action="admin_locked_out",
                            event_metadata={
                                "failed_attempts": new_state.failed_attempts,
                                "locked_until": new_state.locked_until.isoformat(),
                                "ip": client_ip,
                            },
                        )
                    )
                await self.uow.commit()
                return Return.err(invalid_credentials())

            # Password correct - reset lockout and record login
            if not self.scheme.identifies(admin.password_hash):
                admin.password_hash = self.scheme.hash(password)
                logger.info(f"Upgraded legacy password hash for admin {admin.id}")

            cleared = self.lockout.on_success()
            admin.login_attempts = cleared.failed_attempts
            admin.locked_until = cleared.locked_until
            admin.last_login_at = now
            admin.last_login_ip = client_ip
            await self.uow.admins.update(admin)

            await self.uow.audit_events.create(
                AuditEvent(
                    principal_type=PrincipalType.admin,
                    principal_id=admin.id,
                    action="admin_login",
                    event_metadata={"ip": client_ip},
                )
            )

            await self.uow.commit()

            requires_2fa = admin.two_factor_enabled is True
            stage = TokenStage.password if requires_2fa else TokenStage.full

            return Return.ok(
                AdminLoginResponse(
                    success=True,
                    email=admin.email,
                    requires_2fa=requires_2fa,
                    has_2fa_secret=bool(admin.two_factor_secret),
                    access_token=generate_admin_token(admin.id, admin.email, stage),
                    token_stage=stage.value,
                )
            )

    def _password_matches(self, admin: AdminAccount, password: str) -> bool:
        stored = admin.password_hash
        if not stored:
            self.scheme.dummy_verify()
            return False
        if self.scheme.identifies(stored):
            return self.scheme.verify(password, stored)
        if self.legacy_scheme.identifies(stored):
            return self.legacy_scheme.verify(password, stored, admin.email)
        logger.error(f"Admin {admin.id} has a password hash in an unknown format")
        self.scheme.dummy_verify()
        return False

    async def _record_failure(self, admin: AdminAccount, now: datetime) -> Optional[LockoutState]:
        """
        Apply the failure transition with a conditional write, retrying on conflict.

        Returns the state this request wrote, or None if nothing was written.
        """
        for _ in range(MAX_LOCKOUT_WRITE_RETRIES):
            observed_attempts = admin.login_attempts
            state = self.lockout.current(observed_attempts, admin.locked_until, now)
            if state.is_locked(now):
                # A concurrent request already locked the account and logged it
                return None

            next_state = self.lockout.on_failure(state, now)
            written = await self.uow.admins.compare_and_set_login_state(
                admin,
                expected_attempts=observed_attempts,
                login_attempts=next_state.failed_attempts,
                locked_until=next_state.locked_until,
            )
            if written:
                return next_state

        logger.warning(f"Gave up recording failed login for admin {admin.id} after concurrent updates")
        return None
