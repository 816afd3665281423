"""
Member Login Use Case

Password authentication for members. Members have no persisted lockout;
attempts are throttled by the in-process rate limiter.
"""

from typing import Optional

from shadowmesh.app.services.credential_schemes import (
    DeterministicDerivationScheme,
    member_credential_scheme,
)
from shadowmesh.app.services.rate_limiter import MEMBER_LOGIN, RateLimiter
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberLoginResponse


class MemberLoginUseCase:
    """
    Use case for member password login.

    Business Rules:
    - Max 5 attempts per email per 15 minutes
    - Unknown email and wrong password produce the same error
    - requires_2fa tells the client to follow up with /members/2fa/verify
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        scheme: Optional[DeterministicDerivationScheme] = None,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.scheme = scheme or member_credential_scheme()

    async def execute(self, email: str, password: str) -> Result[MemberLoginResponse]:
        normalized_email = email.strip().lower()

        decision = self.rate_limiter.consume(MEMBER_LOGIN, normalized_email)
        if not decision.allowed:
            return Return.err(
                Error("TOO_MANY_REQUESTS", "Too many login attempts. Please try again later.")
            )

        async with self.uow:
            member = await self.uow.members.get_by_email(normalized_email)

            if member is None or not member.password_hash:
                self.scheme.dummy_verify()
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            if not self.scheme.verify(password, member.password_hash, str(member.id)):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            return Return.ok(
                MemberLoginResponse(
                    success=True,
                    member_id=member.id,
                    email=member.email,
                    full_name=member.full_name,
                    requires_2fa=member.two_factor_enabled is True,
                )
            )
