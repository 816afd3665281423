"""
Setup Member 2FA Use Case
"""

from uuid import UUID

from config import ApplicationConfig
from shadowmesh.app.services.secret_generator import generate_base32_secret
from shadowmesh.app.services.totp import provisioning_uri
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberTwoFactorSetupResponse


class SetupMemberTwoFactorUseCase:
    """Generate and store a TOTP secret for a member; 2FA stays disabled until enable"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, member_id: UUID) -> Result[MemberTwoFactorSetupResponse]:
        async with self.uow:
            member = await self.uow.members.get_by_id(member_id)
            if member is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Member not found"))

            secret = generate_base32_secret()

            member.two_factor_secret = secret
            member.two_factor_enabled = False
            member.two_factor_last_counter = None
            await self.uow.members.update(member)

            await self.uow.commit()

            return Return.ok(
                MemberTwoFactorSetupResponse(
                    success=True,
                    secret=secret,
                    provisioning_uri=provisioning_uri(
                        secret, member.email, ApplicationConfig.TOTP_ISSUER
                    ),
                    message="Scan QR code with authenticator app (Google Authenticator, Authy, etc.)",
                )
            )
