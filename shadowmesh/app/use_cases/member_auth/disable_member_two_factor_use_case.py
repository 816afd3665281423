"""
Disable Member 2FA Use Case
"""

from uuid import UUID

from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import AuditEvent, PrincipalType
from shadowmesh.libs.result import Error, Result, Return
from .dtos import MemberMessageResponse


class DisableMemberTwoFactorUseCase:
    """Clear the enabled flag, the secret and any pending backup code"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, member_id: UUID) -> Result[MemberMessageResponse]:
        async with self.uow:
            member = await self.uow.members.get_by_id(member_id)
            if member is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Member not found"))

            member.two_factor_enabled = False
            member.two_factor_secret = None
            member.two_factor_last_counter = None
            member.two_factor_otp = None
            member.two_factor_otp_expires_at = None
            await self.uow.members.update(member)

            await self.uow.audit_events.create(
                AuditEvent(
                    principal_type=PrincipalType.member,
                    principal_id=member.id,
                    action="member_2fa_disabled",
                )
            )

            await self.uow.commit()

            return Return.ok(MemberMessageResponse(success=True, message="2FA disabled successfully"))
