"""
Disable Admin 2FA Use Case
"""

from uuid import UUID

from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.domain.entities import AuditEvent, PrincipalType
from shadowmesh.libs.result import Error, Result, Return
from .dtos import AdminTwoFactorResponse


class DisableAdminTwoFactorUseCase:
    """Clears the enabled flag and the secret together"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, admin_id: UUID) -> Result[AdminTwoFactorResponse]:
        async with self.uow:
            admin = await self.uow.admins.get_by_id(admin_id)
            if admin is None:
                return Return.err(Error("ADMIN_NOT_FOUND", "Admin account not found"))

            admin.two_factor_enabled = False
            admin.two_factor_secret = None
            admin.two_factor_last_counter = None
            await self.uow.admins.update(admin)

            await self.uow.audit_events.create(
                AuditEvent(
                    principal_type=PrincipalType.admin,
                    principal_id=admin.id,
                    action="admin_2fa_disabled",
                )
            )

            await self.uow.commit()

            return Return.ok(
                AdminTwoFactorResponse(success=True, message="2FA disabled successfully")
            )
