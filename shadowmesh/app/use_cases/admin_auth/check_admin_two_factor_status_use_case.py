"""
Check Admin 2FA Status Use Case

Reports whether TOTP is enabled for the calling admin.
"""

from uuid import UUID

from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.libs.result import Error, Result, Return
from .dtos import AdminTwoFactorStatusResponse


class CheckAdminTwoFactorStatusUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, admin_id: UUID) -> Result[AdminTwoFactorStatusResponse]:
        async with self.uow:
            admin = await self.uow.admins.get_by_id(admin_id)
            if admin is None:
                return Return.err(Error("ADMIN_NOT_FOUND", "Admin account not found"))

            enabled = admin.two_factor_enabled is True and bool(admin.two_factor_secret)
            return Return.ok(AdminTwoFactorStatusResponse(enabled=enabled))
