"""
Setup Admin 2FA Use Case

Provisions a new TOTP secret for the calling admin without enabling it.
"""

from uuid import UUID

from config import ApplicationConfig
from shadowmesh.app.services.secret_generator import generate_base32_secret
from shadowmesh.app.services.totp import provisioning_uri
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.libs.result import Error, Result, Return
from .dtos import AdminTwoFactorSetupResponse


class SetupAdminTwoFactorUseCase:
    """
    Use case for starting admin 2FA enrollment.

    Business Rules:
    - Generates a fresh 32-character base32 secret
    - Stores it with two_factor_enabled = False (enable needs a valid code)
    - Replaces any previous secret, which also disables 2FA until re-enabled
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, admin_id: UUID) -> Result[AdminTwoFactorSetupResponse]:
        async with self.uow:
            admin = await self.uow.admins.get_by_id(admin_id)
            if admin is None:
                return Return.err(Error("ADMIN_NOT_FOUND", "Admin account not found"))

            secret = generate_base32_secret()

            admin.two_factor_secret = secret
            admin.two_factor_enabled = False
            admin.two_factor_last_counter = None
            await self.uow.admins.update(admin)

            await self.uow.commit()

            return Return.ok(
                AdminTwoFactorSetupResponse(
                    secret=secret,
                    provisioning_uri=provisioning_uri(
                        secret, admin.email, ApplicationConfig.ADMIN_TOTP_ISSUER
                    ),
                )
            )
