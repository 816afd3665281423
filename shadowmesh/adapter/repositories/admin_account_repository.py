from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from shadowmesh.app.repositories.admin_account_repository import IAdminAccountRepository
from shadowmesh.domain.base import utcnow
from shadowmesh.domain.entities import AdminAccount


class AdminAccountRepository(IAdminAccountRepository):
    """AdminAccount repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[AdminAccount]:
        """Get admin by (normalized) email address"""
        stmt = select(AdminAccount).where(AdminAccount.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, admin_id: UUID) -> Optional[AdminAccount]:
        """Get admin by ID"""
        stmt = select(AdminAccount).where(AdminAccount.id == admin_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, admin: AdminAccount) -> AdminAccount:
        """Create a new admin account"""
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def update(self, admin: AdminAccount) -> AdminAccount:
        """Update existing admin account"""
        admin.updated_at = utcnow()
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def compare_and_set_login_state(
        self,
        admin: AdminAccount,
        expected_attempts: int,
        login_attempts: int,
        locked_until: Optional[datetime],
    ) -> bool:
        """Conditional UPDATE guarded by the previously observed attempt count"""
        stmt = (
            update(AdminAccount)
            .where(
                AdminAccount.id == admin.id,
                AdminAccount.login_attempts == expected_attempts,
            )
            .values(
                login_attempts=login_attempts,
                locked_until=locked_until,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.refresh(admin)
        return result.rowcount == 1
