from sqlmodel.ext.asyncio.session import AsyncSession

from shadowmesh.adapter.repositories.admin_account_repository import AdminAccountRepository
from shadowmesh.adapter.repositories.audit_event_repository import AuditEventRepository
from shadowmesh.adapter.repositories.member_repository import MemberRepository
from shadowmesh.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.admins = AdminAccountRepository(self.session)
        self.members = MemberRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
