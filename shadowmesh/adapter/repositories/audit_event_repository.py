from sqlmodel.ext.asyncio.session import AsyncSession

from shadowmesh.app.repositories.audit_event_repository import IAuditEventRepository
from shadowmesh.domain.entities import AuditEvent


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        # Flushed with the credential change; committed by the caller
        self.session.add(audit_event)
        await self.session.flush()
        return audit_event
