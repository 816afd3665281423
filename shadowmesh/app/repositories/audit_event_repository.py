from abc import ABC, abstractmethod

from shadowmesh.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - append only"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Record a credential lifecycle event"""
        pass
