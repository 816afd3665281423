from abc import ABC, abstractmethod

from shadowmesh.app.repositories.admin_account_repository import IAdminAccountRepository
from shadowmesh.app.repositories.audit_event_repository import IAuditEventRepository
from shadowmesh.app.repositories.member_repository import IMemberRepository


class UnitOfWork(ABC):
    """
    One credential-store transaction.

    Leaving the context rolls back anything not committed, so every use case
    that changes a record calls commit() explicitly before returning.
    """

    admins: IAdminAccountRepository
    members: IMemberRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, *args) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
