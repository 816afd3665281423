from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from shadowmesh.domain.entities import AdminAccount


class IAdminAccountRepository(ABC):
    """AdminAccount repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[AdminAccount]:
        """Get admin by (normalized) email address"""
        pass

    @abstractmethod
    async def get_by_id(self, admin_id: UUID) -> Optional[AdminAccount]:
        """Get admin by ID"""
        pass

    @abstractmethod
    async def create(self, admin: AdminAccount) -> AdminAccount:
        """Create a new admin account"""
        pass

    @abstractmethod
    async def update(self, admin: AdminAccount) -> AdminAccount:
        """Update existing admin account"""
        pass

    @abstractmethod
    async def compare_and_set_login_state(
        self,
        admin: AdminAccount,
        expected_attempts: int,
        login_attempts: int,
        locked_until: Optional[datetime],
    ) -> bool:
        """
        Atomically write lockout fields if login_attempts still equals
        expected_attempts. Refreshes `admin` from storage either way.

        Returns:
            True if the row was updated, False on a concurrent modification
        """
        pass
