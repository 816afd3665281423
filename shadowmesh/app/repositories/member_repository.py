from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from shadowmesh.domain.entities import Member


class IMemberRepository(ABC):
    """Member repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Member]:
        """Get member by (normalized) email address"""
        pass

    @abstractmethod
    async def get_by_id(self, member_id: UUID) -> Optional[Member]:
        """Get member by ID"""
        pass

    @abstractmethod
    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[Member]:
        """Get member holding a password reset token (SHA-256 hex)"""
        pass

    @abstractmethod
    async def create(self, member: Member) -> Member:
        """Create a new member"""
        pass

    @abstractmethod
    async def update(self, member: Member) -> Member:
        """Update existing member"""
        pass
