from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from shadowmesh.app.repositories.member_repository import IMemberRepository
from shadowmesh.domain.base import utcnow
from shadowmesh.domain.entities import Member


class MemberRepository(IMemberRepository):
    """Member repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[Member]:
        """Get member by (normalized) email address"""
        stmt = select(Member).where(Member.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, member_id: UUID) -> Optional[Member]:
        """Get member by ID"""
        stmt = select(Member).where(Member.id == member_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[Member]:
        """Get member holding a password reset token (SHA-256 hex)"""
        stmt = select(Member).where(Member.password_reset_token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, member: Member) -> Member:
        """Create a new member"""
        self.session.add(member)
        await self.session.flush()
        await self.session.refresh(member)
        return member

    async def update(self, member: Member) -> Member:
        """Update existing member"""
        member.updated_at = utcnow()
        self.session.add(member)
        await self.session.flush()
        await self.session.refresh(member)
        return member
