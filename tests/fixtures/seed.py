"""Database seeding helpers for integration tests"""

import bcrypt
from sqlmodel.ext.asyncio.session import AsyncSession

from shadowmesh.adapter.repositories.admin_account_repository import AdminAccountRepository
from shadowmesh.adapter.repositories.member_repository import MemberRepository
from shadowmesh.app.services.credential_schemes import (
    legacy_admin_credential_scheme,
    member_credential_scheme,
)
from shadowmesh.domain.entities import AdminAccount, Member


async def _save_admin(db_session: AsyncSession, admin: AdminAccount) -> AdminAccount:
    admin = await AdminAccountRepository(db_session).create(admin)
    await db_session.commit()
    return admin


async def create_admin(db_session: AsyncSession, email: str, password: str, **fields) -> AdminAccount:
    # Low bcrypt cost; verification reads the cost from the hash
    password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode()
    return await _save_admin(
        db_session, AdminAccount(email=email, password_hash=password_hash, **fields)
    )


async def create_legacy_admin(db_session: AsyncSession, email: str, password: str) -> AdminAccount:
    password_hash = legacy_admin_credential_scheme().hash(password, email)
    return await _save_admin(db_session, AdminAccount(email=email, password_hash=password_hash))


async def create_member(
    db_session: AsyncSession, email: str, password: str, full_name: str = None
) -> Member:
    member = Member(email=email, full_name=full_name)
    member.password_hash = member_credential_scheme().hash(password, str(member.id))
    member = await MemberRepository(db_session).create(member)
    await db_session.commit()
    return member
