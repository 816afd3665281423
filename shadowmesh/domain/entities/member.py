"""
Member Entity

Credential record for a community member.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from shadowmesh.domain.base import utcnow


class Member(SQLModel, table=True):
    """
    Member entity - credential record for a community member.

    Business Rules:
    - Password stored as PBKDF2-SHA256 hex digest salted with the member id
    - No lockout; login and OTP requests are rate limited instead
    - two_factor_enabled requires two_factor_secret
    - Backup OTP (two_factor_otp) is single-use, expires after 10 minutes
    - Reset token stored as SHA-256 hash, single-use, expires after 1 hour
    """

    __tablename__ = "members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=128)

    # TOTP
    two_factor_enabled: bool = Field(default=False)
    two_factor_secret: Optional[str] = Field(default=None, max_length=64)
    two_factor_last_counter: Optional[int] = Field(default=None)

    # Backup OTP sent by e-mail
    two_factor_otp: Optional[str] = Field(default=None, max_length=6)
    two_factor_otp_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Password reset
    password_reset_token_hash: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )
    password_reset_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        CheckConstraint(
            "NOT two_factor_enabled OR two_factor_secret IS NOT NULL",
            name="ck_member_two_factor_requires_secret",
        ),
        Index("idx_member_two_factor_enabled", "two_factor_enabled"),
    )
