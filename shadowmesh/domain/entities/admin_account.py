"""
AdminAccount Entity

Credential record for a site administrator.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from shadowmesh.domain.base import utcnow


class AdminAccount(SQLModel, table=True):
    """
    AdminAccount entity - credential record for an administrator.

    Business Rules:
    - Email is the immutable lookup key (stored lower-cased)
    - Password stored as bcrypt hash; legacy PBKDF2 hex digests are
      upgraded to bcrypt on the next successful login
    - 5 consecutive failed logins lock the account for 15 minutes
    - two_factor_enabled requires two_factor_secret
    - Password reset OTP is single-use and expires after 10 minutes
    """

    __tablename__ = "admin_accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=128)

    # TOTP
    two_factor_enabled: bool = Field(default=False)
    two_factor_secret: Optional[str] = Field(default=None, max_length=64)
    two_factor_last_counter: Optional[int] = Field(default=None)

    # Lockout
    login_attempts: int = Field(default=0)
    locked_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_ip: Optional[str] = Field(default=None, max_length=64)

    # Password reset
    password_reset_otp: Optional[str] = Field(default=None, max_length=6)
    password_reset_otp_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        CheckConstraint(
            "NOT two_factor_enabled OR two_factor_secret IS NOT NULL",
            name="ck_admin_two_factor_requires_secret",
        ),
        Index("idx_admin_locked_until", "locked_until"),
    )
