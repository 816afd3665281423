"""
Member Authentication DTOs

Response classes for member login, password reset and 2FA.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class MemberLoginResponse(BaseModel):
    """Response for member login use case"""

    success: bool
    member_id: UUID
    email: str
    full_name: Optional[str] = None
    requires_2fa: bool


class MemberMessageResponse(BaseModel):
    """Generic success + message response (reset, enable, disable, send OTP)"""

    success: bool
    message: str


class MemberTwoFactorSetupResponse(BaseModel):
    """Response for member 2FA setup"""

    success: bool
    secret: str
    provisioning_uri: str
    message: str


class MemberTwoFactorVerifyResponse(BaseModel):
    """Response for member 2FA verification"""

    success: bool
    method: str
