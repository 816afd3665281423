"""
Admin Authentication DTOs (Data Transfer Objects)

Response classes for admin login, admin 2FA and admin password reset.
"""

from typing import Optional
from pydantic import BaseModel


class AdminLoginResponse(BaseModel):
    """Response for admin login use case"""

    success: bool
    email: str
    requires_2fa: bool
    has_2fa_secret: bool
    access_token: str
    token_stage: str


class AdminTwoFactorStatusResponse(BaseModel):
    """Response for admin 2FA status check"""

    enabled: bool


class AdminTwoFactorSetupResponse(BaseModel):
    """Response for admin 2FA setup (secret not yet enabled)"""

    secret: str
    provisioning_uri: str


class AdminTwoFactorResponse(BaseModel):
    """Response for admin 2FA enable / disable"""

    success: bool
    message: str


class AdminTwoFactorVerifyResponse(BaseModel):
    """Response for admin 2FA verification - carries a fully authenticated token"""

    success: bool
    message: str
    access_token: str


class AdminPasswordResetRequestResponse(BaseModel):
    """Response for admin password reset request (identical for every email)"""

    success: bool
    message: str


class AdminPasswordResetVerifyResponse(BaseModel):
    """Response for admin password reset verification"""

    success: bool
    message: str
    verified: Optional[bool] = None
