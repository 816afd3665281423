"""
Admin Authentication Use Cases

Admin login with lockout, admin TOTP 2FA, admin password reset.
"""

from .admin_login_use_case import AdminLoginUseCase
from .check_admin_two_factor_status_use_case import CheckAdminTwoFactorStatusUseCase
from .setup_admin_two_factor_use_case import SetupAdminTwoFactorUseCase
from .enable_admin_two_factor_use_case import EnableAdminTwoFactorUseCase
from .verify_admin_two_factor_use_case import VerifyAdminTwoFactorUseCase
from .disable_admin_two_factor_use_case import DisableAdminTwoFactorUseCase
from .request_admin_password_reset_use_case import RequestAdminPasswordResetUseCase
from .verify_admin_password_reset_use_case import VerifyAdminPasswordResetUseCase
from .dtos import (
    AdminLoginResponse,
    AdminTwoFactorStatusResponse,
    AdminTwoFactorSetupResponse,
    AdminTwoFactorResponse,
    AdminTwoFactorVerifyResponse,
    AdminPasswordResetRequestResponse,
    AdminPasswordResetVerifyResponse,
)

__all__ = [
    # Use Cases
    "AdminLoginUseCase",
    "CheckAdminTwoFactorStatusUseCase",
    "SetupAdminTwoFactorUseCase",
    "EnableAdminTwoFactorUseCase",
    "VerifyAdminTwoFactorUseCase",
    "DisableAdminTwoFactorUseCase",
    "RequestAdminPasswordResetUseCase",
    "VerifyAdminPasswordResetUseCase",
    # DTOs - Responses
    "AdminLoginResponse",
    "AdminTwoFactorStatusResponse",
    "AdminTwoFactorSetupResponse",
    "AdminTwoFactorResponse",
    "AdminTwoFactorVerifyResponse",
    "AdminPasswordResetRequestResponse",
    "AdminPasswordResetVerifyResponse",
]
