"""
Member Authentication Use Cases

Member login, password reset by e-mailed link, TOTP 2FA with e-mail backup codes.
"""

from .member_login_use_case import MemberLoginUseCase
from .request_member_password_reset_use_case import RequestMemberPasswordResetUseCase
from .confirm_member_password_reset_use_case import ConfirmMemberPasswordResetUseCase
from .setup_member_two_factor_use_case import SetupMemberTwoFactorUseCase
from .enable_member_two_factor_use_case import EnableMemberTwoFactorUseCase
from .send_member_otp_use_case import SendMemberOtpUseCase
from .verify_member_two_factor_use_case import VerifyMemberTwoFactorUseCase
from .disable_member_two_factor_use_case import DisableMemberTwoFactorUseCase
from .dtos import (
    MemberLoginResponse,
    MemberMessageResponse,
    MemberTwoFactorSetupResponse,
    MemberTwoFactorVerifyResponse,
)

__all__ = [
    # Use Cases
    "MemberLoginUseCase",
    "RequestMemberPasswordResetUseCase",
    "ConfirmMemberPasswordResetUseCase",
    "SetupMemberTwoFactorUseCase",
    "EnableMemberTwoFactorUseCase",
    "SendMemberOtpUseCase",
    "VerifyMemberTwoFactorUseCase",
    "DisableMemberTwoFactorUseCase",
    # DTOs - Responses
    "MemberLoginResponse",
    "MemberMessageResponse",
    "MemberTwoFactorSetupResponse",
    "MemberTwoFactorVerifyResponse",
]
