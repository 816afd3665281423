from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from shadowmesh.api.error import ClientError, ServerError
from shadowmesh.api.utils.client_ip import get_client_ip
from shadowmesh.app.services.clock import Clock
from shadowmesh.app.services.email_sender import IEmailSender
from shadowmesh.app.services.rate_limiter import RateLimiter
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.app.use_cases.admin_auth import (
    AdminLoginUseCase,
    CheckAdminTwoFactorStatusUseCase,
    SetupAdminTwoFactorUseCase,
    EnableAdminTwoFactorUseCase,
    VerifyAdminTwoFactorUseCase,
    DisableAdminTwoFactorUseCase,
    RequestAdminPasswordResetUseCase,
    VerifyAdminPasswordResetUseCase,
    AdminLoginResponse,
    AdminTwoFactorStatusResponse,
    AdminTwoFactorSetupResponse,
    AdminTwoFactorResponse,
    AdminTwoFactorVerifyResponse,
    AdminPasswordResetRequestResponse,
    AdminPasswordResetVerifyResponse,
)
from shadowmesh.depends import (
    get_clock,
    get_current_admin,
    get_email_sender,
    get_fully_authenticated_admin,
    get_rate_limiter,
    get_unit_of_work,
)

router = APIRouter(prefix="/admin", tags=["Admin"])


class AdminLoginRequest(BaseModel):
    """Admin login HTTP request payload"""

    email: EmailStr = Field(..., description="Admin email address")
    password: str = Field(..., min_length=1, description="Admin password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AdminLoginResponse)
async def admin_login(
    request: AdminLoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Admin Login

    Returns a stage=password token when 2FA is enabled (call /admin/2fa/verify
    next), otherwise a stage=full token.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 429 Too Many Requests: Account locked
    """
    use_case = AdminLoginUseCase(uow, clock=clock)
    result = await use_case.execute(
        request.email, request.password, client_ip=get_client_ip(http_request)
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "ACCOUNT_LOCKED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


@router.post(
    "/2fa/status", status_code=status.HTTP_200_OK, response_model=AdminTwoFactorStatusResponse
)
async def admin_two_factor_status(
    admin: dict = Depends(get_current_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = CheckAdminTwoFactorStatusUseCase(uow)
    result = await use_case.execute(UUID(admin["sub"]))

    if result.is_err():
        error = result.error
        if error.code == "ADMIN_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.post(
    "/2fa/setup", status_code=status.HTTP_200_OK, response_model=AdminTwoFactorSetupResponse
)
async def admin_two_factor_setup(
    admin: dict = Depends(get_fully_authenticated_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Start 2FA enrollment

    Returns the base32 secret and an otpauth:// URI for QR display.
    2FA is not active until /admin/2fa/enable succeeds.
    """
    use_case = SetupAdminTwoFactorUseCase(uow)
    result = await use_case.execute(UUID(admin["sub"]))

    if result.is_err():
        error = result.error
        if error.code == "ADMIN_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class AdminTwoFactorEnableRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=16, description="Current TOTP code")
    secret: str = Field(..., min_length=1, max_length=128, description="Secret returned by setup")


@router.post("/2fa/enable", status_code=status.HTTP_200_OK, response_model=AdminTwoFactorResponse)
async def admin_two_factor_enable(
    request: AdminTwoFactorEnableRequest,
    admin: dict = Depends(get_fully_authenticated_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Raises:
        - 400 Bad Request: Secret malformed or not the one from setup
        - 401 Unauthorized: Invalid code
        - 429 Too Many Requests: Verification rate limit exceeded
    """
    use_case = EnableAdminTwoFactorUseCase(uow, rate_limiter, clock=clock)
    result = await use_case.execute(UUID(admin["sub"]), request.code, request.secret)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CODE":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code in ("INVALID_SECRET", "SECRET_MISMATCH"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        elif error.code == "ADMIN_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class AdminTwoFactorVerifyRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=16, description="Current TOTP code")


@router.post(
    "/2fa/verify", status_code=status.HTTP_200_OK, response_model=AdminTwoFactorVerifyResponse
)
async def admin_two_factor_verify(
    request: AdminTwoFactorVerifyRequest,
    admin: dict = Depends(get_current_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Second login step

    Accepts a stage=password token and returns a stage=full token.

    Raises:
        - 400 Bad Request: 2FA not configured
        - 401 Unauthorized: Invalid code
        - 429 Too Many Requests: Verification rate limit exceeded
    """
    use_case = VerifyAdminTwoFactorUseCase(uow, rate_limiter, clock=clock)
    result = await use_case.execute(UUID(admin["sub"]), request.code)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_CODE", "ADMIN_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "NOT_CONFIGURED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


@router.post("/2fa/disable", status_code=status.HTTP_200_OK, response_model=AdminTwoFactorResponse)
async def admin_two_factor_disable(
    admin: dict = Depends(get_fully_authenticated_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = DisableAdminTwoFactorUseCase(uow)
    result = await use_case.execute(UUID(admin["sub"]))

    if result.is_err():
        error = result.error
        if error.code == "ADMIN_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class AdminPasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., description="Admin email address")


@router.post(
    "/password-reset/request",
    status_code=status.HTTP_200_OK,
    response_model=AdminPasswordResetRequestResponse,
)
async def admin_password_reset_request(
    request: AdminPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    email_sender: IEmailSender = Depends(get_email_sender),
    clock: Clock = Depends(get_clock),
):
    """
    Request admin password reset code

    Always returns the same message whether or not the email exists.

    Raises:
        - 429 Too Many Requests: More than 3 requests per hour for this email
    """
    use_case = RequestAdminPasswordResetUseCase(uow, rate_limiter, email_sender, clock=clock)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class AdminPasswordResetVerifyRequest(BaseModel):
    email: EmailStr = Field(..., description="Admin email address")
    otp: str = Field(..., min_length=1, max_length=16, description="6-digit code from the email")
    new_password: Optional[str] = Field(None, description="Omit to only check the code")
    confirm_password: Optional[str] = Field(None)


@router.post(
    "/password-reset/verify",
    status_code=status.HTTP_200_OK,
    response_model=AdminPasswordResetVerifyResponse,
    response_model_exclude_none=True,
)
async def admin_password_reset_verify(
    request: AdminPasswordResetVerifyRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Verify admin reset code, optionally setting a new password

    Raises:
        - 400 Bad Request: Password mismatch or weak password
        - 401 Unauthorized: Invalid or expired code
        - 429 Too Many Requests: Too many attempts for this email
    """
    use_case = VerifyAdminPasswordResetUseCase(uow, rate_limiter, clock=clock)
    result = await use_case.execute(
        request.email, request.otp, request.new_password, request.confirm_password
    )

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_CODE", "CODE_EXPIRED"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code in ("PASSWORD_MISMATCH", "WEAK_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value
