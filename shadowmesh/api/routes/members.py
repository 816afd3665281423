from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from shadowmesh.api.error import ClientError, ServerError
from shadowmesh.api.utils.client_ip import get_client_ip
from shadowmesh.app.services.clock import Clock
from shadowmesh.app.services.email_sender import IEmailSender
from shadowmesh.app.services.rate_limiter import RateLimiter
from shadowmesh.app.services.unit_of_work import UnitOfWork
from shadowmesh.app.use_cases.member_auth import (
    MemberLoginUseCase,
    RequestMemberPasswordResetUseCase,
    ConfirmMemberPasswordResetUseCase,
    SetupMemberTwoFactorUseCase,
    EnableMemberTwoFactorUseCase,
    SendMemberOtpUseCase,
    VerifyMemberTwoFactorUseCase,
    DisableMemberTwoFactorUseCase,
    MemberLoginResponse,
    MemberMessageResponse,
    MemberTwoFactorSetupResponse,
    MemberTwoFactorVerifyResponse,
)
from shadowmesh.depends import get_clock, get_email_sender, get_rate_limiter, get_unit_of_work

router = APIRouter(prefix="/members", tags=["Members"])


class MemberLoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Member email address")
    password: str = Field(..., min_length=1, description="Member password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=MemberLoginResponse)
async def member_login(
    request: MemberLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
):
    """
    Member Login

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 429 Too Many Requests: More than 5 attempts in 15 minutes
    """
    use_case = MemberLoginUseCase(uow, rate_limiter)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class MemberPasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., description="Member email address")


@router.post(
    "/password-reset/request",
    status_code=status.HTTP_200_OK,
    response_model=MemberMessageResponse,
)
async def member_password_reset_request(
    request: MemberPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    email_sender: IEmailSender = Depends(get_email_sender),
    clock: Clock = Depends(get_clock),
):
    """
    Request a password reset link

    Always returns the same message whether or not the email exists.
    """
    use_case = RequestMemberPasswordResetUseCase(uow, rate_limiter, email_sender, clock=clock)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class MemberPasswordResetConfirmRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=256, description="Token from the reset link")
    new_password: str = Field(..., description="New password")
    confirm_password: str = Field(..., description="New password, repeated")


@router.post(
    "/password-reset/confirm",
    status_code=status.HTTP_200_OK,
    response_model=MemberMessageResponse,
)
async def member_password_reset_confirm(
    request: MemberPasswordResetConfirmRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Complete a password reset

    Raises:
        - 400 Bad Request: Password mismatch, weak password, or invalid/expired token
        - 429 Too Many Requests: Too many attempts from this client
    """
    use_case = ConfirmMemberPasswordResetUseCase(uow, rate_limiter, clock=clock)
    result = await use_case.execute(
        request.token,
        request.new_password,
        request.confirm_password,
        client_ip=get_client_ip(http_request),
    )

    if result.is_err():
        error = result.error
        if error.code in ("PASSWORD_MISMATCH", "WEAK_PASSWORD", "INVALID_OR_EXPIRED_TOKEN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class MemberIdRequest(BaseModel):
    member_id: UUID = Field(..., description="Member ID")


class MemberCodeRequest(BaseModel):
    member_id: UUID = Field(..., description="Member ID")
    code: str = Field(..., min_length=1, max_length=16, description="TOTP or backup code")


@router.post(
    "/2fa/setup", status_code=status.HTTP_200_OK, response_model=MemberTwoFactorSetupResponse
)
async def member_two_factor_setup(
    request: MemberIdRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = SetupMemberTwoFactorUseCase(uow)
    result = await use_case.execute(request.member_id)

    if result.is_err():
        error = result.error
        if error.code == "MEMBER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post("/2fa/enable", status_code=status.HTTP_200_OK, response_model=MemberMessageResponse)
async def member_two_factor_enable(
    request: MemberCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Raises:
        - 400 Bad Request: 2FA not set up, or stored secret corrupt
        - 401 Unauthorized: Invalid code
        - 404 Not Found: Unknown member
        - 429 Too Many Requests: Verification rate limit exceeded
    """
    use_case = EnableMemberTwoFactorUseCase(uow, rate_limiter, clock=clock)
    result = await use_case.execute(request.member_id, request.code)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CODE":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code in ("NOT_CONFIGURED", "INVALID_SECRET"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "MEMBER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class MemberSendOtpRequest(BaseModel):
    email: EmailStr = Field(..., description="Member email address")


@router.post("/2fa/send-otp", status_code=status.HTTP_200_OK, response_model=MemberMessageResponse)
async def member_two_factor_send_otp(
    request: MemberSendOtpRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    email_sender: IEmailSender = Depends(get_email_sender),
    clock: Clock = Depends(get_clock),
):
    """
    E-mail a backup code

    Always returns the same message whether or not the email exists.
    """
    use_case = SendMemberOtpUseCase(uow, rate_limiter, email_sender, clock=clock)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


@router.post(
    "/2fa/verify", status_code=status.HTTP_200_OK, response_model=MemberTwoFactorVerifyResponse
)
async def member_two_factor_verify(
    request: MemberCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Raises:
        - 400 Bad Request: 2FA not enabled
        - 401 Unauthorized: Invalid code
        - 404 Not Found: Unknown member
        - 429 Too Many Requests: Verification rate limit exceeded
    """
    use_case = VerifyMemberTwoFactorUseCase(uow, rate_limiter, clock=clock)
    result = await use_case.execute(request.member_id, request.code)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CODE":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "NOT_ENABLED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "MEMBER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "TOO_MANY_REQUESTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


@router.post("/2fa/disable", status_code=status.HTTP_200_OK, response_model=MemberMessageResponse)
async def member_two_factor_disable(
    request: MemberIdRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = DisableMemberTwoFactorUseCase(uow)
    result = await use_case.execute(request.member_id)

    if result.is_err():
        error = result.error
        if error.code == "MEMBER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
