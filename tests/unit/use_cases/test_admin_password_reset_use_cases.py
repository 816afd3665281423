from datetime import timedelta

import pytest

from shadowmesh.app.services.email_sender import EmailDeliveryError
from shadowmesh.app.use_cases.admin_auth import (
    RequestAdminPasswordResetUseCase,
    VerifyAdminPasswordResetUseCase,
)
from shadowmesh.domain.entities import AdminAccount

GENERIC = "If an account exists with this email, a password reset code has been sent."
NEW_PASSWORD = "N3w!AdminPassw0rd"


@pytest.fixture
def admin(admin_scheme):
    return AdminAccount(
        email="admin@shadowmesh.org", password_hash=admin_scheme.hash("Old!Passw0rd123")
    )


@pytest.fixture
def admin_with_code(admin, clock):
    admin.password_reset_otp = "123456"
    admin.password_reset_otp_expires_at = clock.now() + timedelta(minutes=10)
    return admin


@pytest.mark.asyncio
async def test_request_stores_code_and_sends_email(mock_uow, rate_limiter, email_sender, clock, admin):
    mock_uow.admins.get_by_email.return_value = admin

    result = await RequestAdminPasswordResetUseCase(
        mock_uow, rate_limiter, email_sender, clock=clock
    ).execute("Admin@ShadowMesh.org")

    assert result.value.success is True
    assert result.value.message == GENERIC
    assert len(admin.password_reset_otp) == 6
    assert admin.password_reset_otp.isdigit()
    assert admin.password_reset_otp_expires_at == clock.now() + timedelta(minutes=10)
    mock_uow.commit.assert_called_once()

    recipient, subject, body = email_sender.send.call_args[0]
    assert recipient == "admin@shadowmesh.org"
    assert admin.password_reset_otp in body


@pytest.mark.asyncio
async def test_request_unknown_email_returns_same_response(mock_uow, rate_limiter, email_sender, clock):
    result = await RequestAdminPasswordResetUseCase(
        mock_uow, rate_limiter, email_sender, clock=clock
    ).execute("nobody@shadowmesh.org")

    assert result.value.message == GENERIC
    email_sender.send.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_request_email_failure_is_not_reported(mock_uow, rate_limiter, email_sender, clock, admin):
    mock_uow.admins.get_by_email.return_value = admin
    email_sender.send.side_effect = EmailDeliveryError("provider down")

    result = await RequestAdminPasswordResetUseCase(
        mock_uow, rate_limiter, email_sender, clock=clock
    ).execute("admin@shadowmesh.org")

    assert result.is_ok()
    assert result.value.message == GENERIC


@pytest.mark.asyncio
async def test_request_is_limited_to_three_per_hour(mock_uow, rate_limiter, email_sender, clock):
    use_case = RequestAdminPasswordResetUseCase(mock_uow, rate_limiter, email_sender, clock=clock)

    for _ in range(3):
        assert (await use_case.execute("admin@shadowmesh.org")).is_ok()
    result = await use_case.execute("ADMIN@shadowmesh.org")

    assert result.error.code == "TOO_MANY_REQUESTS"


@pytest.mark.asyncio
async def test_verify_only_keeps_code(mock_uow, rate_limiter, clock, admin_scheme, admin_with_code):
    mock_uow.admins.get_by_email.return_value = admin_with_code

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", "123456")

    assert result.value.verified is True
    assert admin_with_code.password_reset_otp == "123456"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_verify_sets_password_and_clears_lockout(
    mock_uow, rate_limiter, clock, admin_scheme, admin_with_code
):
    admin_with_code.login_attempts = 5
    admin_with_code.locked_until = clock.now() + timedelta(minutes=15)
    mock_uow.admins.get_by_email.return_value = admin_with_code

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", "123456", NEW_PASSWORD, NEW_PASSWORD)

    assert result.is_ok()
    assert result.value.verified is None
    assert admin_scheme.verify(NEW_PASSWORD, admin_with_code.password_hash)
    assert admin_with_code.password_reset_otp is None
    assert admin_with_code.password_reset_otp_expires_at is None
    assert admin_with_code.login_attempts == 0
    assert admin_with_code.locked_until is None
    assert mock_uow.audit_events.create.call_args[0][0].action == "admin_password_reset"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_verify_wrong_code(mock_uow, rate_limiter, clock, admin_scheme, admin_with_code):
    mock_uow.admins.get_by_email.return_value = admin_with_code

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", "654321", NEW_PASSWORD, NEW_PASSWORD)

    assert result.error.code == "INVALID_CODE"
    assert admin_with_code.password_reset_otp == "123456"


@pytest.mark.asyncio
async def test_verify_unknown_email_matches_wrong_code(mock_uow, rate_limiter, clock, admin_scheme):
    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("nobody@shadowmesh.org", "123456")

    assert result.error.code == "INVALID_CODE"
    assert result.error.message == "Invalid email or code"


@pytest.mark.asyncio
async def test_verify_expired_code_is_cleared(mock_uow, rate_limiter, clock, admin_scheme, admin_with_code):
    mock_uow.admins.get_by_email.return_value = admin_with_code
    clock.advance(10 * 60 + 1)

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", "123456", NEW_PASSWORD, NEW_PASSWORD)

    assert result.error.code == "CODE_EXPIRED"
    assert admin_with_code.password_reset_otp is None
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_verify_expired_code_is_cleared_on_wrong_code(
    mock_uow, rate_limiter, clock, admin_scheme, admin_with_code
):
    mock_uow.admins.get_by_email.return_value = admin_with_code
    clock.advance(10 * 60 + 1)

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", "654321")

    assert result.error.code == "INVALID_CODE"
    assert admin_with_code.password_reset_otp is None
    assert admin_with_code.password_reset_otp_expires_at is None
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("otp", ["١٢٣٤٥٦", "12345é", "12 456", "1234567"])
async def test_verify_malformed_code(mock_uow, rate_limiter, clock, admin_scheme, admin_with_code, otp):
    mock_uow.admins.get_by_email.return_value = admin_with_code

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", otp, NEW_PASSWORD, NEW_PASSWORD)

    assert result.error.code == "INVALID_CODE"
    assert admin_with_code.password_reset_otp == "123456"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_verify_password_mismatch(mock_uow, rate_limiter, clock, admin_scheme, admin_with_code):
    mock_uow.admins.get_by_email.return_value = admin_with_code

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", "123456", NEW_PASSWORD, NEW_PASSWORD + "x")

    assert result.error.code == "PASSWORD_MISMATCH"
    assert admin_with_code.password_reset_otp == "123456"


@pytest.mark.asyncio
async def test_verify_weak_password(mock_uow, rate_limiter, clock, admin_scheme, admin_with_code):
    mock_uow.admins.get_by_email.return_value = admin_with_code

    result = await VerifyAdminPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=admin_scheme
    ).execute("admin@shadowmesh.org", "123456", "short1", "short1")

    assert result.error.code == "WEAK_PASSWORD"
    assert result.error.message == "Password must be at least 12 characters long."


@pytest.mark.asyncio
async def test_verify_is_limited_to_five_per_ten_minutes(mock_uow, rate_limiter, clock, admin_scheme):
    use_case = VerifyAdminPasswordResetUseCase(mock_uow, rate_limiter, clock=clock, scheme=admin_scheme)

    for _ in range(5):
        assert (await use_case.execute("admin@shadowmesh.org", "000000")).error.code == "INVALID_CODE"

    result = await use_case.execute("admin@shadowmesh.org", "000000")
    assert result.error.code == "TOO_MANY_REQUESTS"

    clock.advance(600)
    assert (await use_case.execute("admin@shadowmesh.org", "000000")).error.code == "INVALID_CODE"
