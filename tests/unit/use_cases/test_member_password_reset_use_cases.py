import hashlib
from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest

from shadowmesh.app.services.email_sender import EmailDeliveryError
from shadowmesh.app.use_cases.member_auth import (
    ConfirmMemberPasswordResetUseCase,
    RequestMemberPasswordResetUseCase,
)
from shadowmesh.domain.entities import Member

GENERIC = "If an account exists with this email, a password reset link has been sent."
NEW_PASSWORD = "N3w!Passw0rd"


@pytest.fixture
def member():
    return Member(email="member@example.com", password_hash="0" * 64)


def reset_token_from_email(email_sender) -> str:
    body = email_sender.send.call_args[0][2]
    start = body.index("https://shadowmesh.org/reset-password?token=")
    link = body[start:body.index('"', start)]
    return parse_qs(urlparse(link).query)["token"][0]


@pytest.mark.asyncio
async def test_request_stores_hash_and_emails_link(mock_uow, rate_limiter, email_sender, clock, member):
    mock_uow.members.get_by_email.return_value = member

    result = await RequestMemberPasswordResetUseCase(
        mock_uow, rate_limiter, email_sender, clock=clock
    ).execute("member@example.com")

    assert result.value.message == GENERIC
    token = reset_token_from_email(email_sender)
    assert member.password_reset_token_hash == hashlib.sha256(token.encode()).hexdigest()
    assert member.password_reset_expires_at == clock.now() + timedelta(hours=1)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_request_unknown_email_is_silent(mock_uow, rate_limiter, email_sender, clock):
    result = await RequestMemberPasswordResetUseCase(
        mock_uow, rate_limiter, email_sender, clock=clock
    ).execute("nobody@example.com")

    assert result.value.message == GENERIC
    email_sender.send.assert_not_called()


@pytest.mark.asyncio
async def test_request_email_failure_is_not_reported(mock_uow, rate_limiter, email_sender, clock, member):
    mock_uow.members.get_by_email.return_value = member
    email_sender.send.side_effect = EmailDeliveryError("provider down")

    result = await RequestMemberPasswordResetUseCase(
        mock_uow, rate_limiter, email_sender, clock=clock
    ).execute("member@example.com")

    assert result.value.message == GENERIC


@pytest.mark.asyncio
async def test_request_fourth_in_hour_is_limited(mock_uow, rate_limiter, email_sender, clock):
    use_case = RequestMemberPasswordResetUseCase(mock_uow, rate_limiter, email_sender, clock=clock)
    for _ in range(3):
        await use_case.execute("member@example.com")

    result = await use_case.execute("member@example.com")

    assert result.error.code == "TOO_MANY_REQUESTS"


@pytest.mark.asyncio
async def test_confirm_sets_password(mock_uow, rate_limiter, clock, member_scheme, member):
    member.password_reset_token_hash = hashlib.sha256(b"plain-token").hexdigest()
    member.password_reset_expires_at = clock.now() + timedelta(minutes=30)
    mock_uow.members.get_by_reset_token_hash.return_value = member

    result = await ConfirmMemberPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=member_scheme
    ).execute("plain-token", NEW_PASSWORD, NEW_PASSWORD, client_ip="198.51.100.1")

    assert result.is_ok()
    mock_uow.members.get_by_reset_token_hash.assert_called_once_with(
        hashlib.sha256(b"plain-token").hexdigest()
    )
    assert member_scheme.verify(NEW_PASSWORD, member.password_hash, str(member.id))
    assert member.password_reset_token_hash is None
    assert member.password_reset_expires_at is None
    assert mock_uow.audit_events.create.call_args[0][0].action == "member_password_reset"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_confirm_unknown_token(mock_uow, rate_limiter, clock, member_scheme):
    result = await ConfirmMemberPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=member_scheme
    ).execute("missing", NEW_PASSWORD, NEW_PASSWORD)

    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"


@pytest.mark.asyncio
async def test_confirm_expired_token_is_cleared(mock_uow, rate_limiter, clock, member_scheme, member):
    member.password_reset_token_hash = hashlib.sha256(b"plain-token").hexdigest()
    member.password_reset_expires_at = clock.now() - timedelta(seconds=1)
    mock_uow.members.get_by_reset_token_hash.return_value = member
    original_hash = member.password_hash

    result = await ConfirmMemberPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=member_scheme
    ).execute("plain-token", NEW_PASSWORD, NEW_PASSWORD)

    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    assert member.password_reset_token_hash is None
    assert member.password_hash == original_hash


@pytest.mark.asyncio
async def test_confirm_password_mismatch(mock_uow, rate_limiter, clock, member_scheme):
    result = await ConfirmMemberPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=member_scheme
    ).execute("plain-token", NEW_PASSWORD, "different")

    assert result.error.code == "PASSWORD_MISMATCH"
    mock_uow.members.get_by_reset_token_hash.assert_not_called()


@pytest.mark.asyncio
async def test_confirm_weak_password(mock_uow, rate_limiter, clock, member_scheme):
    result = await ConfirmMemberPasswordResetUseCase(
        mock_uow, rate_limiter, clock=clock, scheme=member_scheme
    ).execute("plain-token", "weakpass", "weakpass")

    assert result.error.code == "WEAK_PASSWORD"
    assert result.error.message == "Password must contain at least one uppercase letter."
