import pytest

from shadowmesh.app.use_cases.member_auth import MemberLoginUseCase
from shadowmesh.domain.entities import Member

PASSWORD = "Memb3r!pass"


@pytest.fixture
def member(member_scheme):
    member = Member(email="member@example.com", full_name="Ada Member")
    member.password_hash = member_scheme.hash(PASSWORD, str(member.id))
    return member


@pytest.mark.asyncio
async def test_member_login_success(mock_uow, rate_limiter, member_scheme, member):
    mock_uow.members.get_by_email.return_value = member

    result = await MemberLoginUseCase(mock_uow, rate_limiter, scheme=member_scheme).execute(
        "Member@Example.com", PASSWORD
    )

    assert result.is_ok()
    assert result.value.member_id == member.id
    assert result.value.full_name == "Ada Member"
    assert result.value.requires_2fa is False
    mock_uow.members.get_by_email.assert_called_once_with("member@example.com")


@pytest.mark.asyncio
async def test_member_login_reports_2fa(mock_uow, rate_limiter, member_scheme, member):
    member.two_factor_enabled = True
    member.two_factor_secret = "JBSWY3DPEHPK3PXP"
    mock_uow.members.get_by_email.return_value = member

    result = await MemberLoginUseCase(mock_uow, rate_limiter, scheme=member_scheme).execute(
        "member@example.com", PASSWORD
    )

    assert result.value.requires_2fa is True


@pytest.mark.asyncio
async def test_member_login_wrong_password(mock_uow, rate_limiter, member_scheme, member):
    mock_uow.members.get_by_email.return_value = member

    result = await MemberLoginUseCase(mock_uow, rate_limiter, scheme=member_scheme).execute(
        "member@example.com", "Wrong!pass1"
    )

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_member_login_unknown_email(mock_uow, rate_limiter, member_scheme):
    result = await MemberLoginUseCase(mock_uow, rate_limiter, scheme=member_scheme).execute(
        "nobody@example.com", PASSWORD
    )

    assert result.error.code == "INVALID_CREDENTIALS"
    assert result.error.message == "Invalid email or password"


@pytest.mark.asyncio
async def test_member_login_is_rate_limited_not_locked(mock_uow, rate_limiter, member_scheme, member, clock):
    mock_uow.members.get_by_email.return_value = member
    use_case = MemberLoginUseCase(mock_uow, rate_limiter, scheme=member_scheme)

    for _ in range(5):
        await use_case.execute("member@example.com", "Wrong!pass1")

    result = await use_case.execute("member@example.com", PASSWORD)
    assert result.error.code == "TOO_MANY_REQUESTS"

    # No persisted lockout: the next window accepts the right password
    clock.advance(900)
    assert (await use_case.execute("member@example.com", PASSWORD)).is_ok()
    mock_uow.members.update.assert_not_called()
