from unittest.mock import AsyncMock, MagicMock

import pytest

from shadowmesh.app.services.credential_schemes import (
    AdaptiveHashScheme,
    DeterministicDerivationScheme,
)
from shadowmesh.app.services.email_sender import IEmailSender
from shadowmesh.app.services.rate_limiter import RateLimiter
from tests.utils.fixed_clock import FixedClock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.admins = MagicMock()
    uow.admins.get_by_email = AsyncMock(return_value=None)
    uow.admins.get_by_id = AsyncMock(return_value=None)
    uow.admins.update = AsyncMock()
    uow.admins.compare_and_set_login_state = AsyncMock(return_value=True)

    uow.members = MagicMock()
    uow.members.get_by_email = AsyncMock(return_value=None)
    uow.members.get_by_id = AsyncMock(return_value=None)
    uow.members.get_by_reset_token_hash = AsyncMock(return_value=None)
    uow.members.update = AsyncMock()

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter(clock=clock)


@pytest.fixture
def email_sender():
    sender = MagicMock(spec=IEmailSender)
    sender.send = AsyncMock()
    return sender


@pytest.fixture
def admin_scheme():
    # Minimum bcrypt cost keeps unit tests fast
    return AdaptiveHashScheme(rounds=4)


@pytest.fixture
def legacy_admin_scheme():
    return DeterministicDerivationScheme(application_salt="shadowmesh_admin_salt", iterations=1000)


@pytest.fixture
def member_scheme():
    return DeterministicDerivationScheme(application_salt="shadowmesh_salt", iterations=1000)
