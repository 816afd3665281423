"""
Integration tests for admin 2FA

Full enrollment and two-step login:
login -> setup -> enable -> login (pending) -> verify (full) -> disable
"""

import time
from uuid import uuid4

import pyotp
import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from shadowmesh.api.utils.jwt import generate_admin_token, verify_jwt
from shadowmesh.domain.entities import TokenStage
from tests.fixtures.seed import create_admin


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def login(client: AsyncClient, creds: dict) -> dict:
    response = await client.post("/admin/login", json=creds)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_admin_two_factor_enrollment_and_login(
    client: AsyncClient, db_session: AsyncSession, test_data
):
    creds = test_data.account("admin")
    admin = await create_admin(db_session, creds["email"], creds["password"])
    full_token = (await login(client, creds))["access_token"]

    # Status before enrollment
    response = await client.post("/admin/2fa/status", headers=bearer(full_token))
    assert response.json() == {"enabled": False}

    # Setup
    response = await client.post("/admin/2fa/setup", headers=bearer(full_token))
    assert response.status_code == 200
    secret = response.json()["secret"]
    assert pyotp.parse_uri(response.json()["provisioning_uri"]).secret == secret

    # Enable with the current code
    response = await client.post(
        "/admin/2fa/enable",
        headers=bearer(full_token),
        json={"code": pyotp.TOTP(secret).now(), "secret": secret},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "2FA enabled successfully"}

    response = await client.post("/admin/2fa/status", headers=bearer(full_token))
    assert response.json() == {"enabled": True}

    # Login now stops at the password stage
    data = await login(client, creds)
    assert data["requires_2fa"] is True
    assert data["token_stage"] == "password"
    pending_token = data["access_token"]

    response = await client.post("/admin/2fa/setup", headers=bearer(pending_token))
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TWO_FACTOR_REQUIRED"

    # Next step's code: the current one was consumed by enable
    next_code = pyotp.TOTP(secret).at(time.time() + 30)
    response = await client.post(
        "/admin/2fa/verify", headers=bearer(pending_token), json={"code": next_code}
    )
    assert response.status_code == 200
    upgraded = response.json()["access_token"]
    assert verify_jwt(upgraded)["stage"] == "full"
    assert verify_jwt(upgraded)["sub"] == str(admin.id)

    # Same code again is a replay
    response = await client.post(
        "/admin/2fa/verify", headers=bearer(pending_token), json={"code": next_code}
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CODE"

    # Disable
    response = await client.post("/admin/2fa/disable", headers=bearer(upgraded))
    assert response.status_code == 200

    await db_session.refresh(admin)
    assert admin.two_factor_enabled is False
    assert admin.two_factor_secret is None


@pytest.mark.asyncio
async def test_admin_enable_with_other_secret(client: AsyncClient, db_session: AsyncSession, test_data):
    creds = test_data.account("admin")
    await create_admin(db_session, creds["email"], creds["password"])
    token = (await login(client, creds))["access_token"]
    await client.post("/admin/2fa/setup", headers=bearer(token))

    other = pyotp.random_base32()
    response = await client.post(
        "/admin/2fa/enable",
        headers=bearer(token),
        json={"code": pyotp.TOTP(other).now(), "secret": other},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SECRET_MISMATCH"


@pytest.mark.asyncio
async def test_admin_verify_without_setup(client: AsyncClient, db_session: AsyncSession, test_data):
    creds = test_data.account("admin")
    await create_admin(db_session, creds["email"], creds["password"])
    token = (await login(client, creds))["access_token"]

    response = await client.post("/admin/2fa/verify", headers=bearer(token), json={"code": "123456"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "NOT_CONFIGURED"


@pytest.mark.asyncio
async def test_admin_verify_is_rate_limited(client: AsyncClient, db_session: AsyncSession, test_data):
    creds = test_data.account("admin")
    await create_admin(
        db_session,
        creds["email"],
        creds["password"],
        two_factor_enabled=True,
        two_factor_secret="JBSWY3DPEHPK3PXP",
    )
    token = (await login(client, creds))["access_token"]

    statuses = []
    for _ in range(6):
        response = await client.post(
            "/admin/2fa/verify", headers=bearer(token), json={"code": "abcdef"}
        )
        statuses.append(response.status_code)

    assert statuses == [401, 401, 401, 401, 401, 429]


@pytest.mark.asyncio
async def test_admin_routes_require_token(client: AsyncClient):
    response = await client.post("/admin/2fa/status")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"

    response = await client.post("/admin/2fa/setup", headers=bearer("not-a-jwt"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_token_for_deleted_account(client: AsyncClient):
    token = generate_admin_token(uuid4(), "gone@shadowmesh.org", TokenStage.full)

    response = await client.post("/admin/2fa/status", headers=bearer(token))

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "ADMIN_NOT_FOUND"
