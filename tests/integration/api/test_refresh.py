import pytest
import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def tokens(tenant, generate_key, register):
    key = await generate_key(tenant.id)
    response = await register(key["key"])
    assert response.status_code == 201
    return response.json()["tokens"]


@pytest.mark.asyncio
async def test_refresh_rotates_and_old_token_stops_working(client: AsyncClient, tokens):
    first = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert first.status_code == 200
    rotated = first.json()["tokens"]
    assert rotated["refresh_token"] != tokens["refresh_token"]
    assert first.json()["user"]["email"] == "ana@silva.adv.br"

    replay = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replay.status_code == 401
    assert replay.json()["error"]["code"] == "INVALID_TOKEN"

    second = await client.post("/auth/refresh", json={"refresh_token": rotated["refresh_token"]})
    assert second.status_code == 200


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, tokens):
    response = await client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_is_idempotent(client: AsyncClient, tokens):
    body = {"refresh_token": tokens["refresh_token"]}

    first = await client.post("/auth/logout", json=body)
    second = await client.post("/auth/logout", json=body)
    refresh = await client.post("/auth/refresh", json=body)

    assert first.json() == {"revoked": True}
    assert second.json() == {"revoked": False}
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_all_revokes_every_device(client: AsyncClient, tokens, test_data):
    credentials = test_data.get_copy("registration")
    other_device = await client.post(
        "/auth/login",
        json={"email": credentials["email"], "password": credentials["password"]},
    )
    other_refresh = other_device.json()["tokens"]["refresh_token"]

    response = await client.post(
        "/auth/logout-all", headers={"Authorization": f"Bearer {tokens['access_token']}"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["revoked_count"] == 2
    assert data["side_effects"] == [{"name": "revoke_refresh_tokens", "succeeded": True}]
    for refresh_token in (tokens["refresh_token"], other_refresh):
        refreshed = await client.post("/auth/refresh", json={"refresh_token": refresh_token})
        assert refreshed.status_code == 401


@pytest.mark.asyncio
async def test_change_password_revokes_sessions(client: AsyncClient, tokens):
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    wrong = await client.post(
        "/auth/change-password",
        json={"current_password": "WrongPass999!", "new_password": "BrandNew456!"},
        headers=headers,
    )
    assert wrong.status_code == 401

    response = await client.post(
        "/auth/change-password",
        json={"current_password": "SecurePass123!", "new_password": "BrandNew456!"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["revoked_sessions"] == 1

    refreshed = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 401

    login = await client.post(
        "/auth/login", json={"email": "ana@silva.adv.br", "password": "BrandNew456!"}
    )
    assert login.status_code == 200
