from types import SimpleNamespace

import pytest
from aiohttp.test_utils import TestClient, TestServer

from web.routes.dashboard import collect_stats
from web.server import create_app


@pytest.mark.asyncio
async def test_dashboard_requires_login(state):
    async with TestClient(TestServer(create_app(state))) as client:
        for path in ("/", "/dashboard", "/api/stats"):
            response = await client.get(path, allow_redirects=False)
            assert response.status == 302
            assert response.headers["Location"] == "/login"


@pytest.mark.asyncio
async def test_wrong_password_is_rejected(state):
    async with TestClient(TestServer(create_app(state))) as client:
        response = await client.post("/login", data={"username": "admin", "password": "nope"})

        assert response.status == 401
        assert "Invalid username or password" in await response.text()


@pytest.mark.asyncio
async def test_login_then_read_stats(state):
    state.client = SimpleNamespace(guilds=[
        SimpleNamespace(name="Alpha", member_count=10, id=1),
        SimpleNamespace(name="<Beta>", member_count=5, id=2),
    ])

    async with TestClient(TestServer(create_app(state))) as client:
        response = await client.post(
            "/login",
            data={"username": "admin", "password": "admin123"},
            allow_redirects=False,
        )
        assert response.status == 302
        assert response.headers["Location"] == "/dashboard"

        stats = await (await client.get("/api/stats")).json()
        assert stats["server_count"] == 2
        assert stats["user_count"] == 15
        assert stats["command_count"] == len(state.registry)
        assert stats["servers"][1] == {"name": "<Beta>", "member_count": 5, "id": "2"}

        page = await (await client.get("/dashboard")).text()
        assert "&lt;Beta&gt;" in page

        response = await client.get("/logout", allow_redirects=False)
        assert response.headers["Location"] == "/login"
        response = await client.get("/dashboard", allow_redirects=False)
        assert response.status == 302


def test_stats_without_client(state, clock):
    clock.advance(3 * 3600 + 120)

    stats = collect_stats(state)

    assert stats.server_count == 0
    assert stats.user_count == 0
    assert stats.uptime == "0d 3h 2m"
