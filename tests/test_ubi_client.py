"""Tests for the Ubisoft HTTP client against a local aiohttp server."""

import base64
from datetime import datetime, timezone

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from divbot.constants import SpaceIds, UbiConstants
from divbot.data_models.stats import ProfileRef
from divbot.services.ubi_client import UbiClient, get_auth_headers
from divbot.utils.exceptions import LoginFailedError, PayloadParseError, UbiApiError

from helpers import NOW, make_stats_cards, make_ticket


class FakeUbiServices:
    """Records requests and answers with canned bodies."""

    def __init__(self):
        self.requests = []
        self.login_body = {
            "ticket": "fresh-ticket",
            "sessionId": "session-1",
            "expiration": "2024-05-01T15:00:00.1234567Z",
        }
        self.profiles_body = {"profiles": []}
        self.card_body = make_stats_cards(["10"])

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/v3/profiles/sessions", self.login)
        app.router.add_get("/v2/profiles", self.profiles)
        app.router.add_get("/v1/profiles/{profile_id}/statscard", self.stats_card)
        return app

    async def login(self, request):
        self.requests.append(request)
        return web.json_response(self.login_body)

    async def profiles(self, request):
        self.requests.append(request)
        if isinstance(self.profiles_body, str):
            return web.Response(text=self.profiles_body, content_type="text/html")
        return web.json_response(self.profiles_body)

    async def stats_card(self, request):
        self.requests.append(request)
        return web.json_response(self.card_body)


@pytest.fixture
def services():
    return FakeUbiServices()


@pytest_asyncio.fixture
async def client(services, monkeypatch):
    server = TestServer(services.app())
    await server.start_server()
    monkeypatch.setattr(UbiConstants, "LOGIN_URL", str(server.make_url("/v3/profiles/sessions")))
    monkeypatch.setattr(UbiConstants, "PROFILES_URL", str(server.make_url("/v2/profiles")))
    monkeypatch.setattr(
        UbiConstants, "STATS_CARD_URL", str(server.make_url("/v1/profiles")) + "/{profile_id}/statscard"
    )

    async with aiohttp.ClientSession() as http:
        yield UbiClient(http, "agent@example.com", "hunter2")
    await server.close()


def test_auth_headers_carry_ticket_and_session():
    headers = get_auth_headers(make_ticket(NOW, "abc"))

    assert headers["Authorization"] == "Ubi_v1 t=abc"
    assert headers["Ubi-SessionId"] == "session-abc"
    assert headers["Ubi-AppId"] == UbiConstants.APP_ID
    assert "br" not in headers["Accept-Encoding"]


@pytest.mark.asyncio
async def test_login_sends_basic_credentials_and_parses_ticket(client, services):
    ticket = await client.login()

    assert ticket.ticket == "fresh-ticket"
    assert ticket.session_id == "session-1"
    assert ticket.expires_at == datetime(2024, 5, 1, 15, 0, 0, 123456, tzinfo=timezone.utc)

    expected = base64.b64encode(b"agent@example.com:hunter2").decode()
    assert services.requests[0].headers["Authorization"] == f"Basic {expected}"


@pytest.mark.asyncio
async def test_login_error_code_raises(client, services):
    services.login_body = {"errorCode": 1, "message": "Invalid credentials", "httpCode": 401}

    with pytest.raises(LoginFailedError) as exc_info:
        await client.login()
    assert exc_info.value.error_code == 1


@pytest.mark.asyncio
async def test_login_without_ticket_raises(client, services):
    services.login_body = {"sessionId": "session-1"}

    with pytest.raises(LoginFailedError):
        await client.login()


@pytest.mark.asyncio
async def test_find_profiles_by_name(client, services):
    services.profiles_body = {"profiles": [
        {"profileId": "u1", "nameOnPlatform": "Alice", "platformType": "uplay"},
        {"nameOnPlatform": "no id"},
    ]}

    profiles = await client.find_profiles(make_ticket(NOW, "abc"), name="Alice")

    assert profiles == [ProfileRef("u1", "Alice")]
    request = services.requests[0]
    assert request.query["nameOnPlatform"] == "Alice"
    assert request.query["platformType"] == "uplay"
    assert request.headers["Authorization"] == "Ubi_v1 t=abc"


@pytest.mark.asyncio
async def test_find_profiles_by_id(client, services):
    await client.find_profiles(make_ticket(NOW), profile_id="u2")

    request = services.requests[0]
    assert request.query["idOnPlatform"] == "u2"
    assert "nameOnPlatform" not in request.query


@pytest.mark.asyncio
async def test_find_profiles_needs_a_key(client):
    with pytest.raises(ValueError):
        await client.find_profiles(make_ticket(NOW))


@pytest.mark.asyncio
async def test_find_profiles_error_code_raises(client, services):
    services.profiles_body = {"errorCode": 3, "message": "Invalid ticket"}

    with pytest.raises(UbiApiError):
        await client.find_profiles(make_ticket(NOW), name="Alice")


@pytest.mark.asyncio
async def test_non_json_response_is_parse_error(client, services):
    services.profiles_body = "<html>maintenance</html>"

    with pytest.raises(PayloadParseError):
        await client.find_profiles(make_ticket(NOW), name="Alice")


@pytest.mark.asyncio
async def test_fetch_stats_card(client, services):
    body = await client.fetch_stats_card(make_ticket(NOW), "u1", SpaceIds.DIVISION_1)

    assert body == make_stats_cards(["10"])
    request = services.requests[0]
    assert request.match_info["profile_id"] == "u1"
    assert request.query["spaceId"] == SpaceIds.DIVISION_1
