"""Tests for the Matrix client."""

from __future__ import annotations

import base64
import json
from typing import Callable

import httpx
import pytest

from scouty.errors import MatrixError
from scouty.matrix import MAX_SEND_ATTEMPTS, Matrix, private_room_alias_name

Handler = Callable[[httpx.Request], httpx.Response]


class FakeHomeserver:
    """Records requests and answers them like a homeserver."""

    def __init__(self, *, room_exists: bool = True) -> None:
        self.requests: list[httpx.Request] = []
        self.room_exists = room_exists
        self.send_responses: list[httpx.Response] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url.endswith("/login"):
            return httpx.Response(
                200,
                json={"access_token": "token", "user_id": "@bot:matrix.org", "home_server": "x"},
            )
        if "/directory/room/" in url:
            if self.room_exists:
                return httpx.Response(200, json={"room_id": "!room:matrix.org"})
            return httpx.Response(404, json={"errcode": "M_NOT_FOUND", "error": "not found"})
        if "/createRoom" in url:
            return httpx.Response(200, json={"room_id": "!new:matrix.org"})
        if "/displayname" in url:
            return httpx.Response(200, json={})
        if "/send/m.room.message" in url:
            if self.send_responses:
                return self.send_responses.pop(0)
            return httpx.Response(200, json={"event_id": "$event"})
        return httpx.Response(404, json={"error": "unexpected"})

    def paths(self) -> list[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]


def make_matrix(server: Handler, **kwargs: object) -> Matrix:
    options: dict[str, object] = {
        "user": "@me:matrix.org",
        "bot_user": "@bot:matrix.org",
        "bot_password": "secret",
        "client": httpx.AsyncClient(transport=httpx.MockTransport(server)),
        "rate_limit_delay": 0,
    }
    options.update(kwargs)
    return Matrix(**options)  # type: ignore[arg-type]


class TestPrivateRoomAlias:
    """Tests for the deterministic room alias."""

    def test_alias_name(self) -> None:
        name = private_room_alias_name("Polkadot", "@me:matrix.org", "@bot:matrix.org")
        assert base64.b64decode(name).decode() == "scouty/Polkadot/@me:matrix.org/@bot:matrix.org"

    def test_alias_uses_bot_server(self) -> None:
        matrix = make_matrix(FakeHomeserver())
        matrix.chain = "Kusama"
        name = private_room_alias_name("Kusama", "@me:matrix.org", "@bot:matrix.org")
        assert matrix.private_room_alias == f"#{name}:matrix.org"


class TestAuthenticate:
    """Tests for login and room setup."""

    @pytest.mark.asyncio
    async def test_existing_room(self) -> None:
        server = FakeHomeserver()
        async with make_matrix(server) as matrix:
            await matrix.authenticate("Polkadot")

        assert matrix.access_token == "token"
        assert matrix.private_room_id == "!room:matrix.org"
        assert not any("/createRoom" in p for p in server.paths())
        assert any(p.endswith("/displayname") for p in server.paths())

        login = json.loads(server.requests[0].content)
        assert login == {
            "type": "m.login.password",
            "user": "@bot:matrix.org",
            "password": "secret",
        }

    @pytest.mark.asyncio
    async def test_creates_missing_room(self) -> None:
        server = FakeHomeserver(room_exists=False)
        async with make_matrix(server, display_name_disabled=True) as matrix:
            await matrix.authenticate("Polkadot")

        assert matrix.private_room_id == "!new:matrix.org"
        create = next(r for r in server.requests if r.url.path.endswith("/createRoom"))
        body = json.loads(create.content)
        assert body["invite"] == ["@me:matrix.org"]
        assert body["room_alias_name"] == private_room_alias_name(
            "Polkadot", "@me:matrix.org", "@bot:matrix.org"
        )
        assert create.url.params["access_token"] == "token"
        assert not any(p.endswith("/displayname") for p in server.paths())

    @pytest.mark.asyncio
    async def test_bot_user_without_server(self) -> None:
        async with make_matrix(FakeHomeserver(), bot_user="bot") as matrix:
            with pytest.raises(MatrixError, match="does not specify the matrix server"):
                await matrix.authenticate("Polkadot")

    @pytest.mark.asyncio
    async def test_login_rejected(self) -> None:
        def reject(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"errcode": "M_FORBIDDEN", "error": "Invalid password"})

        async with make_matrix(reject) as matrix:
            with pytest.raises(MatrixError, match="Invalid password"):
                await matrix.authenticate("Polkadot")

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with make_matrix(unreachable) as matrix:
            with pytest.raises(MatrixError, match="Network error"):
                await matrix.login()

    @pytest.mark.asyncio
    async def test_disabled_makes_no_requests(self) -> None:
        server = FakeHomeserver()
        async with make_matrix(server, disabled=True) as matrix:
            await matrix.authenticate("Polkadot")
            assert await matrix.send_message("hi", "<b>hi</b>") is None
        assert server.requests == []


class TestSendMessage:
    """Tests for message delivery."""

    @pytest.mark.asyncio
    async def test_sends_html(self) -> None:
        server = FakeHomeserver()
        async with make_matrix(server) as matrix:
            await matrix.authenticate("Polkadot")
            event_id = await matrix.send_message("a\nb", "a<br/>b")

        assert event_id == "$event"
        body = json.loads(server.requests[-1].content)
        assert body == {
            "msgtype": "m.text",
            "body": "a\nb",
            "format": "org.matrix.custom.html",
            "formatted_body": "a<br/>b",
        }

    @pytest.mark.asyncio
    async def test_requires_room(self) -> None:
        async with make_matrix(FakeHomeserver()) as matrix:
            with pytest.raises(MatrixError, match="private room"):
                await matrix.send_message("a", "a")

    @pytest.mark.asyncio
    async def test_retries_when_rate_limited(self) -> None:
        server = FakeHomeserver()
        server.send_responses = [
            httpx.Response(429, json={"errcode": "M_LIMIT_EXCEEDED"}),
            httpx.Response(429, json={"errcode": "M_LIMIT_EXCEEDED"}),
        ]
        async with make_matrix(server) as matrix:
            await matrix.authenticate("Polkadot")
            assert await matrix.send_message("a", "a") == "$event"

        sends = [r for r in server.requests if r.url.path.endswith("/send/m.room.message")]
        assert len(sends) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self) -> None:
        server = FakeHomeserver()
        server.send_responses = [
            httpx.Response(429, json={"errcode": "M_LIMIT_EXCEEDED"})
            for _ in range(MAX_SEND_ATTEMPTS)
        ]
        async with make_matrix(server) as matrix:
            await matrix.authenticate("Polkadot")
            with pytest.raises(MatrixError, match="rate limited"):
                await matrix.send_message("a", "a")

    @pytest.mark.asyncio
    async def test_rejected_message(self) -> None:
        server = FakeHomeserver()
        server.send_responses = [httpx.Response(400, json={"error": "bad event"})]
        async with make_matrix(server) as matrix:
            await matrix.authenticate("Polkadot")
            with pytest.raises(MatrixError, match="bad event"):
                await matrix.send_message("a", "a")

    @pytest.mark.asyncio
    async def test_send_response_not_json(self) -> None:
        server = FakeHomeserver()
        server.send_responses = [httpx.Response(200, text="<html>proxy</html>")]
        async with make_matrix(server) as matrix:
            await matrix.authenticate("Polkadot")
            with pytest.raises(MatrixError, match="Invalid JSON"):
                await matrix.send_message("a", "a")


class TestUnexpectedResponses:
    """Tests for successful responses with unusable bodies."""

    @pytest.mark.asyncio
    async def test_login_without_token(self) -> None:
        def login(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"user_id": "@bot:matrix.org"})

        async with make_matrix(login) as matrix:
            with pytest.raises(MatrixError, match="access_token"):
                await matrix.login()
        assert matrix.access_token is None

    @pytest.mark.asyncio
    async def test_room_lookup_not_an_object(self) -> None:
        async with make_matrix(lambda request: httpx.Response(200, json=["!room"])) as matrix:
            with pytest.raises(MatrixError, match="room_id"):
                await matrix.get_room_id_by_room_alias("#alias:matrix.org")
