"""
Matrix chat client.

Scouty reports to a private room shared between a bot account and the
operator's account. The room is found by a deterministic alias and created
on first use:

    #<base64("scouty/<chain>/<user>/<bot user>")>:<bot homeserver>

Disabled clients accept every call and do nothing.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Final
from urllib.parse import quote

import httpx

from scouty.errors import MatrixError

logger = logging.getLogger(__name__)

MATRIX_URL: Final = "https://matrix.org/_matrix/client/r0"
"""Client-server API base URL."""

DEFAULT_TIMEOUT: Final = 30.0
"""HTTP request timeout in seconds."""

RATE_LIMIT_DELAY: Final = 5.0
"""Seconds to wait after a 429 response before retrying."""

MAX_SEND_ATTEMPTS: Final = 5
"""Attempts per message while rate limited."""


def private_room_alias_name(chain: str, matrix_user: str, matrix_bot_user: str) -> str:
    """Local part of the private room alias."""
    return base64.b64encode(f"scouty/{chain}/{matrix_user}/{matrix_bot_user}".encode()).decode()


class Matrix:
    """
    Bot session on a Matrix homeserver.

    Call `authenticate` once, then `send_message` per report.
    """

    def __init__(
        self,
        *,
        user: str,
        bot_user: str,
        bot_password: str,
        disabled: bool = False,
        display_name_disabled: bool = False,
        base_url: str = MATRIX_URL,
        client: httpx.AsyncClient | None = None,
        rate_limit_delay: float = RATE_LIMIT_DELAY,
    ) -> None:
        self.user = user
        self.bot_user = bot_user
        self.bot_password = bot_password
        self.disabled = disabled
        self.display_name_disabled = display_name_disabled
        self.base_url = base_url.rstrip("/")
        self.rate_limit_delay = rate_limit_delay
        self.access_token: str | None = None
        self.private_room_id: str | None = None
        self.chain = ""
        self._client = client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

    async def __aenter__(self) -> Matrix:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        params = {}
        if authenticated:
            if self.access_token is None:
                raise MatrixError("access_token not defined")
            params["access_token"] = self.access_token
        try:
            return await self._client.request(
                method, f"{self.base_url}{path}", json=json, params=params
            )
        except httpx.RequestError as exc:
            raise MatrixError(
                f"Network error while connecting to {exc.request.url}: {exc}"
            ) from exc

    @staticmethod
    def _error(response: httpx.Response) -> MatrixError:
        try:
            detail = response.json().get("error", response.text)
        except (ValueError, AttributeError):
            detail = response.text[:200]
        return MatrixError(f"HTTP error {response.status_code}: {detail}")

    @staticmethod
    def _body(response: httpx.Response, *required: str) -> dict[str, Any]:
        """Decode a successful response, checking the fields the caller reads."""
        try:
            body = response.json()
        except ValueError as exc:
            raise MatrixError(f"Invalid JSON in response: {response.text[:200]}") from exc
        if not isinstance(body, dict) or any(name not in body for name in required):
            raise MatrixError(f"Response is missing {', '.join(required)}: {response.text[:200]}")
        return body

    async def login(self) -> None:
        """Log the bot in with its password."""
        if self.disabled:
            return
        if ":" not in self.bot_user:
            raise MatrixError(
                f"matrix bot user '{self.bot_user}' does not specify the matrix server "
                "e.g. '@your-own-scouty-bot-account:matrix.org'"
            )

        response = await self._request(
            "POST",
            "/login",
            json={"type": "m.login.password", "user": self.bot_user, "password": self.bot_password},
            authenticated=False,
        )
        if response.status_code != httpx.codes.OK:
            raise self._error(response)

        body = self._body(response, "access_token")
        self.access_token = body["access_token"]
        logger.info(
            "The 'Scouty Bot' user %s has been authenticated at %s",
            body.get("user_id"),
            body.get("home_server"),
        )

    async def authenticate(self, chain: str) -> None:
        """Log in, find or create the private room, and set the bot display name."""
        if self.disabled:
            return
        self.chain = chain
        await self.login()
        self.private_room_id = await self.get_or_create_private_room()
        if not self.display_name_disabled:
            await self.change_bot_display_name()

    @property
    def private_room_alias(self) -> str:
        alias_name = private_room_alias_name(self.chain, self.user, self.bot_user)
        return f"#{alias_name}:{self.bot_user.split(':')[-1]}"

    async def get_room_id_by_room_alias(self, room_alias: str) -> str | None:
        """Look up a room id, or `None` when the alias is unknown."""
        response = await self._request(
            "GET", f"/directory/room/{quote(room_alias, safe='')}", authenticated=False
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.status_code != httpx.codes.OK:
            raise self._error(response)
        logger.debug("%s * Matrix room alias", room_alias)
        return self._body(response, "room_id")["room_id"]

    async def create_private_room(self) -> str:
        """Create the private room and invite the operator."""
        response = await self._request(
            "POST",
            "/createRoom",
            json={
                "name": f"{self.chain} Scouty Bot (Private)",
                "room_alias_name": private_room_alias_name(self.chain, self.user, self.bot_user),
                "topic": "Scouty Bot <> Leading nodes every session",
                "preset": "trusted_private_chat",
                "invite": [self.user],
                "is_direct": True,
            },
        )
        if response.status_code != httpx.codes.OK:
            raise self._error(response)
        room_id = self._body(response, "room_id")["room_id"]
        logger.info("%s * Matrix private room alias created", self.private_room_alias)
        return room_id

    async def get_or_create_private_room(self) -> str:
        room_alias = self.private_room_alias
        room_id = await self.get_room_id_by_room_alias(room_alias)
        if room_id is None:
            room_id = await self.create_private_room()
        logger.info("Messages will be sent to room %s (Private)", room_alias)
        return room_id

    async def change_bot_display_name(self) -> None:
        username = self.user.split(":")[0].removeprefix("@")
        display_name = f"Scouty Bot ({username})"
        response = await self._request(
            "PUT",
            f"/profile/{quote(self.bot_user, safe='')}/displayname",
            json={"displayname": display_name},
        )
        if response.status_code != httpx.codes.OK:
            raise self._error(response)
        logger.info("%s * Matrix bot display name changed", display_name)

    async def send_message(self, message: str, formatted_message: str) -> str | None:
        """
        Send a report to the private room.

        Args:
            message: Plain text body.
            formatted_message: HTML body.

        Returns:
            The event id, or `None` when disabled.

        Raises:
            MatrixError: If the message is rejected, or still rate limited
                after `MAX_SEND_ATTEMPTS` attempts.
        """
        if self.disabled:
            return None
        if self.private_room_id is None:
            raise MatrixError("private room not defined")

        payload = {
            "msgtype": "m.text",
            "body": message,
            "format": "org.matrix.custom.html",
            "formatted_body": formatted_message,
        }
        path = f"/rooms/{quote(self.private_room_id, safe='')}/send/m.room.message"

        for attempt in range(1, MAX_SEND_ATTEMPTS + 1):
            response = await self._request("POST", path, json=payload)
            if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
                logger.warning(
                    "Matrix rate limited (attempt %d/%d), retrying in %.0fs",
                    attempt,
                    MAX_SEND_ATTEMPTS,
                    self.rate_limit_delay,
                )
                await asyncio.sleep(self.rate_limit_delay)
                continue
            if response.status_code != httpx.codes.OK:
                raise self._error(response)
            event_id = self._body(response, "event_id")["event_id"]
            logger.info("Message sent to room %s (event %s)", self.private_room_id, event_id)
            return event_id

        raise MatrixError(f"Message not sent after {MAX_SEND_ATTEMPTS} rate limited attempts")
