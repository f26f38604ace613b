"""WebSocket client for chatting on Pokemon Showdown servers."""

import json
from typing import Any, Iterable, List, Optional

import httpx
import websockets
from absl import logging

from catbot.bot.chat_message import normalize_username
from catbot.exceptions import ShowdownLoginError

DEFAULT_SERVER_URL = "wss://sim3.psim.us/showdown/websocket"
DEFAULT_LOGIN_URL = "https://play.pokemonshowdown.com/action.php"

_CHALLSTR_MARKER = "|challstr|"
_UPDATEUSER_MARKER = "|updateuser|"
_NAMETAKEN_MARKER = "|nametaken|"


def format_multiline(text: str) -> str:
    """Wrap multi-line text in Showdown's !code block syntax."""
    if "\n" not in text:
        return text
    return "!code " + text


def parse_challstr(frame: str) -> Optional[str]:
    """Extract the login challenge from a frame.

    Returns:
        The challstr (it contains a "|" itself, e.g. "4|abc..."), or None if
        the frame carries no challenge
    """
    _, marker, rest = frame.partition(_CHALLSTR_MARKER)
    if not marker:
        return None
    return rest.split("\n", 1)[0].strip()


def parse_login_response(username: str, response_text: str) -> str:
    """Read the assertion out of an action.php login response.

    The login server prefixes its JSON with "]" to defeat JSON hijacking.

    Args:
        username: Name being logged in, for error reporting
        response_text: Raw body of the login response

    Returns:
        The signed assertion to send with /trn

    Raises:
        ShowdownLoginError: If the body is not JSON or has no assertion
    """
    try:
        body = json.loads(response_text.removeprefix("]"))
    except ValueError as e:
        raise ShowdownLoginError(username, f"unreadable login response: {e}") from e

    assertion = body.get("assertion") if isinstance(body, dict) else None
    if not assertion or assertion.startswith(";"):
        reason = body.get("actionsuccess") if isinstance(body, dict) else None
        raise ShowdownLoginError(username, str(assertion or reason or body))
    return assertion


class ShowdownClient:
    """Chat connection to a Showdown server.

    Typical usage:
        client = ShowdownClient()
        await client.connect(DEFAULT_SERVER_URL, "CatBot", password)
        await client.join_rooms(["lobby"])
        frame = await client.receive_message()
    """

    def __init__(
        self,
        login_url: str = DEFAULT_LOGIN_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the client.

        Args:
            login_url: action.php endpoint issuing assertions for registered names
            http_client: Client for the login request; a short-lived one is
                created if omitted
        """
        self._ws: Optional[Any] = None
        self._login_url = login_url
        self._http_client = http_client
        self._username: str = ""
        self._authenticated: bool = False
        self._rooms: List[str] = []

    async def connect(self, server_url: str, username: str, password: str = "") -> None:
        """Open the websocket and log in.

        Args:
            server_url: WebSocket URL (e.g., wss://sim3.psim.us/showdown/websocket)
            username: Name to chat as
            password: Account password; empty to chat as an unregistered name

        Raises:
            ShowdownLoginError: If the server or login server refuses the name
        """
        self._username = username

        logging.info("Connecting to %s as %s", server_url, username)
        self._ws = await websockets.connect(server_url)
        await self._log_in(username, password)

    async def _log_in(self, username: str, password: str) -> None:
        challstr = await self._next_challstr()
        logging.debug("Received challstr: %s", challstr)

        if password:
            assertion = await self._get_assertion(username, password, challstr)
            await self.send_message(f"|/trn {username},0,{assertion}")
        else:
            logging.info("No password provided, using an unregistered name")
            await self.send_message(f"|/trn {username},0")

        await self._await_rename(username)
        self._authenticated = True
        logging.info("Logged in as %s", username)

    async def _next_challstr(self) -> str:
        while True:
            challstr = parse_challstr(await self.receive_message())
            if challstr:
                return challstr

    async def _await_rename(self, username: str) -> None:
        """Wait until the server confirms the new name.

        Raises:
            ShowdownLoginError: If the server answers with "|nametaken|"
        """
        user_id = normalize_username(username)
        while True:
            frame = await self.receive_message()
            for line in frame.split("\n"):
                if line.startswith(_NAMETAKEN_MARKER):
                    reason = line.split("|")[-1] or "name taken"
                    raise ShowdownLoginError(username, reason)
                if line.startswith(_UPDATEUSER_MARKER):
                    name = line[len(_UPDATEUSER_MARKER) :].split("|", 1)[0]
                    if normalize_username(name) == user_id:
                        return

    async def _get_assertion(self, username: str, password: str, challstr: str) -> str:
        form_data = {
            "act": "login",
            "name": username,
            "pass": password,
            "challstr": challstr,
        }
        logging.info("Requesting assertion for %s from %s", username, self._login_url)
        try:
            if self._http_client is not None:
                response = await self._http_client.post(self._login_url, data=form_data)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(self._login_url, data=form_data)
        except httpx.HTTPError as e:
            raise ShowdownLoginError(username, f"login server unreachable: {e}") from e
        return parse_login_response(username, response.text)

    async def join_rooms(self, rooms: Iterable[str]) -> None:
        for room in rooms:
            await self.send_message(f"|/join {room}")
            self._rooms.append(room)
            logging.info("Joined room %s", room)

    async def send_room_message(self, room: str, text: str) -> None:
        await self.send_message(f"{room}|{format_multiline(text)}")

    async def send_private_message(self, username: str, text: str) -> None:
        await self.send_message(f"|/pm {username}, {format_multiline(text)}")

    async def send_message(self, message: str) -> None:
        """Send a raw protocol line ("<room>|<text>")."""
        await self._require_socket().send(message)

    async def receive_message(self) -> str:
        """Receive one raw frame, possibly holding several protocol lines."""
        return str(await self._require_socket().recv())

    def _require_socket(self) -> Any:
        if self._ws is None:
            raise RuntimeError("Not connected to server")
        return self._ws

    async def disconnect(self) -> None:
        if self._ws is None:
            return
        await self._ws.close()
        logging.info("Disconnected from server")
        self._ws = None
        self._authenticated = False
        self._rooms = []

    @property
    def username(self) -> str:
        return self._username

    @property
    def rooms(self) -> List[str]:
        return list(self._rooms)

    @property
    def is_connected(self) -> bool:
        return self._ws is not None

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated
