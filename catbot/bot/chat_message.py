"""Chat lines of the Pokemon Showdown protocol."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

DEFAULT_ROOM = "lobby"
RANK_PREFIXES = "~&#@%*+"
# Unix seconds; longer digit runs are not a real server timestamp.
MAX_TIMESTAMP_DIGITS = 11


def normalize_username(username: str) -> str:
    """Normalize a username to a Showdown user id.

    Args:
        username: Username possibly with rank prefix (~, +, @, etc.)

    Returns:
        Lowercase alphanumeric id without rank prefix
    """
    return "".join(c for c in _strip_rank(username).lower() if c.isalnum())


@dataclass(frozen=True)
class ChatMessage:
    """A chat or private message addressed to the bot.

    Attributes:
        raw_message: The protocol line it was parsed from
        sender: Sender name with rank prefix removed
        message: Message text
        room: Room id for room chat, None for private messages
        timestamp: Server time for "|c:|" lines
    """

    raw_message: str
    sender: str
    message: str
    room: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def is_private(self) -> bool:
        return self.room is None

    @property
    def sender_id(self) -> str:
        return normalize_username(self.sender)

    @classmethod
    def parse_raw_message(
        cls, raw_message: str, room: str = DEFAULT_ROOM
    ) -> Optional["ChatMessage"]:
        """Parse "|pm|", "|c|", "|chat|" and "|c:|" lines.

        Args:
            raw_message: A single protocol line
            room: Room the line arrived in (ignored for private messages)

        Returns:
            ChatMessage, or None if the line is not a chat line
        """
        parts = raw_message.split("|")
        message_type = parts[1] if len(parts) > 1 else ""

        if message_type == "pm" and len(parts) > 4:
            return cls(
                raw_message=raw_message,
                sender=_strip_rank(parts[2]),
                message="|".join(parts[4:]),
            )
        if message_type in ("c", "chat") and len(parts) > 3:
            return cls(
                raw_message=raw_message,
                sender=_strip_rank(parts[2]),
                message="|".join(parts[3:]),
                room=room,
            )
        if message_type == "c:" and len(parts) > 4:
            timestamp = None
            if _is_timestamp(parts[2]):
                timestamp = datetime.fromtimestamp(int(parts[2]), tz=timezone.utc)
            return cls(
                raw_message=raw_message,
                sender=_strip_rank(parts[3]),
                message="|".join(parts[4:]),
                room=room,
                timestamp=timestamp,
            )
        return None


def _strip_rank(username: str) -> str:
    username = username.strip()
    if username and username[0] in RANK_PREFIXES:
        return username[1:]
    return username


def split_frame(raw_frame: str) -> Tuple[str, List[str]]:
    """Split a websocket frame into its room id and protocol lines.

    Frames for a room start with ">ROOMID"; frames without it belong to the
    lobby (this includes private messages).

    Returns:
        Tuple of (room id, non-empty lines)
    """
    lines = [line for line in raw_frame.split("\n") if line.strip()]
    room = DEFAULT_ROOM
    if lines and lines[0].startswith(">"):
        room = lines[0][1:].strip() or DEFAULT_ROOM
        lines = lines[1:]
    return room, lines


def _is_timestamp(field: str) -> bool:
    return 0 < len(field) <= MAX_TIMESTAMP_DIGITS and field.isascii() and field.isdigit()
