"""Listen loop that answers chat commands on a Showdown connection."""

import asyncio
from datetime import datetime, timezone
from typing import Any

from absl import logging

from catbot.bot.chat_message import ChatMessage, normalize_username, split_frame
from catbot.bot.command_handler import CommandHandler


class ChatListener:
    """Reads frames from a ShowdownClient and replies to commands.

    Private messages are answered by private message; room messages are
    answered in the room they came from. Messages sent by the bot itself are
    ignored.
    """

    def __init__(self, client: Any, handler: CommandHandler) -> None:
        """Initialize the listener.

        Args:
            client: ShowdownClient-like object with receive_message,
                send_private_message, send_room_message, username and
                is_connected
            handler: Command handler producing the replies
        """
        self._client = client
        self._handler = handler
        self._handled_count = 0
        self._started_at = datetime.now(timezone.utc).replace(microsecond=0)

    @property
    def handled_count(self) -> int:
        return self._handled_count

    async def listen(self) -> None:
        """Answer commands until the client disconnects.

        Raises:
            RuntimeError: If the connection drops
        """
        logging.info("Listening for %s commands", self._handler.prefix)
        try:
            while self._client.is_connected:
                raw_frame = await self._client.receive_message()
                logging.debug("Received raw frame: %s", raw_frame[:200])

                if not raw_frame.strip():
                    continue

                room, lines = split_frame(raw_frame)
                for line in lines:
                    message = ChatMessage.parse_raw_message(line, room=room)
                    if message is not None:
                        await self.handle_message(message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logging.error("Error while listening for commands: %s", e)
            raise

        raise RuntimeError("Client disconnected")

    async def handle_message(self, message: ChatMessage) -> None:
        """Answer a single chat message if it is a command for the bot."""
        if message.sender_id == normalize_username(self._client.username):
            return
        # Room backlog replayed on join.
        if message.timestamp is not None and message.timestamp < self._started_at:
            return
        if not self._handler.is_command(message.message):
            return

        logging.info(
            "Command from %s in %s: %s",
            message.sender,
            message.room or "PM",
            message.message[:100],
        )
        # A failing command is dropped; the listen loop keeps running.
        try:
            replies = await self._handler.handle(message.message)
        except Exception as e:
            logging.error(
                "Command from %s failed: %s", message.sender, e, exc_info=True
            )
            return
        self._handled_count += 1

        for reply in replies:
            if message.is_private:
                await self._client.send_private_message(message.sender, reply)
            else:
                await self._client.send_room_message(message.room, reply)
