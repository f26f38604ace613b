"""Main script for running catbot on a Pokemon Showdown server.

The bot logs in, joins the configured rooms and answers calc, sets, stats and
cat commands in those rooms and in private messages.
"""

import asyncio
from typing import List

from absl import app, flags, logging

from catbot.bot.chat_listener import ChatListener
from catbot.bot.command_handler import DEFAULT_FORMAT, CommandHandler
from catbot.bot.showdown_client import (
    DEFAULT_LOGIN_URL,
    DEFAULT_SERVER_URL,
    ShowdownClient,
)
from catbot.calc.calc_client import DEFAULT_CALC_SERVICE_URL, CalcClient
from catbot.lookup.cat_client import CatClient
from catbot.lookup.pokeapi_client import PokeApiClient
from catbot.sets.sets_store import DEFAULT_CACHE_TTL_SECONDS, SetsStore

FLAGS = flags.FLAGS

# Connection settings
flags.DEFINE_string(
    "server_url",
    DEFAULT_SERVER_URL,
    "WebSocket URL of the Showdown server",
)
flags.DEFINE_string(
    "login_url",
    DEFAULT_LOGIN_URL,
    "Login server used to obtain an assertion for registered accounts",
)
flags.DEFINE_string("username", "", "Username to connect with")
flags.DEFINE_string(
    "password",
    "",
    "Password for the account (leave empty for guest)",
)
flags.DEFINE_list(
    "rooms",
    ["lobby"],
    "Comma-separated rooms to join and answer commands in",
)

# Commands
flags.DEFINE_string(
    "command_prefix",
    ".cat",
    "Prefix of every bot command. Showdown intercepts messages starting "
    "with '!' as its own broadcast commands.",
)
flags.DEFINE_string(
    "default_format",
    DEFAULT_FORMAT,
    "Format used by the sets command when none is given (e.g., gen9ou)",
)
flags.DEFINE_integer("generation", 9, "Game generation damage is calculated in")
flags.DEFINE_bool(
    "note_inferred_nature",
    True,
    "Mention natures guessed from a lone '+' marker in calc replies",
)

# Services
flags.DEFINE_string(
    "calc_service_url",
    DEFAULT_CALC_SERVICE_URL,
    "Root URL of the damage calculation service",
)
flags.DEFINE_float(
    "sets_cache_ttl",
    DEFAULT_CACHE_TTL_SECONDS,
    "Seconds fetched sets data stays cached",
)
flags.DEFINE_float("http_timeout", 15.0, "Timeout in seconds for HTTP lookups")


async def run_bot() -> None:
    """Connect and answer commands until the connection ends."""
    if not FLAGS.username:
        raise app.UsageError("--username is required")

    handler = CommandHandler(
        calc_client=CalcClient(FLAGS.calc_service_url, timeout=FLAGS.http_timeout),
        sets_store=SetsStore(cache_ttl=FLAGS.sets_cache_ttl, timeout=FLAGS.http_timeout),
        pokeapi_client=PokeApiClient(timeout=FLAGS.http_timeout),
        cat_client=CatClient(timeout=FLAGS.http_timeout),
        prefix=FLAGS.command_prefix,
        default_format=FLAGS.default_format,
        generation=FLAGS.generation,
        note_inferred_nature=FLAGS.note_inferred_nature,
    )
    client = ShowdownClient(login_url=FLAGS.login_url)

    try:
        await client.connect(FLAGS.server_url, FLAGS.username, FLAGS.password)
        await client.join_rooms(FLAGS.rooms)
        listener = ChatListener(client, handler)
        await listener.listen()
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    except Exception as e:
        logging.error("Bot stopped: %s", e, exc_info=True)
    finally:
        await client.disconnect()


def main(argv: List[str]) -> None:
    del argv

    logging.set_verbosity(logging.INFO)
    logging.info("Starting catbot")
    logging.info("Server: %s", FLAGS.server_url)
    logging.info("Rooms: %s", ", ".join(FLAGS.rooms))

    asyncio.run(run_bot())


def run() -> None:
    app.run(main)


if __name__ == "__main__":
    run()
