"""Chat command dispatch for catbot."""

import re
from typing import List, Optional

from absl import logging

from catbot.calc.calc_client import CalcClient
from catbot.calc.parsing.scenario_parser import ScenarioParser
from catbot.calc.schema.scenario_request import ScenarioRequest
from catbot.calc.schema.side_descriptor import SideDescriptor
from catbot.exceptions import CalcServiceError, LookupServiceError, SetsFetchError
from catbot.lookup.cat_client import CatClient
from catbot.lookup.pokeapi_client import PokeApiClient, pokeapi_slug
from catbot.sets.set_formatter import build_smogon_url, chunk_messages, format_moveset
from catbot.sets.sets_store import SetsStore, find_pokemon_sets, find_set

DEFAULT_PREFIX = "!cat"
DEFAULT_FORMAT = "gen9ou"

_FORMAT_ARG_RE = re.compile(r"^gen\d+[a-z]+$", re.IGNORECASE)

FLUTTER_MANE_SLUG = "flutter-mane"


class CommandHandler:
    """Turns one chat message into the bot's replies.

    Commands (shown with the default prefix):
        !cat calc <attacker> using <move> vs <defender> [field]
        !cat sets [<format>] <pokemon>
        !cat set <format> <pokemon> <set name>
        !cat stats <pokemon>
        !cat
        !cat help
    """

    def __init__(
        self,
        calc_client: CalcClient,
        sets_store: SetsStore,
        pokeapi_client: PokeApiClient,
        cat_client: CatClient,
        parser: Optional[ScenarioParser] = None,
        prefix: str = DEFAULT_PREFIX,
        default_format: str = DEFAULT_FORMAT,
        generation: int = 9,
        note_inferred_nature: bool = True,
    ) -> None:
        """Initialize the handler.

        Args:
            calc_client: Damage calculation service client
            sets_store: Source of competitive sets
            pokeapi_client: Base stats lookup
            cat_client: Cat picture lookup
            parser: Calc line parser; a default one is created if omitted
            prefix: Command prefix every command starts with
            default_format: Format used by the sets command when none is given
            generation: Game generation damage is calculated in
            note_inferred_nature: Append a note to calc results when a nature
                was guessed from a lone "+" marker
        """
        self._calc_client = calc_client
        self._sets_store = sets_store
        self._pokeapi_client = pokeapi_client
        self._cat_client = cat_client
        self._parser = parser or ScenarioParser()
        self._prefix = prefix
        self._default_format = default_format
        self._generation = generation
        self._note_inferred_nature = note_inferred_nature

    @property
    def prefix(self) -> str:
        return self._prefix

    def is_command(self, text: str) -> bool:
        content = text.strip()
        return content == self._prefix or content.startswith(self._prefix + " ")

    async def handle(self, text: str) -> List[str]:
        """Run the command in a message.

        Args:
            text: Full message text

        Returns:
            Replies to send, in order; empty if the message is not a command
        """
        content = text.strip()
        if not self.is_command(content):
            return []

        rest = content[len(self._prefix) :].strip()
        command, _, args = rest.partition(" ")
        command = command.lower()
        args = args.strip()

        if command == "":
            return await self._handle_cat()
        if command == "calc":
            return await self._handle_calc(args)
        if command == "sets":
            return await self._handle_sets(args)
        if command == "set":
            return await self._handle_set(args)
        if command == "stats":
            return await self._handle_stats(args)
        if command == "help" and not args:
            return [self.help_message()]
        return []

    def usage_message(self) -> str:
        return (
            f"Could not parse input. Use `{self._prefix} calc <attacker> using <move> "
            "vs <target> [in Rain/on Grassy Terrain/with Stealth Rock/with Light Screen/"
            "with 1 layer of Spikes/under Gravity]` format."
        )

    def help_message(self) -> str:
        p = self._prefix
        return (
            "Cat Bot Commands:\n"
            f"{p} - Get a random cat image\n"
            f"{p} calc <attacker> using <move> vs <defender> - Calculate damage\n"
            "  - Field conditions: in Rain/Sun/Sand/Hail/Snow\n"
            "  - Terrain: on Electric/Grassy/Psychic/Misty Terrain\n"
            "  - Screens: with Light Screen/Reflect/Aurora Veil\n"
            "  - Hazards: with Stealth Rock, with 1 layer of Spikes\n"
            "  - Other: under Gravity\n"
            f"{p} sets <pokemon> - Get sets for a Pokemon (default: {self._default_format})\n"
            f"{p} sets <format> <pokemon> - Get sets for a Pokemon in specific format\n"
            f"{p} set <format> <pokemon> <set name> - Get a specific set\n"
            f"{p} stats <pokemon> - Get base stats and abilities\n"
            f"{p} help - Show this help message\n"
            "\n"
            f"Example: {p} calc 252+ Atk Garchomp @ Choice Band using Earthquake "
            "vs 252 HP / 4 Def Toxapex in Sand with Stealth Rock"
        )

    async def _handle_calc(self, args: str) -> List[str]:
        request = self._parser.parse(args)
        if request is None:
            return [self.usage_message()]

        logging.debug("Parsed calc request: %s", request)
        try:
            result = await self._calc_client.calculate(request, self._generation)
        except CalcServiceError as e:
            return [f"Error parsing Pokémon or move: {e.message}"]

        reply = result.description
        note = self._inferred_nature_note(request)
        if note:
            reply = f"{reply} {note}"
        return [reply]

    def _inferred_nature_note(self, request: ScenarioRequest) -> str:
        if not self._note_inferred_nature:
            return ""
        guesses = [
            f"{side.nature} {side.name}"
            for side in (request.attacker, request.defender)
            if _has_inferred_nature(side)
        ]
        if not guesses:
            return ""
        return f"(assumed {', '.join(guesses)})"

    async def _handle_sets(self, args: str) -> List[str]:
        if not args:
            return [
                "Please specify a Pokémon name. Usage: "
                f"`{self._prefix} sets <pokemon>` or `{self._prefix} sets <format> <pokemon>`"
            ]
        parts = args.split()
        format_id = self._default_format
        pokemon_name = args
        if len(parts) > 1 and _FORMAT_ARG_RE.match(parts[0]):
            format_id = parts[0].lower()
            pokemon_name = " ".join(parts[1:])

        try:
            data = await self._sets_store.get_sets_data(format_id)
        except SetsFetchError as e:
            return [str(e)]

        found = find_pokemon_sets(data, pokemon_name)
        if found is None:
            return [
                f'No sets found for "{pokemon_name}" in {format_id}. '
                "Try a different format or check the spelling."
            ]
        if not found.sets:
            return [f"No sets available for {found.species} in {format_id}."]

        header = f"**{found.species}** sets in **{format_id}**"
        url = build_smogon_url(found.species, format_id)
        if url:
            header += f": {url}"
        blocks = [
            f"{set_name}:\n{format_moveset(found.species, smogon_set)}"
            for set_name, smogon_set in found.sets.items()
        ]
        return [header] + chunk_messages(blocks)

    async def _handle_set(self, args: str) -> List[str]:
        parts = args.split()
        if len(parts) < 3:
            return [f"Usage: `{self._prefix} set <format> <pokemon> <set name>`"]

        format_id = parts[0].lower()
        pokemon_name = parts[1]
        set_name = " ".join(parts[2:])

        try:
            data = await self._sets_store.get_sets_data(format_id)
        except SetsFetchError as e:
            return [f"Error fetching set: {e.message}"]

        found = find_pokemon_sets(data, pokemon_name)
        if found is None:
            return [f'No sets found for "{pokemon_name}" in {format_id}.']

        match = find_set(found.sets, set_name)
        if match is None:
            available = ", ".join(found.sets)
            return [
                f'Set "{set_name}" not found for {found.species}. '
                f"Available sets: {available}"
            ]

        matched_name, smogon_set = match
        header = f"**{found.species}** in **{format_id}**"
        url = build_smogon_url(found.species, format_id)
        if url:
            header += f": {url}"
        return [header, f"{matched_name}:\n{format_moveset(found.species, smogon_set)}"]

    async def _handle_stats(self, args: str) -> List[str]:
        slug = pokeapi_slug(args)
        if not slug:
            return [f"Please provide a Pokémon name. Usage: `{self._prefix} stats chien-pao`"]

        try:
            summary = await self._pokeapi_client.get_pokemon_summary(slug)
        except LookupServiceError:
            return [
                f'😿 Could not find stats for "{slug.replace("-", " ")}". '
                "Does this meown exist?"
            ]

        replies = []
        if slug == FLUTTER_MANE_SLUG:
            replies.append("😿 Flutter Mane is evil meow, cant you check a different mon instead?")
        replies.append(summary.format())
        if summary.image_url:
            replies.append(summary.image_url)
        return replies

    async def _handle_cat(self) -> List[str]:
        try:
            url = await self._cat_client.get_random_cat_url()
        except LookupServiceError:
            return ["😿 Failed to fetch a cat. Something went wrong with the API request."]
        if not url:
            return ["😿 Could not find a cat image at the moment."]
        return [url]


def _has_inferred_nature(side: SideDescriptor) -> bool:
    return side.nature is not None and side.nature_inferred
