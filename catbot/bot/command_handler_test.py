import unittest
from typing import Dict, List, Optional

from absl.testing import absltest, parameterized

from catbot.bot.command_handler import CommandHandler
from catbot.calc.calc_client import CalcResult
from catbot.calc.schema.scenario_request import ScenarioRequest
from catbot.exceptions import CalcServiceError, LookupServiceError, SetsFetchError
from catbot.lookup.pokeapi_client import PokemonSummary
from catbot.sets.sets_store import SetsData
from catbot.sets.sets_test_data import GEN9OU_SETS
from catbot.sets.smogon_set import SmogonSet


class FakeCalcClient:
    def __init__(self, description: str = "", error: Optional[CalcServiceError] = None):
        self.description = description
        self.error = error
        self.requests: List[ScenarioRequest] = []
        self.generations: List[int] = []

    async def calculate(self, request: ScenarioRequest, generation: int = 9) -> CalcResult:
        self.requests.append(request)
        self.generations.append(generation)
        if self.error is not None:
            raise self.error
        return CalcResult(description=self.description, damage=[1, 2])


class FakeSetsStore:
    def __init__(self, data: Optional[Dict[str, SetsData]] = None):
        self.data = data or {}
        self.requested: List[str] = []

    async def get_sets_data(self, format_id: str) -> SetsData:
        self.requested.append(format_id)
        if format_id not in self.data:
            raise SetsFetchError(format_id, "HTTP 404: Not Found")
        return self.data[format_id]


class FakePokeApiClient:
    def __init__(self, summaries: Optional[Dict[str, PokemonSummary]] = None):
        self.summaries = summaries or {}

    async def get_pokemon_summary(self, slug: str) -> PokemonSummary:
        if slug not in self.summaries:
            raise LookupServiceError("pokeapi", f"Pokemon not found: {slug}")
        return self.summaries[slug]


class FakeCatClient:
    def __init__(self, url: Optional[str] = "https://cdn.test/cat.jpg", fail: bool = False):
        self.url = url
        self.fail = fail

    async def get_random_cat_url(self) -> Optional[str]:
        if self.fail:
            raise LookupServiceError("thecatapi", "HTTP 503")
        return self.url


def _gen9ou_data() -> SetsData:
    return {
        species: {name: SmogonSet.model_validate(data) for name, data in sets.items()}
        for species, sets in GEN9OU_SETS.items()
    }


class CommandHandlerTest(unittest.IsolatedAsyncioTestCase, parameterized.TestCase):
    def _handler(
        self,
        calc_client: Optional[FakeCalcClient] = None,
        sets_store: Optional[FakeSetsStore] = None,
        pokeapi_client: Optional[FakePokeApiClient] = None,
        cat_client: Optional[FakeCatClient] = None,
        **kwargs,
    ) -> CommandHandler:
        return CommandHandler(
            calc_client=calc_client or FakeCalcClient(),
            sets_store=sets_store or FakeSetsStore({"gen9ou": _gen9ou_data()}),
            pokeapi_client=pokeapi_client or FakePokeApiClient(),
            cat_client=cat_client or FakeCatClient(),
            **kwargs,
        )

    @parameterized.parameters(
        ("!cat", True),
        ("!cat calc x", True),
        ("  !cat help  ", True),
        ("!catalog", False),
        ("hello !cat", False),
        ("", False),
    )
    def test_is_command(self, text: str, expected: bool) -> None:
        self.assertEqual(self._handler().is_command(text), expected)

    async def test_not_a_command(self) -> None:
        self.assertEqual(await self._handler().handle("hello there"), [])

    async def test_unknown_subcommand(self) -> None:
        self.assertEqual(await self._handler().handle("!cat dance"), [])

    async def test_custom_prefix(self) -> None:
        handler = self._handler(prefix=".cat")
        self.assertEqual(await handler.handle(".cat"), ["https://cdn.test/cat.jpg"])
        self.assertEqual(await handler.handle("!cat"), [])

    async def test_calc(self) -> None:
        calc_client = FakeCalcClient(description="252 Atk Garchomp Earthquake vs. Toxapex: 50%")
        handler = self._handler(calc_client=calc_client, generation=8)

        replies = await handler.handle(
            "!cat calc 252 Atk Garchomp using Earthquake vs 252 HP / 4 Def Toxapex in Sand"
        )

        self.assertEqual(replies, ["252 Atk Garchomp Earthquake vs. Toxapex: 50%"])
        self.assertLen(calc_client.requests, 1)
        request = calc_client.requests[0]
        self.assertEqual(request.attacker.name, "Garchomp")
        self.assertEqual(request.move_name, "Earthquake")
        self.assertEqual(calc_client.generations, [8])

    async def test_calc_notes_inferred_nature(self) -> None:
        calc_client = FakeCalcClient(description="result")
        handler = self._handler(calc_client=calc_client)

        replies = await handler.handle(
            "!cat calc 252+ Atk Garchomp using Earthquake vs 252+ Def Toxapex"
        )

        self.assertEqual(replies, ["result (assumed Adamant Garchomp, Impish Toxapex)"])

    async def test_calc_explicit_nature_has_no_note(self) -> None:
        handler = self._handler(calc_client=FakeCalcClient(description="result"))
        replies = await handler.handle(
            "!cat calc 252+ SpA / 0- Atk Gengar using Shadow Ball vs Toxapex"
        )
        self.assertEqual(replies, ["result"])

    async def test_calc_note_can_be_disabled(self) -> None:
        handler = self._handler(
            calc_client=FakeCalcClient(description="result"), note_inferred_nature=False
        )
        replies = await handler.handle("!cat calc 252+ Atk Garchomp using Earthquake vs Toxapex")
        self.assertEqual(replies, ["result"])

    async def test_calc_usage(self) -> None:
        calc_client = FakeCalcClient()
        handler = self._handler(calc_client=calc_client)

        for text in (
            "!cat calc Garchomp Earthquake Toxapex",
            "!cat calc 252 Atk using Earthquake vs Toxapex",
            "!cat calc",
        ):
            with self.subTest(text=text):
                replies = await handler.handle(text)
                self.assertEqual(replies, [handler.usage_message()])
                self.assertIn("!cat calc <attacker> using <move> vs <target>", replies[0])
        self.assertEqual(calc_client.requests, [])

    async def test_calc_service_error(self) -> None:
        handler = self._handler(
            calc_client=FakeCalcClient(error=CalcServiceError("Unknown move: Earthqake", 400))
        )
        replies = await handler.handle("!cat calc Garchomp using Earthqake vs Toxapex")
        self.assertEqual(replies, ["Error parsing Pokémon or move: Unknown move: Earthqake"])

    async def test_sets_default_format(self) -> None:
        sets_store = FakeSetsStore({"gen9ou": _gen9ou_data()})
        handler = self._handler(sets_store=sets_store)

        replies = await handler.handle("!cat sets gholdengo")

        self.assertEqual(sets_store.requested, ["gen9ou"])
        self.assertEqual(
            replies[0],
            "**Gholdengo** sets in **gen9ou**: "
            "https://www.smogon.com/dex/sv/pokemon/gholdengo/ou/",
        )
        self.assertLen(replies, 2)
        self.assertTrue(replies[1].startswith("Nasty Plot:\nGholdengo @ Air Balloon\n"))

    async def test_sets_with_format(self) -> None:
        sets_store = FakeSetsStore({"gen9uu": _gen9ou_data()})
        handler = self._handler(sets_store=sets_store)

        replies = await handler.handle("!cat sets Gen9UU Landorus Therian")

        self.assertEqual(sets_store.requested, ["gen9uu"])
        self.assertTrue(replies[0].startswith("**Landorus-Therian** sets in **gen9uu**"))
        self.assertIn("Stealth Rock:\n", replies[1])
        self.assertIn("Choice Scarf:\n", replies[1])

    async def test_sets_first_word_is_species_when_not_a_format(self) -> None:
        sets_store = FakeSetsStore({"gen9ou": _gen9ou_data()})
        handler = self._handler(sets_store=sets_store)

        replies = await handler.handle("!cat sets Great Tusk")

        self.assertEqual(sets_store.requested, ["gen9ou"])
        self.assertTrue(replies[0].startswith("**Great Tusk**"))

    async def test_sets_without_name(self) -> None:
        replies = await self._handler().handle("!cat sets")
        self.assertLen(replies, 1)
        self.assertTrue(replies[0].startswith("Please specify a Pokémon name."))

    async def test_sets_unknown_species(self) -> None:
        replies = await self._handler().handle("!cat sets Pikachu")
        self.assertEqual(
            replies,
            ['No sets found for "Pikachu" in gen9ou. '
             "Try a different format or check the spelling."],
        )

    async def test_sets_fetch_error(self) -> None:
        replies = await self._handler().handle("!cat sets gen1ou Tauros")
        self.assertEqual(replies, ["Error fetching sets for gen1ou: HTTP 404: Not Found"])

    async def test_sets_species_without_sets(self) -> None:
        handler = self._handler(sets_store=FakeSetsStore({"gen9ou": {"Ditto": {}}}))
        replies = await handler.handle("!cat sets ditto")
        self.assertEqual(replies, ["No sets available for Ditto in gen9ou."])

    async def test_set(self) -> None:
        replies = await self._handler().handle("!cat set gen9ou lando choice scarf")

        self.assertEqual(
            replies,
            [
                "**Landorus-Therian** in **gen9ou**: "
                "https://www.smogon.com/dex/sv/pokemon/landorus-therian/ou/",
                "Choice Scarf:\n"
                "Landorus-Therian @ Choice Scarf\n"
                "Ability: Intimidate\n"
                "EVs: 252 Atk / 4 SpD / 252 Spe\n"
                "Jolly Nature\n"
                "- Earthquake\n"
                "- U-turn\n"
                "- Stone Edge\n"
                "- Stealth Rock",
            ],
        )

    async def test_set_not_found(self) -> None:
        replies = await self._handler().handle("!cat set gen9ou lando Swords Dance")
        self.assertEqual(
            replies,
            ['Set "Swords Dance" not found for Landorus-Therian. '
             "Available sets: Stealth Rock, Choice Scarf"],
        )

    async def test_set_unknown_species(self) -> None:
        replies = await self._handler().handle("!cat set gen9ou Pikachu Specs")
        self.assertEqual(replies, ['No sets found for "Pikachu" in gen9ou.'])

    async def test_set_fetch_error(self) -> None:
        replies = await self._handler().handle("!cat set gen1ou Tauros Body Slam")
        self.assertEqual(replies, ["Error fetching set: HTTP 404: Not Found"])

    async def test_set_usage(self) -> None:
        handler = self._handler()
        for text in ("!cat set", "!cat set gen9ou lando"):
            with self.subTest(text=text):
                replies = await handler.handle(text)
                self.assertEqual(
                    replies, ["Usage: `!cat set <format> <pokemon> <set name>`"]
                )

    async def test_stats(self) -> None:
        summary = PokemonSummary(
            name="chien-pao",
            abilities=["sword-of-ruin"],
            base_stats={"hp": 80},
            image_url="https://img.test/1002.png",
        )
        handler = self._handler(pokeapi_client=FakePokeApiClient({"chien-pao": summary}))

        replies = await handler.handle("!cat stats Chien Pao")

        self.assertEqual(replies, [summary.format(), "https://img.test/1002.png"])

    async def test_stats_flutter_mane(self) -> None:
        summary = PokemonSummary(name="flutter-mane")
        handler = self._handler(pokeapi_client=FakePokeApiClient({"flutter-mane": summary}))

        replies = await handler.handle("!cat stats flutter mane")

        self.assertLen(replies, 2)
        self.assertIn("Flutter Mane is evil", replies[0])
        self.assertEqual(replies[1], summary.format())

    async def test_stats_not_found(self) -> None:
        replies = await self._handler().handle("!cat stats missing no")
        self.assertEqual(
            replies, ['😿 Could not find stats for "missing no". Does this meown exist?']
        )

    async def test_stats_without_name(self) -> None:
        replies = await self._handler().handle("!cat stats")
        self.assertEqual(
            replies, ["Please provide a Pokémon name. Usage: `!cat stats chien-pao`"]
        )

    async def test_cat(self) -> None:
        self.assertEqual(await self._handler().handle("!cat"), ["https://cdn.test/cat.jpg"])

    async def test_cat_without_image(self) -> None:
        handler = self._handler(cat_client=FakeCatClient(url=None))
        self.assertEqual(
            await handler.handle("!cat"), ["😿 Could not find a cat image at the moment."]
        )

    async def test_cat_api_error(self) -> None:
        handler = self._handler(cat_client=FakeCatClient(fail=True))
        replies = await handler.handle("!cat")
        self.assertEqual(
            replies, ["😿 Failed to fetch a cat. Something went wrong with the API request."]
        )

    async def test_help(self) -> None:
        handler = self._handler(default_format="gen9uu")
        replies = await handler.handle("!cat help")
        self.assertLen(replies, 1)
        self.assertTrue(replies[0].startswith("Cat Bot Commands:\n"))
        self.assertIn("(default: gen9uu)", replies[0])
        self.assertIn("!cat calc <attacker> using <move> vs <defender>", replies[0])


if __name__ == "__main__":
    absltest.main()
