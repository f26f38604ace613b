from absl.testing import absltest, parameterized

from catbot.calc.parsing.stat_alias import STAT_PATTERN, resolve_stat
from catbot.calc.schema.enums import Stat


class ResolveStatTest(parameterized.TestCase):
    @parameterized.parameters(
        ("HP", Stat.HP),
        ("hp", Stat.HP),
        ("Atk", Stat.ATK),
        ("ATK", Stat.ATK),
        ("def", Stat.DEF),
        ("SpA", Stat.SPA),
        ("sPa", Stat.SPA),
        ("SPD", Stat.SPD),
        ("spe", Stat.SPE),
        (" Spe ", Stat.SPE),
    )
    def test_resolves_abbreviation(self, token: str, expected: Stat) -> None:
        self.assertEqual(resolve_stat(token), expected)

    @parameterized.parameters("Attack", "Speed", "sp. atk", "spatk", "evasion", "")
    def test_unknown_token_returns_none(self, token: str) -> None:
        self.assertIsNone(resolve_stat(token))

    def test_pattern_lists_every_stat(self) -> None:
        self.assertEqual(STAT_PATTERN, "HP|Atk|Def|SpA|SpD|Spe")


if __name__ == "__main__":
    absltest.main()
