import unittest

from catbot.calc.data.nature import (
    NATURES,
    NATURES_BY_STATS,
    Nature,
    get_nature,
    nature_for_stats,
)
from catbot.calc.schema.enums import Stat


class NatureTest(unittest.TestCase):
    def test_adamant_nature(self) -> None:
        nature = nature_for_stats(Stat.ATK, Stat.SPA)
        self.assertEqual(nature.name, "Adamant")
        self.assertEqual(nature.plus_stat, Stat.ATK)
        self.assertEqual(nature.minus_stat, Stat.SPA)

    def test_hasty_nature(self) -> None:
        self.assertEqual(nature_for_stats(Stat.SPE, Stat.DEF).name, "Hasty")

    def test_modest_nature(self) -> None:
        self.assertEqual(nature_for_stats(Stat.SPA, Stat.ATK).name, "Modest")

    def test_same_stat_is_neutral(self) -> None:
        nature = nature_for_stats(Stat.SPE, Stat.SPE)
        self.assertEqual(nature.name, "Hardy")
        self.assertTrue(nature.is_neutral)

    def test_hp_has_no_nature(self) -> None:
        with self.assertRaises(ValueError):
            nature_for_stats(Stat.HP, Stat.ATK)

    def test_table_covers_all_natures(self) -> None:
        self.assertEqual(len(NATURES), 25)
        self.assertEqual(len(NATURES_BY_STATS), 20)
        self.assertEqual(len({nature.name for nature in NATURES}), 25)

    def test_get_nature_ignores_case(self) -> None:
        self.assertEqual(get_nature("jolly").plus_stat, Stat.SPE)
        self.assertEqual(get_nature(" TIMID ").minus_stat, Stat.ATK)

    def test_get_unknown_nature(self) -> None:
        with self.assertRaises(ValueError):
            get_nature("Grumpy")

    def test_nature_is_frozen(self) -> None:
        nature = Nature(name="Adamant", plus_stat=Stat.ATK, minus_stat=Stat.SPA)
        with self.assertRaises(Exception):
            nature.name = "Different"

    def test_table_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            NATURES_BY_STATS[(Stat.ATK, Stat.SPA)] = get_nature("Hardy")  # type: ignore[index]


if __name__ == "__main__":
    unittest.main()
