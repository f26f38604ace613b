from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from catbot.calc.schema.enums import Stat

NEUTRAL_NATURE = "Hardy"


@dataclass(frozen=True)
class Nature:
    name: str
    plus_stat: Optional[Stat]
    minus_stat: Optional[Stat]

    @property
    def is_neutral(self) -> bool:
        return self.plus_stat is None


NATURES: Tuple[Nature, ...] = (
    Nature("Lonely", Stat.ATK, Stat.DEF),
    Nature("Adamant", Stat.ATK, Stat.SPA),
    Nature("Naughty", Stat.ATK, Stat.SPD),
    Nature("Brave", Stat.ATK, Stat.SPE),
    Nature("Bold", Stat.DEF, Stat.ATK),
    Nature("Impish", Stat.DEF, Stat.SPA),
    Nature("Lax", Stat.DEF, Stat.SPD),
    Nature("Relaxed", Stat.DEF, Stat.SPE),
    Nature("Modest", Stat.SPA, Stat.ATK),
    Nature("Mild", Stat.SPA, Stat.DEF),
    Nature("Rash", Stat.SPA, Stat.SPD),
    Nature("Quiet", Stat.SPA, Stat.SPE),
    Nature("Calm", Stat.SPD, Stat.ATK),
    Nature("Gentle", Stat.SPD, Stat.DEF),
    Nature("Careful", Stat.SPD, Stat.SPA),
    Nature("Sassy", Stat.SPD, Stat.SPE),
    Nature("Timid", Stat.SPE, Stat.ATK),
    Nature("Hasty", Stat.SPE, Stat.DEF),
    Nature("Jolly", Stat.SPE, Stat.SPA),
    Nature("Naive", Stat.SPE, Stat.SPD),
    Nature("Hardy", None, None),
    Nature("Docile", None, None),
    Nature("Serious", None, None),
    Nature("Bashful", None, None),
    Nature("Quirky", None, None),
)

NATURES_BY_STATS: Mapping[Tuple[Stat, Stat], Nature] = MappingProxyType(
    {
        (nature.plus_stat, nature.minus_stat): nature
        for nature in NATURES
        if nature.plus_stat is not None and nature.minus_stat is not None
    }
)


def nature_for_stats(plus_stat: Stat, minus_stat: Stat) -> Nature:
    """Look up the nature raising plus_stat and lowering minus_stat.

    A pair with the same stat on both sides has no effect in game, so it maps
    to the neutral nature.

    Raises:
        ValueError: If either stat is HP, which no nature touches
    """
    if plus_stat == minus_stat:
        return get_nature(NEUTRAL_NATURE)
    key = (plus_stat, minus_stat)
    if key not in NATURES_BY_STATS:
        raise ValueError(f"No nature raises {plus_stat.value} and lowers {minus_stat.value}")
    return NATURES_BY_STATS[key]


def get_nature(name: str) -> Nature:
    normalized = name.strip().lower()
    for nature in NATURES:
        if nature.name.lower() == normalized:
            return nature
    raise ValueError(f"Nature not found: {name}")
