"""One combatant's description within a calc line."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from catbot.calc.schema.enums import Stat

MAX_EV = 252
MIN_BOOST = -6
MAX_BOOST = 6


@dataclass(frozen=True)
class SideDescriptor:
    """Immutable description of an attacker or defender.

    Stats missing from evs or boosts are implicitly 0. A nature that was guessed
    from a lone "+" marker (rather than spelled out with both "+" and "-") is
    flagged with nature_inferred so callers can surface the uncertainty.
    """

    name: str
    item: str = ""
    ability: Optional[str] = None
    evs: Dict[Stat, int] = field(default_factory=dict)
    boosts: Dict[Stat, int] = field(default_factory=dict)
    nature: Optional[str] = None
    nature_inferred: bool = False

    def get_ev(self, stat: Stat) -> int:
        return self.evs.get(stat, 0)

    def get_boost(self, stat: Stat) -> int:
        return self.boosts.get(stat, 0)

    def to_calc_dict(self) -> Dict[str, Any]:
        """Convert to the Pokemon options shape of the damage calculator.

        Returns:
            Dictionary with name, item, ability, evs, boosts and nature; empty
            optional values are omitted so the calculator applies its defaults
        """
        options: Dict[str, Any] = {
            "name": self.name,
            "evs": {stat.value: value for stat, value in self.evs.items()},
            "boosts": {stat.value: value for stat, value in self.boosts.items()},
        }
        if self.item:
            options["item"] = self.item
        if self.ability:
            options["ability"] = self.ability
        if self.nature:
            options["nature"] = self.nature
        return options

    def __str__(self) -> str:
        return json.dumps(
            {**self.to_calc_dict(), "nature_inferred": self.nature_inferred},
            sort_keys=True,
        )
