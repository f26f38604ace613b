"""Structured damage calc request built from a single chat line."""

import json
from dataclasses import dataclass
from typing import Any, Dict

from catbot.calc.schema.enums import ParseFailureReason
from catbot.calc.schema.field_state import FieldState
from catbot.calc.schema.side_descriptor import SideDescriptor


@dataclass(frozen=True)
class ScenarioRequest:
    """A fully parsed "<attacker> using <move> vs <defender>" line."""

    attacker: SideDescriptor
    move_name: str
    defender: SideDescriptor
    field: FieldState

    def to_calc_payload(self, generation: int = 9) -> Dict[str, Any]:
        """Build the JSON body for the damage calculation service.

        Args:
            generation: Game generation to calculate in

        Returns:
            Dictionary with gen, attacker, defender, move and field
        """
        return {
            "gen": generation,
            "attacker": self.attacker.to_calc_dict(),
            "defender": self.defender.to_calc_dict(),
            "move": self.move_name,
            "field": self.field.to_calc_dict(),
        }

    def __str__(self) -> str:
        return json.dumps(self.to_calc_payload(), sort_keys=True)


@dataclass(frozen=True)
class ParseFailure:
    """Why a calc line was rejected.

    Both reasons are shown to users as the same usage message; they are kept
    apart so tests and logs can tell them from each other.
    """

    reason: ParseFailureReason
    text: str

    def __bool__(self) -> bool:
        return False
