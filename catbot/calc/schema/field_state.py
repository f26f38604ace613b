"""Field state representation for a damage calc."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from catbot.calc.schema.enums import Screen, Terrain, Weather

MAX_SPIKES_LAYERS = 3


@dataclass(frozen=True)
class DefenderSideState:
    """Conditions on the defending Pokemon's side of the field.

    At most one screen is set per parsed line; the flags mirror the
    calculator's Side options.
    """

    is_light_screen: bool = False
    is_reflect: bool = False
    is_aurora_veil: bool = False
    is_stealth_rock: bool = False
    spikes_layers: int = 0

    @classmethod
    def with_screen(
        cls,
        screen: Optional[Screen],
        is_stealth_rock: bool = False,
        spikes_layers: int = 0,
    ) -> "DefenderSideState":
        return cls(
            is_light_screen=screen == Screen.LIGHT_SCREEN,
            is_reflect=screen == Screen.REFLECT,
            is_aurora_veil=screen == Screen.AURORA_VEIL,
            is_stealth_rock=is_stealth_rock,
            spikes_layers=spikes_layers,
        )

    def get_screen(self) -> Optional[Screen]:
        """Get the active screen.

        Returns:
            The screen that is up, or None if no screen is active
        """
        if self.is_light_screen:
            return Screen.LIGHT_SCREEN
        if self.is_reflect:
            return Screen.REFLECT
        if self.is_aurora_veil:
            return Screen.AURORA_VEIL
        return None

    def to_calc_dict(self) -> Dict[str, Any]:
        # Spikes only stack three layers in game.
        return {
            "isLightScreen": self.is_light_screen,
            "isReflect": self.is_reflect,
            "isAuroraVeil": self.is_aurora_veil,
            "isSR": self.is_stealth_rock,
            "spikes": max(0, min(MAX_SPIKES_LAYERS, self.spikes_layers)),
        }


@dataclass(frozen=True)
class FieldState:
    """Immutable battle conditions shared by both sides of a calc."""

    weather: Optional[Weather] = None
    terrain: Optional[Terrain] = None
    is_gravity: bool = False
    defender_side: DefenderSideState = field(default_factory=DefenderSideState)

    def is_empty(self) -> bool:
        """Check if no condition at all was given.

        Returns:
            True if the field is the default (no weather, terrain or hazards)
        """
        return self == FieldState()

    def to_calc_dict(self) -> Dict[str, Any]:
        """Convert to the Field options shape of the damage calculator.

        Returns:
            Dictionary with weather, terrain, isGravity and defenderSide
        """
        options: Dict[str, Any] = {
            "isGravity": self.is_gravity,
            "defenderSide": self.defender_side.to_calc_dict(),
        }
        if self.weather:
            options["weather"] = self.weather.value
        if self.terrain:
            options["terrain"] = self.terrain.value
        return options

    def __str__(self) -> str:
        """Return JSON representation of the field.

        Returns:
            JSON string of the calculator field options, useful for logging
        """
        return json.dumps(self.to_calc_dict(), sort_keys=True)
