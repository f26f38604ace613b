"""Field condition phrases in a calc line.

Each category is an independent, case-insensitive scan over the whole line;
the first match per category wins and a missing phrase leaves the default.
"""

import re
from typing import Pattern, Tuple

from catbot.calc.parsing.bounded_int import bounded_int
from catbot.calc.schema.enums import Screen, Terrain, Weather
from catbot.calc.schema.field_state import DefenderSideState, FieldState

WEATHER_RE = re.compile(r"\bin\s+(Rain|Sun|Sand|Hail|Snow)\b", re.IGNORECASE)
TERRAIN_RE = re.compile(
    r"\b(?:on|with)\s+(Electric|Grassy|Psychic|Misty)\s+Terrain\b", re.IGNORECASE
)
# One capture group: "with Reflect and Light Screen" only yields Reflect.
SCREEN_RE = re.compile(
    r"\b(?:under|with)\s+(Light\s+Screen|Reflect|Aurora\s+Veil)\b", re.IGNORECASE
)
STEALTH_ROCK_RE = re.compile(r"\b(?:after|with)\s+Stealth\s+Rocks?\b", re.IGNORECASE)
SPIKES_RE = re.compile(
    r"(?:\bwith\s+)?\b(\d+)\s+layers?\s+of\s+Spikes\b", re.IGNORECASE
)
GRAVITY_RE = re.compile(r"\b(?:under|with)\s+Gravity\b", re.IGNORECASE)

# Layer counts are kept as typed up to this value; the calc payload clamps
# them to the in-game maximum.
MAX_WRITTEN_SPIKES_LAYERS = 99

FIELD_PHRASE_PATTERNS: Tuple[Pattern[str], ...] = (
    WEATHER_RE,
    TERRAIN_RE,
    SCREEN_RE,
    STEALTH_ROCK_RE,
    SPIKES_RE,
    GRAVITY_RE,
)


def extract_field_conditions(text: str) -> FieldState:
    """Read weather, terrain, screens, hazards and gravity from a calc line.

    Args:
        text: The full calc line; it is not modified

    Returns:
        FieldState with every recognized condition set. Spikes layers are
        kept as written up to MAX_WRITTEN_SPIKES_LAYERS.

    Examples:
        >>> field = extract_field_conditions("vs Toxapex in Sand with Stealth Rock")
        >>> field.weather, field.defender_side.is_stealth_rock
        (Weather.SAND, True)
    """
    weather_match = WEATHER_RE.search(text)
    terrain_match = TERRAIN_RE.search(text)
    screen_match = SCREEN_RE.search(text)
    spikes_match = SPIKES_RE.search(text)

    return FieldState(
        weather=Weather.from_text(weather_match.group(1)) if weather_match else None,
        terrain=Terrain.from_text(terrain_match.group(1)) if terrain_match else None,
        is_gravity=GRAVITY_RE.search(text) is not None,
        defender_side=DefenderSideState.with_screen(
            Screen.from_text(screen_match.group(1)) if screen_match else None,
            is_stealth_rock=STEALTH_ROCK_RE.search(text) is not None,
            spikes_layers=(
                bounded_int(spikes_match.group(1), MAX_WRITTEN_SPIKES_LAYERS)
                if spikes_match
                else 0
            ),
        ),
    )
