"""Enums for damage calc scenario representation."""

from enum import Enum
from typing import Optional


class Stat(Enum):
    """Pokemon stats, keyed the way the damage calculator expects them."""

    HP = "hp"
    ATK = "atk"
    DEF = "def"
    SPA = "spa"
    SPD = "spd"
    SPE = "spe"

    @property
    def label(self) -> str:
        """Showdown display label (e.g. "SpA")."""
        return _STAT_LABELS[self]


_STAT_LABELS = {
    Stat.HP: "HP",
    Stat.ATK: "Atk",
    Stat.DEF: "Def",
    Stat.SPA: "SpA",
    Stat.SPD: "SpD",
    Stat.SPE: "Spe",
}


class Weather(Enum):
    """Weather conditions that can be named in a calc line."""

    RAIN = "Rain"
    SUN = "Sun"
    SAND = "Sand"
    HAIL = "Hail"
    SNOW = "Snow"

    @classmethod
    def from_text(cls, text: str) -> "Weather":
        """Parse weather from a matched phrase word.

        Args:
            text: Weather word in any case (e.g., "sand", "RAIN")

        Returns:
            Weather enum value

        Raises:
            ValueError: If the word is not a known weather

        Examples:
            >>> Weather.from_text("sand")
            Weather.SAND
        """
        normalized = text.strip().lower()
        for weather in cls:
            if weather.value.lower() == normalized:
                return weather
        raise ValueError(f"Unknown weather: {text}")


class Terrain(Enum):
    """Terrain conditions that can be named in a calc line."""

    ELECTRIC = "Electric"
    GRASSY = "Grassy"
    PSYCHIC = "Psychic"
    MISTY = "Misty"

    @classmethod
    def from_text(cls, text: str) -> "Terrain":
        """Parse terrain from a matched phrase word.

        Args:
            text: Terrain word with or without the "Terrain" suffix
                (e.g., "grassy", "Electric Terrain")

        Returns:
            Terrain enum value

        Raises:
            ValueError: If the word is not a known terrain
        """
        normalized = text.lower().replace("terrain", "").strip()
        for terrain in cls:
            if terrain.value.lower() == normalized:
                return terrain
        raise ValueError(f"Unknown terrain: {text}")


class Screen(Enum):
    """Damage-reducing screens on the defender's side."""

    LIGHT_SCREEN = "Light Screen"
    REFLECT = "Reflect"
    AURORA_VEIL = "Aurora Veil"

    @classmethod
    def from_text(cls, text: str) -> Optional["Screen"]:
        """Parse a screen name, ignoring case and extra spaces.

        Returns:
            Screen enum value, or None if the text names no screen
        """
        normalized = " ".join(text.lower().split())
        for screen in cls:
            if screen.value.lower() == normalized:
                return screen
        return None


class ParseFailureReason(Enum):
    """Why a calc line could not be turned into a scenario request."""

    NO_MATCH = "no_match"
    EMPTY_NAME = "empty_name"
