"""Resolve Showdown stat abbreviations to Stat keys."""

from types import MappingProxyType
from typing import Mapping, Optional

from catbot.calc.schema.enums import Stat

# Regex alternation matching any stat abbreviation; compile with re.IGNORECASE.
STAT_PATTERN = "|".join(stat.label for stat in Stat)

_STAT_ALIASES: Mapping[str, Stat] = MappingProxyType(
    {stat.label.lower(): stat for stat in Stat}
)


def resolve_stat(token: str) -> Optional[Stat]:
    """Resolve a stat abbreviation in any case mixture.

    Only the six Showdown abbreviations (HP, Atk, Def, SpA, SpD, Spe) are
    accepted. Anything else is not an error, it simply names no stat.

    Args:
        token: Abbreviation to resolve (e.g., "spa", "ATK")

    Returns:
        The matching Stat, or None if the token is not a stat abbreviation

    Examples:
        >>> resolve_stat("sPa")
        Stat.SPA
        >>> resolve_stat("Attack") is None
        True
    """
    return _STAT_ALIASES.get(token.strip().lower())
