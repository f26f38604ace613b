"""Showdown-export rendering of sets and Smogon dex links."""

import re
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Optional

from catbot.calc.schema.enums import Stat
from catbot.sets.smogon_set import SmogonSet

SMOGON_DEX_URL = "https://www.smogon.com/dex/{gen_code}/pokemon/{species}/{tier}/"
DEFAULT_GEN_CODE = "sv"
MAX_IV = 31
MESSAGE_LIMIT = 1800

SMOGON_GEN_CODES: Mapping[int, str] = MappingProxyType(
    {
        9: "sv",
        8: "ss",
        7: "sm",
        6: "xy",
        5: "bw",
        4: "dp",
        3: "rs",
        2: "gs",
        1: "rb",
    }
)

_FORMAT_RE = re.compile(r"^gen(\d)([a-z0-9]+)$", re.IGNORECASE)


def smogon_gen_code(generation: int) -> str:
    return SMOGON_GEN_CODES.get(generation, DEFAULT_GEN_CODE)


def format_species_for_url(species: str) -> str:
    return re.sub(r"\s", "-", species.lower()).replace("'", "").replace("’", "")


def build_smogon_url(species: str, format_id: str) -> Optional[str]:
    """Build the Smogon dex analysis link for a species in a format.

    Args:
        species: Species name as listed in the sets data
        format_id: Format such as "gen9ou"

    Returns:
        The analysis URL, or None if format_id is not "gen<N><tier>"

    Examples:
        >>> build_smogon_url("Great Tusk", "gen9ou")
        'https://www.smogon.com/dex/sv/pokemon/great-tusk/ou/'
    """
    match = _FORMAT_RE.match(format_id)
    if not match:
        return None
    return SMOGON_DEX_URL.format(
        gen_code=smogon_gen_code(int(match.group(1))),
        species=format_species_for_url(species),
        tier=match.group(2).lower(),
    )


def _stat_label(key: str) -> str:
    try:
        return Stat(key.lower()).label
    except ValueError:
        return key.upper()


def _format_spread(spread: Mapping[str, int], keep: Callable[[int], bool]) -> str:
    return " / ".join(
        f"{value} {_stat_label(stat)}"
        for stat, value in spread.items()
        if keep(value)
    )


def format_moveset(species: str, smogon_set: SmogonSet) -> str:
    """Render a set in Showdown's team export format.

    Returns:
        Multi-line export text, e.g.

            Garchomp @ Choice Band
            Ability: Rough Skin
            EVs: 252 Atk / 4 SpD / 252 Spe
            Jolly Nature
            - Earthquake
    """
    lines = [f"{species} @ {smogon_set.item}" if smogon_set.item else species]
    if smogon_set.ability:
        lines.append(f"Ability: {smogon_set.ability}")
    if smogon_set.teratypes:
        lines.append(f"Tera Type: {smogon_set.teratypes}")
    evs = _format_spread(smogon_set.evs, lambda value: value > 0)
    if evs:
        lines.append(f"EVs: {evs}")
    if smogon_set.nature:
        lines.append(f"{smogon_set.nature} Nature")
    ivs = _format_spread(smogon_set.ivs, lambda value: value < MAX_IV)
    if ivs:
        lines.append(f"IVs: {ivs}")
    lines.extend(f"- {move}" for move in smogon_set.moves)
    return "\n".join(lines)


def chunk_messages(parts: Iterable[str], limit: int = MESSAGE_LIMIT) -> List[str]:
    """Pack message parts into as few messages as the size limit allows.

    A part is never split; one longer than the limit becomes its own message.
    """
    messages: List[str] = []
    current = ""
    for part in parts:
        candidate = f"{current}\n\n{part}" if current else part
        if current and len(candidate) > limit:
            messages.append(current)
            current = part
        else:
            current = candidate
    if current:
        messages.append(current)
    return messages
