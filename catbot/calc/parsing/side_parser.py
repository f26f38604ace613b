"""Parse one side of a calc line into a SideDescriptor.

A side looks like "+1 252+ Atk Garchomp (Rough Skin) @ Choice Band": any
number of stat tokens, an optional parenthesized ability, the species and an
optional "@ item". Recognized tokens are stripped and what remains is the
species name.
"""

import re
from typing import Dict, Mapping, Tuple

from absl import logging

from catbot.calc.parsing.bounded_int import bounded_int, bounded_signed_int
from catbot.calc.parsing.nature_inference import (
    DEFAULT_COMPANION_STATS,
    find_nature_markers,
    infer_nature,
)
from catbot.calc.parsing.stat_alias import STAT_PATTERN, resolve_stat
from catbot.calc.schema.enums import ParseFailureReason, Stat
from catbot.calc.schema.side_descriptor import MAX_BOOST, MAX_EV, MIN_BOOST, SideDescriptor
from catbot.exceptions import ParseError

_ABILITY_RE = re.compile(r"\(([^)]+)\)")

# [+N/-N boost] [EV count] [+/- nature sign] <stat> [/]
_STAT_TOKEN_RE = re.compile(
    r"(?P<boost>[+-]\d+)?\s*(?P<ev>\d+)?(?P<sign>[+-]?)\s*"
    rf"(?<![A-Za-z])(?P<stat>{STAT_PATTERN})(?![A-Za-z])(?:\s*/)?",
    re.IGNORECASE,
)

_SEPARATOR_CHARS = " /"


def _collect_stat_tokens(text: str) -> Tuple[Dict[Stat, int], Dict[Stat, int]]:
    evs: Dict[Stat, int] = {}
    boosts: Dict[Stat, int] = {}
    for match in _STAT_TOKEN_RE.finditer(text):
        stat = resolve_stat(match.group("stat"))
        if stat is None:
            continue
        if match.group("boost"):
            boosts[stat] = bounded_signed_int(match.group("boost"), MIN_BOOST, MAX_BOOST)
        if match.group("ev"):
            evs[stat] = bounded_int(match.group("ev"), MAX_EV)
    return evs, boosts


def strip_side_tokens(text: str) -> str:
    """Remove the ability group and every stat token from a side.

    Applying it twice gives the same result as applying it once.

    Args:
        text: One side of a calc line

    Returns:
        "<species> @ <item>" or "<species>", with whitespace collapsed
    """
    cleaned = _ABILITY_RE.sub(" ", text)
    cleaned = _STAT_TOKEN_RE.sub(" ", cleaned)
    return " ".join(cleaned.split()).strip(_SEPARATOR_CHARS)


def parse_side(
    text: str, companions: Mapping[Stat, Stat] = DEFAULT_COMPANION_STATS
) -> SideDescriptor:
    """Parse an attacker or defender description.

    Args:
        text: One side of a calc line (e.g., "252 HP / 4 Def Toxapex")
        companions: Raised stat -> guessed lowered stat for nature inference

    Returns:
        SideDescriptor with species, item, ability, EVs, boosts and nature

    Raises:
        ParseError: If no species name is left once tokens are stripped
    """
    # Markers are read from the raw text, before stripping can drop signs.
    nature = infer_nature(find_nature_markers(text), companions)

    ability_match = _ABILITY_RE.search(text)
    ability = ability_match.group(1).strip() if ability_match else None

    evs, boosts = _collect_stat_tokens(_ABILITY_RE.sub(" ", text))

    name, _, item = strip_side_tokens(text).partition("@")
    name = name.strip(_SEPARATOR_CHARS)
    item = item.strip(_SEPARATOR_CHARS)
    if not name:
        logging.debug("No species left in side %r", text)
        raise ParseError(ParseFailureReason.EMPTY_NAME, text)

    return SideDescriptor(
        name=name,
        item=item,
        ability=ability or None,
        evs=evs,
        boosts=boosts,
        nature=nature.name if nature else None,
        nature_inferred=nature.was_inferred if nature else False,
    )
