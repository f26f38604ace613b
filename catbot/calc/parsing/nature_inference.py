"""Nature detection from "+"/"-" stat markers in a calc line.

Showdown-style spreads mark the nature with a sign next to a stat, as in
"252+ Atk" or "0- SpA". A line that only names the raised stat is common
("252+ Atk Garchomp"), so the lowered stat is then guessed from a table of
conventional competitive pairings. That guess is an inference policy, not a
game rule, and results built from it are flagged as inferred.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from catbot.calc.data.nature import Nature, nature_for_stats
from catbot.calc.parsing.stat_alias import STAT_PATTERN, resolve_stat
from catbot.calc.schema.enums import Stat

RAISED = "+"
LOWERED = "-"

# Raised stat -> stat usually dropped alongside it.
DEFAULT_COMPANION_STATS: Mapping[Stat, Stat] = MappingProxyType(
    {
        Stat.ATK: Stat.SPA,
        Stat.SPA: Stat.ATK,
        Stat.SPE: Stat.ATK,
        Stat.DEF: Stat.SPA,
        Stat.SPD: Stat.ATK,
    }
)
FALLBACK_COMPANION_STAT = Stat.ATK

# A sign directly before a stat, optionally after an EV count ("252+ Atk",
# "+SpA"). A sign followed by digits is a boost ("+1 Atk") and does not match.
_MARKER_RE = re.compile(
    rf"(?<![A-Za-z])([+-])\s*({STAT_PATTERN})(?![A-Za-z])",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class NatureMarker:
    stat: Stat
    sign: str


@dataclass(frozen=True)
class InferredNature:
    """A nature read from markers.

    Attributes:
        nature: The resolved nature
        was_inferred: True if the lowered stat came from the companion table
            rather than from an explicit "-" marker
    """

    nature: Nature
    was_inferred: bool

    @property
    def name(self) -> str:
        return self.nature.name


def find_nature_markers(text: str) -> List[NatureMarker]:
    """Collect sign-annotated stat markers in order of appearance.

    Args:
        text: One side of a calc line, before any token stripping

    Returns:
        Markers in the order they appear in the text
    """
    markers = []
    for sign, label in _MARKER_RE.findall(text):
        stat = resolve_stat(label)
        if stat is not None:
            markers.append(NatureMarker(stat=stat, sign=sign))
    return markers


def _companion_for(plus_stat: Stat, companions: Mapping[Stat, Stat]) -> Stat:
    minus_stat = companions.get(plus_stat, FALLBACK_COMPANION_STAT)
    if minus_stat == plus_stat:
        # Guessed pairs are never self-cancelling.
        minus_stat = Stat.DEF if plus_stat != Stat.DEF else Stat.ATK
    return minus_stat


def infer_nature(
    markers: Iterable[NatureMarker],
    companions: Mapping[Stat, Stat] = DEFAULT_COMPANION_STATS,
) -> Optional[InferredNature]:
    """Determine the nature named by a side's markers.

    The last raised and the last lowered marker win. HP markers are ignored
    since no nature touches HP.

    Args:
        markers: Markers in order of appearance
        companions: Raised stat -> guessed lowered stat, used when no "-"
            marker is present

    Returns:
        The nature, or None if no raised stat was marked
    """
    plus_stat: Optional[Stat] = None
    minus_stat: Optional[Stat] = None
    for marker in markers:
        if marker.stat == Stat.HP:
            continue
        if marker.sign == RAISED:
            plus_stat = marker.stat
        elif marker.sign == LOWERED:
            minus_stat = marker.stat

    if plus_stat is None:
        return None
    if minus_stat is not None:
        return InferredNature(
            nature=nature_for_stats(plus_stat, minus_stat), was_inferred=False
        )
    return InferredNature(
        nature=nature_for_stats(plus_stat, _companion_for(plus_stat, companions)),
        was_inferred=True,
    )
