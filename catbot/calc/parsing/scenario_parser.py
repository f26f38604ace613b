"""Turn a free-text calc line into a ScenarioRequest.

Accepted lines look like:

    252+ Atk Garchomp @ Choice Band using Earthquake vs 252 HP / 4 Def Toxapex
    in Sand with Stealth Rock

Field phrases are read first and then removed from a working copy, so words
like "in" or "Sand" never end up in a species name or a stat token.
"""

import re
from typing import Mapping, Optional, Pattern, Tuple, Union

from absl import logging

from catbot.calc.parsing.field_conditions import (
    FIELD_PHRASE_PATTERNS,
    extract_field_conditions,
)
from catbot.calc.parsing.nature_inference import DEFAULT_COMPANION_STATS
from catbot.calc.parsing.side_parser import parse_side
from catbot.calc.schema.enums import ParseFailureReason, Stat
from catbot.calc.schema.scenario_request import ParseFailure, ScenarioRequest
from catbot.exceptions import ParseError

# Lazy attacker and move segments: the first "using" and the first "vs" win.
_SCENARIO_RE = re.compile(
    r"^\s*(?P<attacker>.+?)\s+using\s+(?P<move>.+?)\s+vs\.?\s+(?P<defender>.+)$",
    re.IGNORECASE,
)

# A field phrase also takes a leading "and" or comma with it.
_CONNECTOR = r"(?:(?:,|\band\b)\s*)?"

_FIELD_PHRASE_REMOVERS: Tuple[Pattern[str], ...] = tuple(
    re.compile(_CONNECTOR + pattern.pattern, pattern.flags)
    for pattern in FIELD_PHRASE_PATTERNS
)


def strip_field_phrases(text: str) -> str:
    """Remove every recognized field phrase from a calc line.

    Args:
        text: The full calc line

    Returns:
        The line without weather, terrain, screen, hazard or gravity phrases,
        with whitespace collapsed
    """
    for remover in _FIELD_PHRASE_REMOVERS:
        text = remover.sub(" ", text)
    return " ".join(text.split()).strip(" ,")


class ScenarioParser:
    """Parses "<attacker> using <move> vs <defender> [field]" lines.

    The parser holds no per-call state and can be shared freely.
    """

    def __init__(
        self, companion_stats: Mapping[Stat, Stat] = DEFAULT_COMPANION_STATS
    ) -> None:
        """Initialize the parser.

        Args:
            companion_stats: Raised stat -> guessed lowered stat, used when a
                side only marks the raised stat of its nature
        """
        self._companion_stats = companion_stats

    def parse(self, text: str) -> Optional[ScenarioRequest]:
        """Parse a calc line.

        Returns:
            The request, or None if the line does not fit the grammar or a side
            has no species name
        """
        result = self.parse_or_failure(text)
        return result if isinstance(result, ScenarioRequest) else None

    def parse_or_failure(self, text: str) -> Union[ScenarioRequest, ParseFailure]:
        """Parse a calc line, reporting why it was rejected.

        Args:
            text: Raw calc line without the command prefix

        Returns:
            A complete ScenarioRequest, or a ParseFailure with the reason
        """
        field = extract_field_conditions(text)
        cleaned = strip_field_phrases(text)

        match = _SCENARIO_RE.match(cleaned)
        if not match:
            logging.debug("Calc line does not match the scenario grammar: %r", text)
            return ParseFailure(reason=ParseFailureReason.NO_MATCH, text=text)

        try:
            attacker = parse_side(match.group("attacker"), self._companion_stats)
            defender = parse_side(match.group("defender"), self._companion_stats)
        except ParseError as e:
            return ParseFailure(reason=e.reason, text=e.text)

        return ScenarioRequest(
            attacker=attacker,
            move_name=match.group("move").strip(),
            defender=defender,
            field=field,
        )


_DEFAULT_PARSER = ScenarioParser()


def parse_scenario(raw_line: str) -> Union[ScenarioRequest, ParseFailure]:
    """Parse a calc line with the default nature inference policy.

    ParseFailure is falsy, so callers can simply test the result.
    """
    return _DEFAULT_PARSER.parse_or_failure(raw_line)
