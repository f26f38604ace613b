from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALTERNATIVE_SEPARATOR = " / "


def _join_alternatives(value: Any) -> Any:
    if isinstance(value, list):
        return ALTERNATIVE_SEPARATOR.join(str(v) for v in value)
    return value


class SmogonSet(BaseModel):
    """One named set from the pkmn Smogon sets data.

    The upstream JSON lists alternatives as arrays (e.g. two items, or a move
    slot with several options); they are flattened to "A / B" strings.
    """

    model_config = ConfigDict(extra="ignore")

    moves: List[str] = Field(default_factory=list)
    item: Optional[str] = None
    ability: Optional[str] = None
    nature: Optional[str] = None
    teratypes: Optional[str] = None
    evs: Dict[str, int] = Field(default_factory=dict)
    ivs: Dict[str, int] = Field(default_factory=dict)

    @field_validator("moves", mode="before")
    @classmethod
    def _flatten_moves(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_join_alternatives(move) for move in value]
        return value

    @field_validator("item", "ability", "nature", "teratypes", mode="before")
    @classmethod
    def _flatten_choice(cls, value: Any) -> Any:
        return _join_alternatives(value)

    @field_validator("evs", "ivs", mode="before")
    @classmethod
    def _first_spread(cls, value: Any) -> Any:
        # Several spreads may be listed; the first one is the recommended one.
        if isinstance(value, list):
            return value[0] if value else {}
        return value
