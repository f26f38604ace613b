"""Base stats and abilities lookup against PokeAPI."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from absl import logging

from catbot.exceptions import LookupServiceError

POKEAPI_ROOT = "https://pokeapi.co/api/v2/pokemon/"


def pokeapi_slug(name: str) -> str:
    """Convert typed words to a PokeAPI slug ("Chien Pao" -> "chien-pao")."""
    return "-".join(name.lower().split())


@dataclass(frozen=True)
class PokemonSummary:
    name: str
    abilities: List[str] = field(default_factory=list)
    base_stats: Dict[str, int] = field(default_factory=dict)
    image_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]

    def format(self) -> str:
        stats = "\n".join(f"{stat}: {value}" for stat, value in self.base_stats.items())
        return (
            f"**Stats for {self.display_name}**\n"
            f"**Abilities:** {', '.join(self.abilities)}\n"
            f"**Base Stats:**\n{stats}"
        )


class PokeApiClient:
    def __init__(
        self,
        root_url: str = POKEAPI_ROOT,
        timeout: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._root_url = root_url
        self._timeout = timeout
        self._http_client = http_client

    async def get_pokemon_summary(self, slug: str) -> PokemonSummary:
        """Fetch the species entry for a PokeAPI slug.

        Raises:
            LookupServiceError: If the species does not exist or PokeAPI fails
        """
        url = self._root_url + slug
        try:
            if self._http_client is not None:
                response = await self._http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logging.error("Error fetching Pokemon data for %s: %s", slug, e)
            raise LookupServiceError("pokeapi", f"Pokemon not found: {slug}") from e

        return self._parse_summary(data)

    def _parse_summary(self, data: Dict[str, Any]) -> PokemonSummary:
        sprites = data.get("sprites") or {}
        artwork = ((sprites.get("other") or {}).get("official-artwork") or {}).get(
            "front_default"
        )
        return PokemonSummary(
            name=data.get("name", ""),
            abilities=[a["ability"]["name"] for a in data.get("abilities", [])],
            base_stats={s["stat"]["name"]: s["base_stat"] for s in data.get("stats", [])},
            image_url=artwork or sprites.get("front_default"),
        )
