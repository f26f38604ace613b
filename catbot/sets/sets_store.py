"""Fetching and caching competitive sets from the pkmn Smogon data dump."""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
from absl import logging
from pydantic import ValidationError

from catbot.exceptions import SetsFetchError
from catbot.sets.smogon_set import SmogonSet

SETS_URL_TEMPLATE = "https://pkmn.github.io/smogon/data/sets/{format_id}.json"
DEFAULT_CACHE_TTL_SECONDS = 30 * 60

SetsData = Dict[str, Dict[str, SmogonSet]]


def normalize_species(name: str) -> str:
    """Reduce a species name to lowercase alphanumerics.

    Examples:
        >>> normalize_species("Landorus-Therian")
        'landorustherian'
        >>> normalize_species("Farfetch'd")
        'farfetchd'
    """
    return "".join(c for c in name.lower() if c.isascii() and c.isalnum())


@dataclass(frozen=True)
class SpeciesSets:
    species: str
    sets: Dict[str, SmogonSet]


def find_pokemon_sets(data: SetsData, pokemon_name: str) -> Optional[SpeciesSets]:
    """Find the sets of a species by loose name matching.

    Names match when their normalized forms are equal or one contains the
    other, so "lando" finds "Landorus-Therian". The first match in data order
    wins.

    Args:
        data: Species -> set name -> set, as returned by SetsStore
        pokemon_name: Name typed by the user

    Returns:
        The matching species and its sets, or None
    """
    search = normalize_species(pokemon_name)
    if not search:
        return None
    for species, sets in data.items():
        normalized = normalize_species(species)
        if normalized == search or search in normalized or normalized in search:
            return SpeciesSets(species=species, sets=sets)
    return None


def find_set(
    sets: Dict[str, SmogonSet], set_name: str
) -> Optional[Tuple[str, SmogonSet]]:
    """Find a set by name, ignoring case.

    Returns:
        Tuple of (set name as listed, set), or None if no set has that name
    """
    wanted = set_name.strip().lower()
    for name, smogon_set in sets.items():
        if name.lower() == wanted:
            return name, smogon_set
    return None


@dataclass
class _CacheEntry:
    data: SetsData
    expires_at: float


class SetsStore:
    """Fetches per-format sets data and keeps it for a limited time.

    Typical usage:
        store = SetsStore()
        data = await store.get_sets_data("gen9ou")
        found = find_pokemon_sets(data, "garchomp")
    """

    def __init__(
        self,
        url_template: str = SETS_URL_TEMPLATE,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        timeout: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the store.

        Args:
            url_template: URL with a {format_id} placeholder
            cache_ttl: Seconds a fetched format stays cached
            timeout: Request timeout in seconds, used when no http_client is given
            http_client: Shared client to send requests with
            clock: Monotonic time source, replaceable in tests
        """
        self._url_template = url_template
        self._cache_ttl = cache_ttl
        self._timeout = timeout
        self._http_client = http_client
        self._clock = clock
        self._cache: Dict[str, _CacheEntry] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    async def get_sets_data(self, format_id: str) -> SetsData:
        """Get all sets of a format, from cache when still fresh.

        Args:
            format_id: Showdown format id (e.g., "gen9ou")

        Returns:
            Species -> set name -> set

        Raises:
            SetsFetchError: If the data cannot be downloaded or decoded
        """
        format_id = format_id.lower()
        entry = self._fresh_entry(format_id)
        if entry is not None:
            return entry.data

        # Fetches for one format are serialized; other formats stay readable.
        async with self._locks.setdefault(format_id, asyncio.Lock()):
            self._evict_expired()
            entry = self._cache.get(format_id)
            if entry is not None:
                return entry.data

            data = await self._fetch(format_id)
            self._cache[format_id] = _CacheEntry(
                data=data, expires_at=self._clock() + self._cache_ttl
            )
            return data

    async def find_pokemon_sets(
        self, format_id: str, pokemon_name: str
    ) -> Optional[SpeciesSets]:
        return find_pokemon_sets(await self.get_sets_data(format_id), pokemon_name)

    def is_cached(self, format_id: str) -> bool:
        return self._fresh_entry(format_id.lower()) is not None

    def _fresh_entry(self, format_id: str) -> Optional[_CacheEntry]:
        entry = self._cache.get(format_id)
        if entry is None or entry.expires_at <= self._clock():
            return None
        return entry

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._cache.items() if entry.expires_at <= now]
        for key in expired:
            logging.debug("Evicting cached sets for %s", key)
            del self._cache[key]

    async def _fetch(self, format_id: str) -> SetsData:
        url = self._url_template.format(format_id=format_id)
        logging.info("Fetching sets from: %s", url)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
            raw = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise SetsFetchError(
                format_id, f"HTTP {status}: {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            logging.error("Error fetching sets for %s: %s", format_id, e)
            raise SetsFetchError(format_id, str(e)) from e
        except ValueError as e:
            raise SetsFetchError(format_id, f"Invalid JSON: {e}") from e

        if not isinstance(raw, dict):
            raise SetsFetchError(format_id, "Unexpected sets data layout")
        return self._parse_sets(format_id, raw)

    def _parse_sets(self, format_id: str, raw: Dict[str, Any]) -> SetsData:
        data: SetsData = {}
        for species, sets in raw.items():
            if not isinstance(sets, dict):
                continue
            parsed: Dict[str, SmogonSet] = {}
            for set_name, set_data in sets.items():
                try:
                    parsed[set_name] = SmogonSet.model_validate(set_data)
                except ValidationError as e:
                    logging.warning(
                        "Skipping malformed set %s/%s in %s: %s",
                        species,
                        set_name,
                        format_id,
                        e,
                    )
            data[species] = parsed
        return data
