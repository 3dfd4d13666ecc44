"""
PokeAPI species client.

Provides the national species roster and localized species names, used to
search the catalog in each binder language.
"""

import logging
import re
from typing import Any

import httpx

from binderdex.config import settings
from binderdex.models.errors import CatalogError
from binderdex.models.roster import SpeciesEntry

logger = logging.getLogger(__name__)

# App language code -> PokeAPI language name
SPECIES_LANGUAGES = {
    "en": "en",
    "ja": "ja",
    "fr": "fr",
    "de": "de",
    "es": "es",
    "it": "it",
    "pt": "pt",
    "zh-TW": "zh-hant",
    "id": "id",
    "th": "th",
}

_SPECIES_ID = re.compile(r"pokemon-species/(\d+)/?$")
_WORD_START = re.compile(r"\b\w")


def display_species_name(slug: str) -> str:
    """Title-case a species slug: mr-mime becomes Mr Mime."""
    return _WORD_START.sub(lambda m: m.group().upper(), slug.replace("-", " "))


def localized_name(species: dict[str, Any], lang: str) -> str | None:
    """
    Species name in an app language.

    Falls back to the English name, then to the species slug.
    """
    names = species.get("names") or []
    wanted = SPECIES_LANGUAGES.get(lang, lang)
    by_language = {
        (n.get("language") or {}).get("name"): n.get("name")
        for n in names
        if isinstance(n, dict)
    }
    return by_language.get(wanted) or by_language.get("en") or species.get("name")


class SpeciesClient:
    """
    Async PokeAPI client.

    Species detail documents are kept in memory; they do not change.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        limit: int | None = None,
    ) -> None:
        self.base_url = (base_url or settings.species_api_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.limit = limit or settings.species_limit
        self._species: dict[int, dict[str, Any]] = {}

    async def _get_json(self, path: str, params: dict[str, int] | None = None) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogError(
                f"Species request failed: HTTP {e.response.status_code}", detail=url
            ) from e
        except httpx.RequestError as e:
            raise CatalogError(f"Species request failed: {e}", detail=url) from e
        except ValueError as e:
            raise CatalogError("Species response is not JSON", detail=url) from e

    async def get_base_roster(self) -> list[SpeciesEntry]:
        """
        Every national species, sorted by dex number.

        Raises:
            CatalogError: If the request fails or the response has no results
        """
        data = await self._get_json("pokemon-species", {"limit": self.limit, "offset": 0})
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise CatalogError("Species list response has no results")
        entries: list[SpeciesEntry] = []
        for item in results:
            url = item.get("url") if isinstance(item, dict) else None
            match = _SPECIES_ID.search(url) if isinstance(url, str) else None
            if not match or not isinstance(item.get("name"), str):
                logger.warning("Skipping species without id: %r", item)
                continue
            entries.append(
                SpeciesEntry(dex_id=int(match.group(1)), name=display_species_name(item["name"]))
            )
        return sorted(entries, key=lambda e: e.dex_id)

    async def get_localized_name(self, dex_id: int, lang: str) -> str | None:
        """Species name in a language, or None if the species cannot be fetched."""
        species = self._species.get(dex_id)
        if species is None:
            try:
                species = await self._get_json(f"pokemon-species/{dex_id}")
            except CatalogError as e:
                logger.warning("Species %d unavailable: %s", dex_id, e.message)
                return None
            if not isinstance(species, dict):
                logger.warning("Species %d response is not an object", dex_id)
                return None
            self._species[dex_id] = species
        return localized_name(species, lang)
