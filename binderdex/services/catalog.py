"""
TCGdex card catalog client.

Looks up printings by name or id and groups (sets) with their finish
counts. Languages use the app codes ("zh-TW"); the API wants them
lowercase in paths.
"""

from typing import Any

import httpx

from binderdex.config import settings
from binderdex.models.admin import FinishFlags
from binderdex.models.catalog import (
    GroupFinishCounts,
    GroupInfo,
    Printing,
    PrintingBrief,
    group_id_from_card_id,
)
from binderdex.models.errors import CatalogError


def to_api_language(lang: str) -> str:
    return lang.lower() if lang == "zh-TW" else lang


def _finish_flags(raw: Any) -> FinishFlags:
    if not isinstance(raw, dict):
        return FinishFlags(normal=True)
    return FinishFlags(
        normal=raw.get("normal") is True,
        reverse=raw.get("reverse") is True,
        holo=raw.get("holo") is True,
        first_edition=raw.get("firstEdition") is True,
        w_promo=raw.get("wPromo") is True,
    )


def _optional_int(value: Any) -> int | None:
    return value if isinstance(value, int) else None


def _object_id(data: Any, what: str) -> str:
    """Id of a catalog object, or CatalogError if the payload is not one."""
    if not isinstance(data, dict):
        raise CatalogError(f"Malformed {what} in catalog response", detail=repr(data)[:200])
    object_id = data.get("id")
    if not isinstance(object_id, str) or not object_id:
        raise CatalogError(f"Catalog {what} has no id", detail=repr(data)[:200])
    return object_id


def parse_printing_brief(data: dict[str, Any], group_id: str | None = None) -> PrintingBrief:
    card_id = _object_id(data, "card")
    return PrintingBrief(
        id=card_id,
        name=data.get("name", ""),
        local_id=str(data.get("localId", "")),
        image=data.get("image"),
        group_id=group_id or group_id_from_card_id(card_id),
    )


def parse_printing(data: dict[str, Any]) -> Printing:
    """
    Build a Printing from a card document.

    Raises:
        CatalogError: If the document is not a card object
    """
    card_id = _object_id(data, "card")
    group = data.get("set")
    if not isinstance(group, dict):
        group = {}
    dex_ids = data.get("dexId")
    if not isinstance(dex_ids, list):
        dex_ids = []
    return Printing(
        id=card_id,
        name=data.get("name", ""),
        local_id=str(data.get("localId", "")),
        group_id=group.get("id") or group_id_from_card_id(card_id),
        group_name=group.get("name", ""),
        finishes=_finish_flags(data.get("variants")),
        dex_ids=tuple(d for d in dex_ids if isinstance(d, int)),
        image=data.get("image"),
    )


def parse_group(data: dict[str, Any]) -> GroupInfo:
    """
    Build a GroupInfo from a set document. Malformed card entries are skipped.

    Raises:
        CatalogError: If the document is not a set object
    """
    group_id = _object_id(data, "set")
    counts = data.get("cardCount")
    finish_counts = None
    if isinstance(counts, dict):
        finish_counts = GroupFinishCounts(
            normal=_optional_int(counts.get("normal")),
            reverse=_optional_int(counts.get("reverse")),
            holo=_optional_int(counts.get("holo")),
            first_edition=_optional_int(counts.get("firstEd")),
        )
    cards = data.get("cards")
    if not isinstance(cards, list):
        cards = []
    return GroupInfo(
        id=group_id,
        name=data.get("name", ""),
        release_date=data.get("releaseDate"),
        finish_counts=finish_counts,
        printings=tuple(
            parse_printing_brief(c, group_id)
            for c in cards
            if isinstance(c, dict) and isinstance(c.get("id"), str) and c["id"]
        ),
        symbol=data.get("symbol"),
    )


class CatalogClient:
    """
    Async TCGdex client.

    Args:
        base_url: API root. Defaults to settings.catalog_api_url
        timeout: Request timeout in seconds
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or settings.catalog_api_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogError(
                f"Catalog request failed: HTTP {e.response.status_code}", detail=url
            ) from e
        except httpx.RequestError as e:
            raise CatalogError(f"Catalog request failed: {e}", detail=url) from e
        except ValueError as e:
            raise CatalogError("Catalog response is not JSON", detail=url) from e

    async def search_by_name(
        self, lang: str, name: str, exact: bool = False
    ) -> list[PrintingBrief]:
        """
        Search printings by name.

        Lax search matches any name containing `name` ("Pikachu" also
        finds "Alolan Pikachu"); exact search only the name itself.
        """
        params = {"name": f"eq:{name}" if exact else name}
        data = await self._get_json(f"{to_api_language(lang)}/cards", params)
        if not isinstance(data, list):
            return []
        return [
            parse_printing_brief(item)
            for item in data
            if isinstance(item, dict) and isinstance(item.get("id"), str) and item["id"]
        ]

    async def get_printing(self, lang: str, card_id: str) -> Printing:
        data = await self._get_json(f"{to_api_language(lang)}/cards/{card_id}")
        return parse_printing(data)

    async def get_group(self, lang: str, group_id: str) -> GroupInfo:
        data = await self._get_json(f"{to_api_language(lang)}/sets/{group_id}")
        return parse_group(data)
