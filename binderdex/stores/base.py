"""
Collaborator interfaces.

The engine only talks to storage and the catalog through these protocols.
Storage implementations raise StorageUnavailableError when their backend
cannot be reached; the services decide whether to fall back or propagate.
"""

from typing import Any, Protocol

from binderdex.models.catalog import GroupInfo, Printing, PrintingBrief
from binderdex.models.roster import SpeciesEntry


class DeviceStore(Protocol):
    """Unscoped key/value storage on the current device."""

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class AccountStore(Protocol):
    """Per-account cloud storage for collections and binder order."""

    async def load_collections(self, user_id: str) -> list[dict[str, Any]]: ...

    async def save_collections(self, user_id: str, documents: list[dict[str, Any]]) -> None: ...

    async def load_binder_order(self, user_id: str) -> list[str]: ...

    async def save_binder_order(self, user_id: str, order: list[str]) -> None: ...


class AdminConfigStore(Protocol):
    """
    Shared admin config documents.

    set_document enforces the admin allow-list and raises
    AdminPermissionError for anyone else.
    """

    async def get_document(self, name: str) -> dict[str, Any] | None: ...

    async def set_document(self, name: str, data: dict[str, Any]) -> None: ...


class CatalogProvider(Protocol):
    """
    Card catalog lookups. Implementations raise CatalogError on failure.

    `lang` is an app language code such as "en" or "zh-TW".
    """

    async def search_by_name(
        self, lang: str, name: str, exact: bool = False
    ) -> list[PrintingBrief]: ...

    async def get_printing(self, lang: str, card_id: str) -> Printing: ...

    async def get_group(self, lang: str, group_id: str) -> GroupInfo: ...


class SpeciesProvider(Protocol):
    """National species list and localized species names."""

    async def get_base_roster(self) -> list[SpeciesEntry]: ...

    async def get_localized_name(self, dex_id: int, lang: str) -> str | None: ...
