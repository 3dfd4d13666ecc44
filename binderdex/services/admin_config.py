"""
Admin-curated binder configuration.

Four shared documents, readable by everyone and writable by admins:

- globalBinderSlots: baseline slots per admin binder key
- excludedCardVersions: "cardId|variant" keys hidden for everyone
- binderDefaults: slot key -> card id shown as the empty-slot preview
- customCards: extra roster cards (e.g. a newly printed Unown form)

Reads go through a short TTL cache and never raise; a failed read is
logged and treated as an empty document. Writes always read the current
document from the store, propagate permission and storage errors, and
invalidate the cache.
"""

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import fields, replace
from typing import Any

from binderdex.config import settings
from binderdex.models.admin import CustomCard
from binderdex.models.documents import (
    custom_card_to_dict,
    parse_custom_cards,
    parse_slots,
    slot_to_dict,
)
from binderdex.models.errors import BinderValidationError, FailureKind
from binderdex.models.slot import CardVariant, Slot
from binderdex.slots.addressing import card_version_key, now_ms
from binderdex.stores.base import AdminConfigStore

logger = logging.getLogger(__name__)

GLOBAL_SLOTS_DOCUMENT = "globalBinderSlots"
EXCLUDED_VERSIONS_DOCUMENT = "excludedCardVersions"
BINDER_DEFAULTS_DOCUMENT = "binderDefaults"
CUSTOM_CARDS_DOCUMENT = "customCards"

ADMIN_DOCUMENTS = (
    GLOBAL_SLOTS_DOCUMENT,
    EXCLUDED_VERSIONS_DOCUMENT,
    BINDER_DEFAULTS_DOCUMENT,
    CUSTOM_CARDS_DOCUMENT,
)

_CUSTOM_CARD_FIELDS = frozenset(f.name for f in fields(CustomCard))


class AdminConfigService:
    """
    Cached access to the admin config documents.

    Args:
        store: Admin config store (enforces the write allow-list)
        ttl_seconds: How long a fetched document is served from cache
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        store: AdminConfigStore,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._ttl = settings.admin_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._cache: dict[str, tuple[float, dict[str, Any]]] = {}

    # --- Cache ---

    async def _read(self, name: str) -> dict[str, Any]:
        cached = self._cache.get(name)
        if cached is not None and cached[0] > self._clock():
            return cached[1]
        try:
            data = await self._store.get_document(name) or {}
        except Exception as e:
            logger.warning("Reading admin config %s failed: %s", name, e, exc_info=True)
            return {}
        self._cache[name] = (self._clock() + self._ttl, data)
        return data

    async def prime(self) -> None:
        """Fetch every admin document into the cache."""
        self.invalidate()
        for name in ADMIN_DOCUMENTS:
            await self._read(name)
        logger.info("Primed admin config cache")

    def invalidate(self, name: str | None = None) -> None:
        if name is None:
            self._cache.clear()
        else:
            self._cache.pop(name, None)

    async def _write(self, name: str, data: dict[str, Any]) -> None:
        data = {**data, "updatedAt": now_ms()}
        try:
            await self._store.set_document(name, data)
        finally:
            self.invalidate(name)

    async def _current(self, name: str) -> dict[str, Any]:
        """Uncached read for read-modify-write. Errors propagate."""
        return await self._store.get_document(name) or {}

    # --- Global slots ---

    async def get_global_slots(self, binder_key: str) -> list[Slot] | None:
        """Baseline slots for an admin binder key, or None if none are set."""
        slots_by_key = (await self._read(GLOBAL_SLOTS_DOCUMENT)).get("slotsByKey")
        if not isinstance(slots_by_key, dict):
            return None
        raw = slots_by_key.get(binder_key)
        if not isinstance(raw, list):
            return None
        return parse_slots(raw)

    async def set_global_slots(self, binder_key: str, slots: Iterable[Slot]) -> None:
        """Replace the baseline of one binder key. Other keys are kept."""
        current = (await self._current(GLOBAL_SLOTS_DOCUMENT)).get("slotsByKey")
        slots_by_key = dict(current) if isinstance(current, dict) else {}
        slots_by_key[binder_key] = [slot_to_dict(slot) for slot in slots]
        await self._write(GLOBAL_SLOTS_DOCUMENT, {"slotsByKey": slots_by_key})

    # --- Excluded versions ---

    async def get_excluded_versions(self) -> frozenset[str]:
        keys = (await self._read(EXCLUDED_VERSIONS_DOCUMENT)).get("keys")
        if not isinstance(keys, list):
            return frozenset()
        return frozenset(k for k in keys if isinstance(k, str))

    async def _excluded_keys(self) -> list[str]:
        keys = (await self._current(EXCLUDED_VERSIONS_DOCUMENT)).get("keys")
        return [k for k in keys if isinstance(k, str)] if isinstance(keys, list) else []

    async def add_excluded_version(self, card_id: str, variant: CardVariant | str) -> None:
        """Hide a printing+finish for everyone. No-op if already hidden."""
        key = card_version_key(card_id, variant)
        keys = await self._excluded_keys()
        if key in keys:
            return
        await self._write(EXCLUDED_VERSIONS_DOCUMENT, {"keys": [*keys, key]})

    async def remove_excluded_version(self, card_id: str, variant: CardVariant | str) -> None:
        key = card_version_key(card_id, variant)
        keys = await self._excluded_keys()
        if key not in keys:
            return
        await self._write(EXCLUDED_VERSIONS_DOCUMENT, {"keys": [k for k in keys if k != key]})

    # --- Default card overrides ---

    async def get_default_card_overrides(self) -> dict[str, str]:
        """Slot key -> card id shown for empty slots. Cosmetic only."""
        raw = (await self._read(BINDER_DEFAULTS_DOCUMENT)).get("defaultCardBySlotKey")
        if not isinstance(raw, dict):
            return {}
        return {k: v for k, v in raw.items() if isinstance(v, str)}

    async def set_default_card_override(self, slot_key: str, card_id: str | None) -> None:
        """Set the preview card of one slot. None or blank removes it."""
        current = (await self._current(BINDER_DEFAULTS_DOCUMENT)).get("defaultCardBySlotKey")
        overrides = dict(current) if isinstance(current, dict) else {}
        if card_id is None or not card_id.strip():
            overrides.pop(slot_key, None)
        else:
            overrides[slot_key] = card_id.strip()
        await self._write(BINDER_DEFAULTS_DOCUMENT, {"defaultCardBySlotKey": overrides})

    async def set_default_card_overrides(self, overrides: Mapping[str, str]) -> None:
        """Replace every preview override at once."""
        await self._write(BINDER_DEFAULTS_DOCUMENT, {"defaultCardBySlotKey": dict(overrides)})

    # --- Custom cards ---

    async def get_custom_cards(self) -> list[CustomCard]:
        return parse_custom_cards((await self._read(CUSTOM_CARDS_DOCUMENT)).get("cards"))

    async def _custom_cards(self) -> list[CustomCard]:
        return parse_custom_cards((await self._current(CUSTOM_CARDS_DOCUMENT)).get("cards"))

    async def _save_custom_cards(self, cards: list[CustomCard]) -> None:
        await self._write(CUSTOM_CARDS_DOCUMENT, {"cards": [custom_card_to_dict(c) for c in cards]})

    async def add_custom_card(self, card: CustomCard) -> CustomCard:
        """
        Add a custom card, stamping its creation time.

        Raises:
            BinderValidationError: Missing id, slot key or name, or a card
                with the same id or slot key already exists
        """
        for name, value in (("id", card.id), ("slot key", card.slot_key), ("name", card.name)):
            if not value or not value.strip():
                raise BinderValidationError(
                    f"Custom card {name} is required.", kind=FailureKind.MISSING_REQUIRED
                )

        cards = await self._custom_cards()
        if any(c.id == card.id or c.slot_key == card.slot_key for c in cards):
            raise BinderValidationError(
                "A card with this id or slot key already exists.",
                kind=FailureKind.DUPLICATE,
                detail=f"id={card.id!r} slot_key={card.slot_key!r}",
            )

        stamped = replace(card, created_at=now_ms())
        await self._save_custom_cards([*cards, stamped])
        logger.info("Added custom card %s at slot %s", stamped.id, stamped.slot_key)
        return stamped

    async def update_custom_card(self, card_id: str, **changes: Any) -> CustomCard | None:
        """
        Update fields of a custom card.

        Returns:
            The updated card, or None if no card has that id.

        Raises:
            BinderValidationError: Unknown field, or the new slot key is
                taken by another card
        """
        unknown = set(changes) - (_CUSTOM_CARD_FIELDS - {"id", "created_at"})
        if unknown:
            raise BinderValidationError(
                f"Cannot update custom card fields: {', '.join(sorted(unknown))}."
            )

        cards = await self._custom_cards()
        index = next((i for i, c in enumerate(cards) if c.id == card_id), None)
        if index is None:
            return None

        slot_key = changes.get("slot_key")
        if slot_key is not None and any(
            c.slot_key == slot_key for i, c in enumerate(cards) if i != index
        ):
            raise BinderValidationError(
                "Another card already uses this slot key.",
                kind=FailureKind.DUPLICATE,
                detail=f"slot_key={slot_key!r}",
            )

        updated = replace(cards[index], **changes)
        cards[index] = updated
        await self._save_custom_cards(cards)
        return updated

    async def remove_custom_card(self, card_id: str) -> bool:
        """
        Remove a custom card.

        Returns:
            True if removed, False if not found.
        """
        cards = await self._custom_cards()
        remaining = [c for c in cards if c.id != card_id]
        if len(remaining) == len(cards):
            return False
        await self._save_custom_cards(remaining)
        return True
