"""
Collection persistence.

Collections live in the account store when a user is signed in and one is
configured, otherwise in the device store. Every write is a whole-list
read-modify-write: load everything, change one collection, save everything.
Concurrent writers race and the last one wins.

Failure policy:
- load() never raises. Remote errors fall back to device data, device
  errors to an empty list.
- save() falls back to the device when the remote write fails.
- Malformed stored documents are skipped.
- Validation errors are raised before anything is written.
"""

import json
import logging
from collections.abc import Collection as ValidVariants
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from binderdex.models.collection import (
    BinderType,
    Collection,
    CollectionConfig,
    EditionFilter,
    MasterSetOptions,
    UserCardMeta,
)
from binderdex.models.documents import collection_to_document, split_collections
from binderdex.models.errors import BinderValidationError, FailureKind, StorageUnavailableError
from binderdex.models.slot import CardVariant, Slot, SlotCard
from binderdex.services.binder_order import BinderOrderStore, order_collections
from binderdex.services.snapshot_cache import CollectionSnapshotCache
from binderdex.slots.addressing import now_ms, random_suffix
from binderdex.stores.base import AccountStore, DeviceStore
from binderdex.stores.device import device_key

logger = logging.getLogger(__name__)

COLLECTIONS_KEY = device_key("collections")

# Set once device collections have been copied to an account
MIGRATED_KEY_PREFIX = "migrated/"

COLLECT_THEM_ALL_NAME = "Collect Them All"
COLLECT_THEM_ALL_COLOR = "purple"


def generate_collection_id() -> str:
    """Collection id: epoch ms, a dash and 7 random base36 chars."""
    return f"{now_ms()}-{random_suffix()}"


def migration_key(user_id: str) -> str:
    return device_key(f"{MIGRATED_KEY_PREFIX}{user_id}")


def get_slot(collection: Collection, key: str) -> Slot | None:
    return next((slot for slot in collection.slots if slot.key == key), None)


def get_slot_card(collection: Collection, key: str) -> SlotCard | None:
    """Raw assignment stored under a key, before any overlay."""
    slot = get_slot(collection, key)
    return slot.card if slot else None


def _validate_name(name: str) -> str:
    stripped = (name or "").strip()
    if not stripped:
        raise BinderValidationError("Binder name is required.", kind=FailureKind.MISSING_REQUIRED)
    return stripped


def _validate_languages(languages: Sequence[str]) -> tuple[str, ...]:
    if isinstance(languages, str):
        raise BinderValidationError("Languages must be a list of language codes.")
    for lang in languages:
        if not isinstance(lang, str) or not lang.strip():
            raise BinderValidationError(f"Invalid language code {lang!r}.")
    return tuple(lang.strip() for lang in languages)


def _validate_edition_filter(edition_filter: EditionFilter | str) -> EditionFilter:
    try:
        return EditionFilter(edition_filter)
    except ValueError as e:
        raise BinderValidationError(f"Unknown edition filter {edition_filter!r}.") from e


def _validate_slot_card(
    card: SlotCard | None, valid_variants: ValidVariants[CardVariant] | None
) -> SlotCard | None:
    if card is None:
        return None
    if not card.card_id:
        raise BinderValidationError("Card id is required.", kind=FailureKind.MISSING_REQUIRED)
    try:
        variant = CardVariant(card.variant)
    except ValueError as e:
        raise BinderValidationError(f"Unknown variant {card.variant!r}.") from e
    if valid_variants is not None and variant not in valid_variants:
        raise BinderValidationError(
            f"Variant {variant.value!r} is not available for {card.card_id}.",
            detail=", ".join(v.value for v in valid_variants),
        )
    return replace(card, variant=variant)


class CollectionStore:
    """
    Async CRUD over the user's collections.

    Args:
        device: Device key/value store, always present
        account: Account store; remote is used only with a user id
        user_id: Signed-in user, or None
        cache: Snapshot cache shared with display code
    """

    def __init__(
        self,
        device: DeviceStore,
        account: AccountStore | None = None,
        user_id: str | None = None,
        cache: CollectionSnapshotCache | None = None,
    ) -> None:
        self._device = device
        self._account = account
        self._user_id = user_id
        self.cache = cache or CollectionSnapshotCache()
        self.binder_order = BinderOrderStore(device, account, user_id)
        # Stored documents from the last load that did not validate
        self._unparsed: list[dict[str, Any]] = []

    # --- Loading ---

    async def load(self) -> list[Collection]:
        """
        Load all collections. Never raises.

        With a remote configured, the first load that finds the account
        empty while the device has collections migrates them (and the
        device binder order) to the account. Device data is left in place
        and a per-account marker on the device stops a later empty account
        (every binder deleted) from being migrated again.
        """
        self.cache.invalidate()
        self._unparsed = []
        if self._account is not None and self._user_id:
            try:
                return await self._load_remote(self._account, self._user_id)
            except Exception as e:
                logger.warning(
                    "Loading collections for %s failed, using device data: %s",
                    self._user_id,
                    e,
                    exc_info=True,
                )
        return await self._load_local()

    async def _load_remote(self, account: AccountStore, user_id: str) -> list[Collection]:
        documents = await account.load_collections(user_id)
        if documents:
            collections, self._unparsed = split_collections(documents)
            return collections
        if await self._migrated(user_id):
            return []

        local = await self._load_local()
        if not local:
            self._unparsed = []
            return []

        logger.info("Migrating %d device collections to account %s", len(local), user_id)
        await account.save_collections(user_id, self._documents(local))
        order = await self.binder_order.get_local_order()
        if order:
            await account.save_binder_order(user_id, order)
        await self._mark_migrated(user_id)
        return local

    async def _migrated(self, user_id: str) -> bool:
        try:
            return await self._device.get_item(migration_key(user_id)) is not None
        except StorageUnavailableError as e:
            logger.warning("Migration marker unavailable for %s: %s", user_id, e.message)
            return False

    async def _mark_migrated(self, user_id: str) -> None:
        try:
            await self._device.set_item(migration_key(user_id), str(now_ms()))
        except StorageUnavailableError as e:
            logger.warning("Could not record migration for %s: %s", user_id, e.message)

    async def _load_local(self) -> list[Collection]:
        try:
            raw = await self._device.get_item(COLLECTIONS_KEY)
        except StorageUnavailableError as e:
            logger.warning("Device collections unavailable: %s", e.message)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed device collections")
            return []
        collections, self._unparsed = split_collections(data)
        return collections

    # --- Saving ---

    def _documents(self, collections: Sequence[Collection]) -> list[dict[str, Any]]:
        documents = [collection_to_document(c) for c in collections]
        ids = {c.id for c in collections}
        documents.extend(doc for doc in self._unparsed if doc.get("id") not in ids)
        return documents

    async def save(self, collections: Sequence[Collection]) -> None:
        """
        Save the full list. Falls back to the device if the remote write fails.

        Stored documents that did not validate on the last load are written
        back unchanged.
        """
        documents = self._documents(collections)
        self.cache.invalidate()
        if self._account is not None and self._user_id:
            try:
                await self._account.save_collections(self._user_id, documents)
                return
            except Exception as e:
                logger.warning(
                    "Saving collections for %s failed, writing to device: %s",
                    self._user_id,
                    e,
                    exc_info=True,
                )
        await self._device.set_item(COLLECTIONS_KEY, json.dumps(documents))

    # --- CRUD ---

    async def create(
        self,
        binder_type: BinderType | str,
        name: str,
        config: CollectionConfig | None = None,
    ) -> Collection:
        """
        Create an empty collection.

        Raises:
            BinderValidationError: Empty name, unknown type, or a set
                binder without a group id
        """
        name = _validate_name(name)
        try:
            resolved_type = BinderType(binder_type)
        except ValueError as e:
            raise BinderValidationError(f"Unknown binder type {binder_type!r}.") from e
        config = config or CollectionConfig()
        if resolved_type is BinderType.SET and not config.group_id:
            raise BinderValidationError(
                "Set binders need a group id.", kind=FailureKind.MISSING_REQUIRED
            )

        collections = await self.load()
        timestamp = now_ms()
        collection = Collection(
            id=generate_collection_id(),
            name=name,
            type=resolved_type,
            config=config,
            created_at=timestamp,
            updated_at=timestamp,
        )
        collections.append(collection)
        await self.save(collections)
        logger.info("Created collection %s", collection.to_summary())
        return collection

    async def update(
        self,
        collection_id: str,
        *,
        name: str | None = None,
        languages: Sequence[str] | None = None,
        binder_color: str | None = None,
        master_set_options: MasterSetOptions | None = None,
        edition_filter: EditionFilter | str | None = None,
        user_cards: dict[str, UserCardMeta] | None = None,
    ) -> Collection | None:
        """
        Update the editable fields of a collection.

        Returns:
            The updated collection, or None if no collection has that id.

        Raises:
            BinderValidationError: Empty name, a blank language code, or an
                unknown edition filter
        """
        if name is not None:
            name = _validate_name(name)
        if languages is not None:
            languages = _validate_languages(languages)
        if edition_filter is not None:
            edition_filter = _validate_edition_filter(edition_filter)

        collections = await self.load()
        index = next((i for i, c in enumerate(collections) if c.id == collection_id), None)
        if index is None:
            return None

        current = collections[index]
        config_changes: dict[str, Any] = {}
        if languages is not None:
            config_changes["languages"] = tuple(languages)
        if binder_color is not None:
            config_changes["binder_color"] = binder_color
        if master_set_options is not None:
            config_changes["master_set_options"] = master_set_options
        if edition_filter is not None:
            config_changes["edition_filter"] = edition_filter

        updated = replace(
            current,
            name=name if name is not None else current.name,
            config=replace(current.config, **config_changes),
            user_cards=dict(user_cards) if user_cards is not None else current.user_cards,
            updated_at=now_ms(),
        )
        collections[index] = updated
        await self.save(collections)
        return updated

    async def delete(self, collection_id: str) -> bool:
        """
        Delete a collection permanently.

        Returns:
            True if deleted, False if not found.
        """
        collections = await self.load()
        remaining = [c for c in collections if c.id != collection_id]
        if len(remaining) == len(collections):
            return False
        await self.save(remaining)
        logger.info("Deleted collection %s", collection_id)
        return True

    async def set_slot(
        self,
        collection_id: str,
        key: str,
        card: SlotCard | None,
        valid_variants: ValidVariants[CardVariant] | None = None,
    ) -> Collection | None:
        """
        Assign a card to a slot (card=None clears it).

        Upserts the slot in place; a new key is appended.

        Args:
            collection_id: Collection to change
            key: Slot key
            card: Assignment, or None to clear
            valid_variants: If given, the variant must be one of these

        Returns:
            The updated collection, or None if no collection has that id.

        Raises:
            BinderValidationError: Empty key, unknown variant, or a variant
                outside valid_variants
        """
        if not key:
            raise BinderValidationError("Slot key is required.", kind=FailureKind.MISSING_REQUIRED)
        card = _validate_slot_card(card, valid_variants)

        collections = await self.load()
        index = next((i for i, c in enumerate(collections) if c.id == collection_id), None)
        if index is None:
            return None

        current = collections[index]
        new_slot = Slot(key=key, card=card)
        slots = list(current.slots)
        existing = next((i for i, s in enumerate(slots) if s.key == key), None)
        if existing is None:
            slots.append(new_slot)
        else:
            slots[existing] = new_slot

        updated = replace(current, slots=tuple(slots), updated_at=now_ms())
        collections[index] = updated
        await self.save(collections)
        return updated

    # --- Helpers ---

    async def ensure_collect_them_all(self) -> Collection:
        """Return the collect-them-all binder, creating it if missing."""
        collections = await self.load()
        existing = next((c for c in collections if c.type is BinderType.COLLECT_THEM_ALL), None)
        if existing is not None:
            return existing
        return await self.create(
            BinderType.COLLECT_THEM_ALL,
            COLLECT_THEM_ALL_NAME,
            CollectionConfig(binder_color=COLLECT_THEM_ALL_COLOR),
        )

    async def get_in_display_order(self) -> list[Collection]:
        collections = await self.load()
        return order_collections(collections, await self.binder_order.get_order())

    async def preload_for_display(self) -> list[Collection]:
        """Load, arrange for display and prime the snapshot cache."""
        ordered = await self.get_in_display_order()
        self.cache.prime(ordered)
        logger.info("Primed collection cache with %d collections", len(ordered))
        return ordered
