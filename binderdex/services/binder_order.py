"""
Binder display order.

The user's chosen order of binders on the shelf is a list of collection
ids, stored in the account when one is configured and on the device
otherwise. Reads never raise.
"""

import json
import logging
from collections.abc import Iterable, Sequence

from binderdex.models.collection import BinderType, Collection
from binderdex.models.errors import StorageUnavailableError
from binderdex.stores.base import AccountStore, DeviceStore
from binderdex.stores.device import device_key

logger = logging.getLogger(__name__)

BINDER_ORDER_KEY = device_key("binderOrder")

# Default shelf grouping for binders missing from the saved order
_TYPE_CATEGORY = {
    BinderType.COLLECT_THEM_ALL: 0,
    BinderType.MASTER_DEX: 1,
    BinderType.MASTER_SET: 1,
    BinderType.SINGLE_SUBJECT: 2,
    BinderType.SET: 3,
    BinderType.CUSTOM: 4,
}


def _string_ids(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class BinderOrderStore:
    """Reads and writes the saved binder order."""

    def __init__(
        self,
        device: DeviceStore,
        account: AccountStore | None = None,
        user_id: str | None = None,
    ) -> None:
        self._device = device
        self._account = account
        self._user_id = user_id

    async def get_order(self) -> list[str]:
        """Saved order, from the account when configured. Empty if never saved."""
        if self._account is not None and self._user_id:
            try:
                return _string_ids(await self._account.load_binder_order(self._user_id))
            except Exception as e:
                logger.warning("Falling back to device binder order: %s", e, exc_info=True)
        return await self.get_local_order()

    async def get_local_order(self) -> list[str]:
        try:
            raw = await self._device.get_item(BINDER_ORDER_KEY)
        except StorageUnavailableError as e:
            logger.warning("Device binder order unavailable: %s", e.message)
            return []
        if not raw:
            return []
        try:
            return _string_ids(json.loads(raw))
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed device binder order")
            return []

    async def save_order(self, order: Sequence[str]) -> None:
        """Save the order. Falls back to the device if the account write fails."""
        ids = list(order)
        if self._account is not None and self._user_id:
            try:
                await self._account.save_binder_order(self._user_id, ids)
                return
            except Exception as e:
                logger.warning("Saving binder order to device instead: %s", e, exc_info=True)
        await self._device.set_item(BINDER_ORDER_KEY, json.dumps(ids))


def order_collections(
    collections: Iterable[Collection], saved_order: Sequence[str]
) -> list[Collection]:
    """
    Arrange collections for display.

    Collections named in the saved order come first, in that order; unknown
    ids are ignored. The rest follow grouped by type (collect-them-all,
    other master binders, single-subject, set, custom), oldest first within
    a group. Applying the result's ids as the new saved order is a no-op.
    """
    by_id = {c.id: c for c in collections}

    ordered: list[Collection] = []
    seen: set[str] = set()
    for collection_id in saved_order:
        collection = by_id.get(collection_id)
        if collection is not None and collection_id not in seen:
            ordered.append(collection)
            seen.add(collection_id)

    rest = [c for c in by_id.values() if c.id not in seen]
    rest.sort(key=lambda c: (_TYPE_CATEGORY[c.type], c.created_at))
    return ordered + rest
