"""
Per-device slot removals.

A user can hide a slot's card on this device only (for example a card the
admin baseline marks as collected that the user does not own). Removals
are stored per collection in the device store and never synced.
"""

import json
import logging

from binderdex.models.errors import StorageUnavailableError
from binderdex.stores.base import DeviceStore
from binderdex.stores.device import device_key

logger = logging.getLogger(__name__)


def removals_key(collection_id: str) -> str:
    return device_key(f"localRemoved/{collection_id}")


class LocalRemovalStore:
    """Slot keys hidden on this device, per collection."""

    def __init__(self, device: DeviceStore) -> None:
        self._device = device

    async def get(self, collection_id: str) -> frozenset[str]:
        """Removed keys for a collection. Empty on any read problem."""
        if not collection_id:
            return frozenset()
        keys = await self._read(collection_id)
        return keys if keys is not None else frozenset()

    async def _read(self, collection_id: str) -> frozenset[str] | None:
        """Stored keys, or None if the device store cannot be read."""
        try:
            raw = await self._device.get_item(removals_key(collection_id))
        except StorageUnavailableError as e:
            logger.warning("Local removals unavailable for %s: %s", collection_id, e.message)
            return None
        if not raw:
            return frozenset()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed local removals for %s", collection_id)
            return frozenset()
        if not isinstance(data, list):
            return frozenset()
        return frozenset(k for k in data if isinstance(k, str))

    async def add(self, collection_id: str, slot_key: str) -> None:
        """Hide a slot. Skipped when the stored keys cannot be read."""
        if not collection_id or not slot_key:
            return
        keys = await self._read(collection_id)
        if keys is None or slot_key in keys:
            return
        await self._write(collection_id, keys | {slot_key})

    async def remove(self, collection_id: str, slot_key: str) -> None:
        """Undo a removal."""
        if not collection_id or not slot_key:
            return
        keys = await self._read(collection_id)
        if keys is None or slot_key not in keys:
            return
        await self._write(collection_id, keys - {slot_key})

    async def clear(self, collection_id: str) -> None:
        if collection_id:
            await self._device.remove_item(removals_key(collection_id))

    async def _write(self, collection_id: str, keys: frozenset[str]) -> None:
        await self._device.set_item(removals_key(collection_id), json.dumps(sorted(keys)))
