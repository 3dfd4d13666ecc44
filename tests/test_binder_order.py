"""Tests for binder display order."""

import json

from binderdex.models.collection import BinderType, Collection
from binderdex.services.binder_order import BINDER_ORDER_KEY, BinderOrderStore, order_collections


def _collection(collection_id: str, binder_type: BinderType, created_at: int) -> Collection:
    return Collection(id=collection_id, name=collection_id, type=binder_type, created_at=created_at)


SHELF = [
    _collection("custom", BinderType.CUSTOM, 1),
    _collection("set-new", BinderType.SET, 5),
    _collection("set-old", BinderType.SET, 2),
    _collection("single", BinderType.SINGLE_SUBJECT, 3),
    _collection("master", BinderType.MASTER_SET, 4),
    _collection("cta", BinderType.COLLECT_THEM_ALL, 6),
]


class TestOrderCollections:
    def test_default_grouping(self) -> None:
        """Unordered binders group by type, oldest first."""
        ordered = order_collections(SHELF, [])

        assert [c.id for c in ordered] == [
            "cta",
            "master",
            "single",
            "set-old",
            "set-new",
            "custom",
        ]

    def test_saved_order_first(self) -> None:
        """Saved ids come first; unknown and repeated ids are ignored."""
        ordered = order_collections(SHELF, ["custom", "gone", "set-new", "custom"])

        assert [c.id for c in ordered][:2] == ["custom", "set-new"]
        assert len(ordered) == len(SHELF)

    def test_reapplying_is_noop(self) -> None:
        """Saving the displayed order does not change it."""
        first = order_collections(SHELF, ["single"])
        second = order_collections(SHELF, [c.id for c in first])

        assert second == first


class TestBinderOrderStore:
    async def test_device_order(self, device) -> None:
        store = BinderOrderStore(device)

        assert await store.get_order() == []
        await store.save_order(["b", "a"])

        assert json.loads(device.items[BINDER_ORDER_KEY]) == ["b", "a"]
        assert await store.get_order() == ["b", "a"]

    async def test_account_order(self, device, account) -> None:
        store = BinderOrderStore(device, account, "user-1")

        await store.save_order(["x"])

        assert account.orders["user-1"] == ["x"]
        assert BINDER_ORDER_KEY not in device.items
        assert await store.get_order() == ["x"]

    async def test_account_failure_falls_back(self, device, account) -> None:
        """Order reads and writes use the device when the account fails."""
        account.fail = True
        store = BinderOrderStore(device, account, "user-1")

        await store.save_order(["y"])

        assert await store.get_order() == ["y"]

    async def test_malformed_device_order(self, device) -> None:
        device.items[BINDER_ORDER_KEY] = '{"not": "a list"}'
        assert await BinderOrderStore(device).get_order() == []

        device.items[BINDER_ORDER_KEY] = '["a", 3, null]'
        assert await BinderOrderStore(device).get_order() == ["a"]

    async def test_broken_device_reads_empty(self, broken_device) -> None:
        assert await BinderOrderStore(broken_device).get_order() == []
