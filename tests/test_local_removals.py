"""Tests for per-device slot removals and the snapshot cache."""

from binderdex.models.collection import BinderType, Collection
from binderdex.models.errors import StorageUnavailableError
from binderdex.services.local_removals import LocalRemovalStore, removals_key
from binderdex.services.snapshot_cache import CollectionSnapshotCache


class FlakyReadDevice:
    """Device store whose reads can be switched off while writes still work."""

    def __init__(self) -> None:
        self.items: dict[str, str] = {}
        self.fail_reads = False

    async def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageUnavailableError("Device", detail="busy")
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    async def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class TestLocalRemovalStore:
    async def test_add_and_get(self, device) -> None:
        store = LocalRemovalStore(device)

        await store.add("c1", "sv3-1-normal")
        await store.add("c1", "sv3-1-normal")
        await store.add("c1", "25")

        assert await store.get("c1") == {"sv3-1-normal", "25"}
        assert await store.get("c2") == frozenset()

    async def test_stored_per_collection(self, device) -> None:
        await LocalRemovalStore(device).add("c1", "a")

        assert removals_key("c1") == "@binderdex/localRemoved/c1"
        assert device.items[removals_key("c1")] == '["a"]'

    async def test_remove_and_clear(self, device) -> None:
        store = LocalRemovalStore(device)
        await store.add("c1", "a")
        await store.add("c1", "b")

        await store.remove("c1", "a")
        assert await store.get("c1") == {"b"}

        await store.clear("c1")
        assert removals_key("c1") not in device.items

    async def test_blank_ids_ignored(self, device) -> None:
        store = LocalRemovalStore(device)

        await store.add("", "a")
        await store.add("c1", "")

        assert device.items == {}
        assert await store.get("") == frozenset()

    async def test_read_problems_are_empty(self, device, broken_device) -> None:
        """Malformed or unreachable data reads as no removals."""
        device.items[removals_key("c1")] = "nope"
        device.items[removals_key("c2")] = '{"a": 1}'

        assert await LocalRemovalStore(device).get("c1") == frozenset()
        assert await LocalRemovalStore(device).get("c2") == frozenset()
        assert await LocalRemovalStore(broken_device).get("c1") == frozenset()

    async def test_add_skipped_when_read_fails(self) -> None:
        """A failed read never overwrites the stored removals."""
        device = FlakyReadDevice()
        store = LocalRemovalStore(device)
        await store.add("c1", "a")

        device.fail_reads = True
        await store.add("c1", "b")
        await store.remove("c1", "a")

        device.fail_reads = False
        assert await store.get("c1") == {"a"}


class TestSnapshotCache:
    def test_unprimed(self) -> None:
        cache = CollectionSnapshotCache()

        assert cache.get() is None
        assert cache.find("x") is None
        assert cache.primed is False

    def test_prime_and_invalidate(self) -> None:
        cache = CollectionSnapshotCache()
        collection = Collection(id="c1", name="One", type=BinderType.CUSTOM)

        cache.prime([collection])
        assert cache.get() == [collection]
        assert cache.find("c1") == collection
        assert cache.find("c2") is None

        cache.invalidate()
        assert cache.get() is None

    def test_returned_list_is_a_copy(self) -> None:
        cache = CollectionSnapshotCache()
        cache.prime([])

        snapshot = cache.get()
        assert snapshot is not None
        snapshot.append(Collection(id="x", name="x", type=BinderType.SET))

        assert cache.get() == []
