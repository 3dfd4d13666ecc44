"""Tests for the admin config service."""

import pytest

from binderdex.models.admin import CustomCard, FinishFlags
from binderdex.models.errors import AdminPermissionError, BinderValidationError, FailureKind
from binderdex.models.slot import CardVariant, Slot, SlotCard
from binderdex.services.admin_config import AdminConfigService


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _card(card_id: str = "c1", slot_key: str = "201-unown-new") -> CustomCard:
    return CustomCard(
        id=card_id,
        slot_key=slot_key,
        name="Unown New",
        dex_id=201,
        local_id="1",
        group_id="promo",
        group_name="Promo",
        finishes=FinishFlags(normal=True),
    )


class TestCache:
    async def test_reads_are_cached_until_ttl(self, admin_store) -> None:
        """Reads inside the TTL do not hit the store."""
        clock = FakeClock()
        service = AdminConfigService(admin_store, ttl_seconds=60, clock=clock)

        await service.get_excluded_versions()
        await service.get_excluded_versions()
        assert admin_store.reads == 1

        clock.now = 61
        await service.get_excluded_versions()
        assert admin_store.reads == 2

    async def test_invalidate(self, admin_store) -> None:
        service = AdminConfigService(admin_store, ttl_seconds=60, clock=FakeClock())
        await service.get_custom_cards()

        service.invalidate()
        await service.get_custom_cards()

        assert admin_store.reads == 2

    async def test_prime_fetches_every_document(self, admin_store) -> None:
        service = AdminConfigService(admin_store, ttl_seconds=60, clock=FakeClock())

        await service.prime()
        await service.get_global_slots("group:sv3")
        await service.get_excluded_versions()
        await service.get_default_card_overrides()
        await service.get_custom_cards()

        assert admin_store.reads == 4

    async def test_failed_read_is_empty(self, admin_store) -> None:
        """Read failures are logged and served as empty documents."""
        admin_store.fail_reads = True
        service = AdminConfigService(admin_store)

        assert await service.get_global_slots("group:sv3") is None
        assert await service.get_excluded_versions() == frozenset()
        assert await service.get_default_card_overrides() == {}
        assert await service.get_custom_cards() == []

    async def test_failed_read_not_cached(self, admin_store) -> None:
        service = AdminConfigService(admin_store, ttl_seconds=60, clock=FakeClock())
        admin_store.fail_reads = True
        await service.get_excluded_versions()

        admin_store.fail_reads = False
        admin_store.documents["excludedCardVersions"] = {"keys": ["sv3-1|normal"]}

        assert await service.get_excluded_versions() == {"sv3-1|normal"}


class TestGlobalSlots:
    async def test_set_and_get(self, admin_store) -> None:
        service = AdminConfigService(admin_store)
        slots = [Slot(key="sv3-1-normal", card=SlotCard("sv3-1", CardVariant.NORMAL)), Slot("x")]

        await service.set_global_slots("group:sv3", slots)
        await service.set_global_slots("subject:pikachu", [])

        assert await service.get_global_slots("group:sv3") == slots
        assert await service.get_global_slots("subject:pikachu") == []
        assert await service.get_global_slots("group:other") is None
        assert "updatedAt" in admin_store.documents["globalBinderSlots"]

    async def test_write_invalidates_cache(self, admin_store) -> None:
        """A write is visible to the next read inside the TTL."""
        service = AdminConfigService(admin_store, ttl_seconds=600, clock=FakeClock())
        assert await service.get_global_slots("group:sv3") is None

        await service.set_global_slots("group:sv3", [Slot("a")])

        assert await service.get_global_slots("group:sv3") == [Slot("a")]


class TestExcludedVersions:
    async def test_add_remove(self, admin_store) -> None:
        service = AdminConfigService(admin_store)

        await service.add_excluded_version("sv3-1", CardVariant.NORMAL)
        await service.add_excluded_version("sv3-1", "normal")
        await service.add_excluded_version("sv3-2", "holo")
        assert await service.get_excluded_versions() == {"sv3-1|normal", "sv3-2|holo"}
        assert admin_store.documents["excludedCardVersions"]["keys"] == [
            "sv3-1|normal",
            "sv3-2|holo",
        ]

        await service.remove_excluded_version("sv3-1", "normal")
        assert await service.get_excluded_versions() == {"sv3-2|holo"}

    async def test_non_admin_write_raises(self, admin_store) -> None:
        """Permission errors are never swallowed."""
        admin_store.writable = False
        service = AdminConfigService(admin_store)

        with pytest.raises(AdminPermissionError):
            await service.add_excluded_version("sv3-1", "normal")


class TestDefaultOverrides:
    async def test_set_and_clear(self, admin_store) -> None:
        service = AdminConfigService(admin_store)

        await service.set_default_card_override("25", " sv3-25 ")
        assert await service.get_default_card_overrides() == {"25": "sv3-25"}

        await service.set_default_card_override("25", "  ")
        assert await service.get_default_card_overrides() == {}

    async def test_replace_all(self, admin_store) -> None:
        service = AdminConfigService(admin_store)
        await service.set_default_card_override("1", "a-1")

        await service.set_default_card_overrides({"2": "b-2"})

        assert await service.get_default_card_overrides() == {"2": "b-2"}


class TestCustomCards:
    async def test_add_stamps_created_at(self, admin_store) -> None:
        service = AdminConfigService(admin_store)

        added = await service.add_custom_card(_card())

        assert added.created_at is not None
        assert await service.get_custom_cards() == [added]

    async def test_duplicate_rejected(self, admin_store) -> None:
        """Ids and slot keys are unique across custom cards."""
        service = AdminConfigService(admin_store)
        await service.add_custom_card(_card())

        with pytest.raises(BinderValidationError) as exc_info:
            await service.add_custom_card(_card(card_id="c2"))
        assert exc_info.value.kind == FailureKind.DUPLICATE

        with pytest.raises(BinderValidationError):
            await service.add_custom_card(_card(slot_key="201-other"))

    async def test_missing_fields_rejected(self, admin_store) -> None:
        service = AdminConfigService(admin_store)

        with pytest.raises(BinderValidationError) as exc_info:
            await service.add_custom_card(_card(slot_key=" "))

        assert exc_info.value.kind == FailureKind.MISSING_REQUIRED
        assert "customCards" not in admin_store.documents

    async def test_update(self, admin_store) -> None:
        service = AdminConfigService(admin_store)
        await service.add_custom_card(_card())
        await service.add_custom_card(_card(card_id="c2", slot_key="201-b"))

        updated = await service.update_custom_card("c1", name="Unown Renamed", local_id="7")

        assert updated is not None
        assert updated.name == "Unown Renamed"
        assert (await service.get_custom_cards())[0] == updated
        assert await service.update_custom_card("missing", name="x") is None

        with pytest.raises(BinderValidationError):
            await service.update_custom_card("c1", slot_key="201-b")
        with pytest.raises(BinderValidationError):
            await service.update_custom_card("c1", id="c9")

    async def test_remove(self, admin_store) -> None:
        service = AdminConfigService(admin_store)
        await service.add_custom_card(_card())

        assert await service.remove_custom_card("c1") is True
        assert await service.remove_custom_card("c1") is False
        assert await service.get_custom_cards() == []
