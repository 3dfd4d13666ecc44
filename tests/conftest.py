from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from binderdex.db.database import create_session_factory, drop_db, init_db
from binderdex.models.catalog import GroupInfo, Printing, PrintingBrief
from binderdex.models.errors import AdminPermissionError, CatalogError, StorageUnavailableError
from binderdex.models.roster import SpeciesEntry


class MemoryDeviceStore:
    """Dict-backed device store."""

    def __init__(self) -> None:
        self.items: dict[str, str] = {}

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    async def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class BrokenDeviceStore:
    """Device store whose backend is gone."""

    async def get_item(self, key: str) -> str | None:
        raise StorageUnavailableError("Device", detail="disk gone")

    async def set_item(self, key: str, value: str) -> None:
        raise StorageUnavailableError("Device", detail="disk gone")

    async def remove_item(self, key: str) -> None:
        raise StorageUnavailableError("Device", detail="disk gone")


class MemoryAccountStore:
    """Dict-backed account store, with a switch to make every call fail."""

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.orders: dict[str, list[str]] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise StorageUnavailableError("Account", detail="offline")

    async def load_collections(self, user_id: str) -> list[dict[str, Any]]:
        self._check()
        return list(self.collections.get(user_id, []))

    async def save_collections(self, user_id: str, documents: list[dict[str, Any]]) -> None:
        self._check()
        self.collections[user_id] = list(documents)

    async def load_binder_order(self, user_id: str) -> list[str]:
        self._check()
        return list(self.orders.get(user_id, []))

    async def save_binder_order(self, user_id: str, order: list[str]) -> None:
        self._check()
        self.orders[user_id] = list(order)


class MemoryAdminStore:
    """Dict-backed admin config store that counts reads."""

    def __init__(self, writable: bool = True) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.writable = writable
        self.fail_reads = False
        self.reads = 0

    async def get_document(self, name: str) -> dict[str, Any] | None:
        self.reads += 1
        if self.fail_reads:
            raise StorageUnavailableError("Admin config", detail="offline")
        doc = self.documents.get(name)
        return dict(doc) if doc is not None else None

    async def set_document(self, name: str, data: dict[str, Any]) -> None:
        if not self.writable:
            raise AdminPermissionError("someone", name)
        self.documents[name] = dict(data)


class FakeCatalog:
    """In-memory catalog keyed by (lang, id)."""

    def __init__(self) -> None:
        self.groups: dict[tuple[str, str], GroupInfo] = {}
        self.printings: dict[tuple[str, str], Printing] = {}
        self.searches: dict[tuple[str, str, bool], list[PrintingBrief]] = {}
        self.failing_languages: set[str] = set()

    def _check(self, lang: str) -> None:
        if lang in self.failing_languages:
            raise CatalogError("Catalog request failed: HTTP 503", detail=lang)

    async def search_by_name(
        self, lang: str, name: str, exact: bool = False
    ) -> list[PrintingBrief]:
        self._check(lang)
        return list(self.searches.get((lang, name, exact), []))

    async def get_printing(self, lang: str, card_id: str) -> Printing:
        self._check(lang)
        printing = self.printings.get((lang, card_id))
        if printing is None:
            raise CatalogError("Catalog request failed: HTTP 404", detail=card_id)
        return printing

    async def get_group(self, lang: str, group_id: str) -> GroupInfo:
        self._check(lang)
        group = self.groups.get((lang, group_id))
        if group is None:
            raise CatalogError("Catalog request failed: HTTP 404", detail=group_id)
        return group


class FakeSpecies:
    """Fixed base roster with optional localized names."""

    def __init__(self, roster: list[SpeciesEntry] | None = None) -> None:
        self.roster = roster or [
            SpeciesEntry(dex_id=1, name="Bulbasaur"),
            SpeciesEntry(dex_id=25, name="Pikachu"),
            SpeciesEntry(dex_id=201, name="Unown"),
        ]
        self.names: dict[tuple[int, str], str] = {}
        self.fail = False

    async def get_base_roster(self) -> list[SpeciesEntry]:
        if self.fail:
            raise CatalogError("Species request failed: HTTP 500")
        return list(self.roster)

    async def get_localized_name(self, dex_id: int, lang: str) -> str | None:
        return self.names.get((dex_id, lang))


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine shared by every session."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await drop_db(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(async_engine)


@pytest.fixture
async def session(session_factory):
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def device() -> MemoryDeviceStore:
    return MemoryDeviceStore()


@pytest.fixture
def account() -> MemoryAccountStore:
    return MemoryAccountStore()


@pytest.fixture
def admin_store() -> MemoryAdminStore:
    return MemoryAdminStore()


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def species() -> FakeSpecies:
    return FakeSpecies()


@pytest.fixture
def broken_device() -> BrokenDeviceStore:
    return BrokenDeviceStore()
