"""Tests for building stores and services from settings."""

import pytest

from binderdex.app import open_binderdex
from binderdex.config import Settings
from binderdex.models.collection import BinderType
from binderdex.models.errors import AdminPermissionError
from binderdex.services.collection_store import COLLECTIONS_KEY


@pytest.fixture
def db_url(tmp_path):
    def _url(name: str) -> str:
        return f"sqlite+aiosqlite:///{tmp_path / name}.db"

    return _url


class TestOpenBinderDex:
    async def test_device_only(self, db_url) -> None:
        """Without account or admin URLs everything stays on the device."""
        app = await open_binderdex("uid-1", Settings(device_database_url=db_url("device")))
        try:
            assert app.account is None
            assert app.admin is None

            await app.collections.create(BinderType.CUSTOM, "Trades")

            assert await app.device.get_item(COLLECTIONS_KEY) is not None
            assert [c.name for c in await app.collections.load()] == ["Trades"]
        finally:
            await app.close()

    async def test_account_and_admin(self, db_url) -> None:
        """Matching URLs share one engine; the admin allow-list comes from settings."""
        config = Settings(
            device_database_url=db_url("device"),
            account_database_url=db_url("cloud"),
            admin_database_url=db_url("cloud"),
            admin_user_ids=["admin-1"],
        )
        app = await open_binderdex("admin-1", config)
        try:
            assert app.account is not None
            assert app.admin is not None
            assert len(app.engines) == 2

            await app.collections.create(BinderType.CUSTOM, "Cloud binder")
            assert await app.device.get_item(COLLECTIONS_KEY) is None
            assert len(await app.account.load_collections("admin-1")) == 1

            await app.admin.add_excluded_version("sv3-1", "normal")
            assert await app.admin.get_excluded_versions() == {"sv3-1|normal"}
        finally:
            await app.close()

    async def test_non_admin_cannot_write(self, db_url) -> None:
        config = Settings(
            device_database_url=db_url("device"),
            admin_database_url=db_url("admin"),
            admin_user_ids=["admin-1"],
        )
        app = await open_binderdex("uid-2", config)
        try:
            assert app.admin is not None
            with pytest.raises(AdminPermissionError):
                await app.admin.add_excluded_version("sv3-1", "normal")
        finally:
            await app.close()
