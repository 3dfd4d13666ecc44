"""Device-local key/value store backed by a local SQLite database."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from binderdex.db.database import session_scope
from binderdex.db.operations import delete_device_item, get_device_item, set_device_item
from binderdex.models.errors import StorageUnavailableError

# Key namespace shared by every value this package writes to the device
KEY_PREFIX = "@binderdex/"


def device_key(name: str) -> str:
    return f"{KEY_PREFIX}{name}"


class SqlDeviceStore:
    """
    DeviceStore implementation over an async SQLAlchemy session factory.

    Values are opaque strings (JSON written by the callers).
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_item(self, key: str) -> str | None:
        try:
            async with session_scope(self._session_factory) as session:
                return await get_device_item(session, key)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Device", detail=str(e)) from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                await set_device_item(session, key, value)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Device", detail=str(e)) from e

    async def remove_item(self, key: str) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                await delete_device_item(session, key)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Device", detail=str(e)) from e
