"""Per-account cloud store for collection documents and binder order."""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from binderdex.db.database import session_scope
from binderdex.db.operations import (
    get_account_binder_order,
    get_account_collections,
    replace_account_collections,
    set_account_binder_order,
)
from binderdex.models.errors import StorageUnavailableError


class SqlAccountStore:
    """
    AccountStore implementation over an async SQLAlchemy session factory.

    Collections are stored one document per row; saving replaces the full
    set for the account (rows for deleted collections are removed).
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load_collections(self, user_id: str) -> list[dict[str, Any]]:
        try:
            async with session_scope(self._session_factory) as session:
                return await get_account_collections(session, user_id)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Account", detail=str(e)) from e

    async def save_collections(self, user_id: str, documents: list[dict[str, Any]]) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                await replace_account_collections(session, user_id, documents)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Account", detail=str(e)) from e

    async def load_binder_order(self, user_id: str) -> list[str]:
        try:
            async with session_scope(self._session_factory) as session:
                order = await get_account_binder_order(session, user_id)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Account", detail=str(e)) from e
        if order is None:
            return []
        return [item for item in order if isinstance(item, str)]

    async def save_binder_order(self, user_id: str, order: list[str]) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                await set_account_binder_order(session, user_id, order)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Account", detail=str(e)) from e
