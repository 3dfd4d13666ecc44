"""
Admin config document store.

Holds the shared documents curated by admins: global slot baselines, the
excluded card versions, default card overrides and custom cards. Anyone
may read; writes are limited to the allow-list.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from binderdex.db.database import session_scope
from binderdex.db.operations import get_config_document, set_config_document
from binderdex.models.errors import AdminPermissionError, StorageUnavailableError

logger = logging.getLogger(__name__)

# Document holding the allow-list maintained from within the app
ADMINS_DOCUMENT = "admins"


class SqlAdminConfigStore:
    """
    AdminConfigStore implementation over an async SQLAlchemy session factory.

    The write allow-list is the union of the statically configured ids and
    the "uids" list of the admins document.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        actor_id: str | None = None,
        admin_user_ids: Iterable[str] = (),
    ) -> None:
        self._session_factory = session_factory
        self._actor_id = actor_id
        self._admin_user_ids = frozenset(admin_user_ids)

    async def get_document(self, name: str) -> dict[str, Any] | None:
        try:
            async with session_scope(self._session_factory) as session:
                return await get_config_document(session, name)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Admin config", detail=str(e)) from e

    async def is_admin(self) -> bool:
        """Check whether the current actor may write admin documents."""
        if not self._actor_id:
            return False
        if self._actor_id in self._admin_user_ids:
            return True
        admins = await self.get_document(ADMINS_DOCUMENT) or {}
        uids = admins.get("uids")
        return isinstance(uids, list) and self._actor_id in uids

    async def set_document(self, name: str, data: dict[str, Any]) -> None:
        if not await self.is_admin():
            logger.warning("Refused admin write to %s by %r", name, self._actor_id)
            raise AdminPermissionError(self._actor_id, name)
        try:
            async with session_scope(self._session_factory) as session:
                await set_config_document(session, name, data)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Admin config", detail=str(e)) from e
