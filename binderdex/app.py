"""
Wiring from settings to stores and services.

Opens one engine per configured database URL (URLs that match share an
engine), creates the tables and hands back the collaborators the services
need. An empty account URL means no remote: collections stay on the
device. An empty admin URL means no admin layer.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from binderdex.config import Settings, settings
from binderdex.db.database import create_engine, create_session_factory, init_db
from binderdex.services.admin_config import AdminConfigService
from binderdex.services.collection_store import CollectionStore
from binderdex.services.local_removals import LocalRemovalStore
from binderdex.stores.account import SqlAccountStore
from binderdex.stores.admin import SqlAdminConfigStore
from binderdex.stores.device import SqlDeviceStore

logger = logging.getLogger(__name__)


@dataclass
class BinderDex:
    """Configured stores and services for one signed-in (or anonymous) user."""

    device: SqlDeviceStore
    collections: CollectionStore
    removals: LocalRemovalStore
    account: SqlAccountStore | None = None
    admin: AdminConfigService | None = None
    engines: list[AsyncEngine] = field(default_factory=list)

    async def close(self) -> None:
        for engine in self.engines:
            await engine.dispose()


async def open_binderdex(
    user_id: str | None = None, config: Settings | None = None
) -> BinderDex:
    """
    Build the stores and services from settings.

    Args:
        user_id: Signed-in user, or None. Also the actor for admin writes
        config: Settings to use. Defaults to the environment settings
    """
    config = config or settings
    engines: dict[str, AsyncEngine] = {}

    async def _session_factory(url: str) -> async_sessionmaker[AsyncSession]:
        engine = engines.get(url)
        if engine is None:
            engine = create_engine(url)
            await init_db(engine)
            engines[url] = engine
        return create_session_factory(engine)

    device = SqlDeviceStore(await _session_factory(config.device_database_url))

    account = None
    if config.account_database_url:
        account = SqlAccountStore(await _session_factory(config.account_database_url))

    admin = None
    if config.admin_database_url:
        admin_store = SqlAdminConfigStore(
            await _session_factory(config.admin_database_url),
            actor_id=user_id,
            admin_user_ids=config.admin_user_ids,
        )
        admin = AdminConfigService(admin_store, ttl_seconds=config.admin_cache_ttl_seconds)

    logger.info(
        "Opened BinderDex stores (account=%s, admin=%s, user=%s)",
        account is not None,
        admin is not None,
        user_id,
    )
    return BinderDex(
        device=device,
        collections=CollectionStore(device, account, user_id),
        removals=LocalRemovalStore(device),
        account=account,
        admin=admin,
        engines=list(engines.values()),
    )
