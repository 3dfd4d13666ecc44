"""
Database CRUD operations.

Provides async functions for reading and replacing device items, account
collection documents, binder order and admin config documents.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from binderdex.models.db import (
    AccountBinderOrderDB,
    AccountCollectionDB,
    ConfigDocumentDB,
    DeviceItemDB,
)

# --- Device Items ---


async def get_device_item(session: AsyncSession, key: str) -> str | None:
    """
    Get a device item value by key.

    Returns None if the key has never been written.
    """
    item = await session.get(DeviceItemDB, key)
    return item.value if item else None


async def set_device_item(session: AsyncSession, key: str, value: str) -> DeviceItemDB:
    """Insert or replace a device item."""
    item = await session.get(DeviceItemDB, key)
    if item:
        item.value = value
    else:
        item = DeviceItemDB(key=key, value=value)
        session.add(item)
    await session.flush()
    return item


async def delete_device_item(session: AsyncSession, key: str) -> bool:
    """
    Delete a device item.

    Returns True if deleted, False if not found.
    """
    item = await session.get(DeviceItemDB, key)
    if not item:
        return False
    await session.delete(item)
    return True


# --- Account Collections ---


async def get_account_collections(session: AsyncSession, user_id: str) -> list[dict[str, Any]]:
    """Get every collection document stored for an account, oldest row first."""
    result = await session.execute(
        select(AccountCollectionDB)
        .where(AccountCollectionDB.user_id == user_id)
        .order_by(AccountCollectionDB.id)
    )
    return [row.document for row in result.scalars().all()]


async def replace_account_collections(
    session: AsyncSession,
    user_id: str,
    documents: list[dict[str, Any]],
) -> int:
    """
    Replace an account's collection documents.

    Upserts every document by its "id" and deletes rows whose collection is
    no longer in the list.

    Returns:
        Number of rows deleted.
    """
    result = await session.execute(
        select(AccountCollectionDB).where(AccountCollectionDB.user_id == user_id)
    )
    existing = {row.collection_id: row for row in result.scalars().all()}

    keep: set[str] = set()
    for document in documents:
        collection_id = str(document["id"])
        keep.add(collection_id)
        row = existing.get(collection_id)
        if row:
            row.document = document
        else:
            session.add(
                AccountCollectionDB(
                    user_id=user_id, collection_id=collection_id, document=document
                )
            )

    removed = [cid for cid in existing if cid not in keep]
    if removed:
        await session.execute(
            delete(AccountCollectionDB).where(
                AccountCollectionDB.user_id == user_id,
                AccountCollectionDB.collection_id.in_(removed),
            )
        )
    await session.flush()
    return len(removed)


# --- Binder Order ---


async def get_account_binder_order(session: AsyncSession, user_id: str) -> list[str] | None:
    """Get the saved binder order for an account, or None if never saved."""
    row = await session.get(AccountBinderOrderDB, user_id)
    return list(row.order) if row else None


async def set_account_binder_order(
    session: AsyncSession, user_id: str, order: list[str]
) -> AccountBinderOrderDB:
    """Insert or replace an account's binder order."""
    row = await session.get(AccountBinderOrderDB, user_id)
    if row:
        row.order = list(order)
    else:
        row = AccountBinderOrderDB(user_id=user_id, order=list(order))
        session.add(row)
    await session.flush()
    return row


# --- Config Documents ---


async def get_config_document(session: AsyncSession, name: str) -> dict[str, Any] | None:
    """Get an admin config document by name."""
    row = await session.get(ConfigDocumentDB, name)
    return dict(row.data) if row else None


async def set_config_document(
    session: AsyncSession, name: str, data: dict[str, Any]
) -> ConfigDocumentDB:
    """
    Insert or replace an admin config document.

    Overwrites the whole document.
    """
    row = await session.get(ConfigDocumentDB, name)
    if row:
        row.data = data
    else:
        row = ConfigDocumentDB(name=name, data=data)
        session.add(row)
    await session.flush()
    return row
