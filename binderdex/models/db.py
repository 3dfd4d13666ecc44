"""
SQLAlchemy ORM models for persistent storage.

Each storage collaborator owns one or two tables. Collections and admin
config are kept as whole JSON documents: every write replaces the document,
last writer wins.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DeviceItemDB(Base):
    """
    One key/value entry of the device-local store.

    Unscoped: holds data written before sign-in as well as per-device state
    such as locally removed slots.
    """

    __tablename__ = "device_items"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<DeviceItemDB(key={self.key})>"


class AccountCollectionDB(Base):
    """
    A collection document stored for one account.

    The document column holds the full camelCase collection document.
    """

    __tablename__ = "account_collections"
    __table_args__ = (UniqueConstraint("user_id", "collection_id", name="uq_account_collection"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    collection_id: Mapped[str] = mapped_column(String(255))
    document: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<AccountCollectionDB(user_id={self.user_id}, collection_id={self.collection_id})>"


class AccountBinderOrderDB(Base):
    """Binder display order (list of collection ids) for one account."""

    __tablename__ = "account_binder_orders"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    order: Mapped[list[str]] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<AccountBinderOrderDB(user_id={self.user_id}, size={len(self.order)})>"


class ConfigDocumentDB(Base):
    """
    A shared admin config document.

    Names in use: globalBinderSlots, excludedCardVersions, binderDefaults,
    customCards, admins.
    """

    __tablename__ = "config_documents"

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<ConfigDocumentDB(name={self.name})>"
