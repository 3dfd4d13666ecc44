from binderdex.db.database import (
    create_engine,
    create_session_factory,
    drop_db,
    init_db,
    session_scope,
)
from binderdex.db.operations import (
    delete_device_item,
    get_account_binder_order,
    get_account_collections,
    get_config_document,
    get_device_item,
    replace_account_collections,
    set_account_binder_order,
    set_config_document,
    set_device_item,
)

__all__ = [
    "create_engine",
    "create_session_factory",
    "delete_device_item",
    "drop_db",
    "get_account_binder_order",
    "get_account_collections",
    "get_config_document",
    "get_device_item",
    "init_db",
    "replace_account_collections",
    "session_scope",
    "set_account_binder_order",
    "set_config_document",
    "set_device_item",
]
