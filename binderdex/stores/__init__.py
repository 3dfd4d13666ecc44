from binderdex.stores.account import SqlAccountStore
from binderdex.stores.admin import SqlAdminConfigStore
from binderdex.stores.base import (
    AccountStore,
    AdminConfigStore,
    CatalogProvider,
    DeviceStore,
    SpeciesProvider,
)
from binderdex.stores.device import SqlDeviceStore, device_key

__all__ = [
    "AccountStore",
    "AdminConfigStore",
    "CatalogProvider",
    "DeviceStore",
    "SpeciesProvider",
    "SqlAccountStore",
    "SqlAdminConfigStore",
    "SqlDeviceStore",
    "device_key",
]
