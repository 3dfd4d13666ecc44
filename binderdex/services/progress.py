"""
Collection progress: filled vs total slots.

Filled counts the effective slots (after admin baseline, exclusions and
local removals). Total is the size of the binder's slot universe, or None
when it cannot be computed right now.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from binderdex.models.collection import BinderType, Collection
from binderdex.models.errors import CatalogError
from binderdex.services.admin_config import AdminConfigService
from binderdex.services.binder_slots import (
    build_group_slots,
    build_master_roster,
    build_single_subject_slots,
)
from binderdex.services.local_removals import LocalRemovalStore
from binderdex.services.overlay import count_filled, load_effective_slots
from binderdex.stores.base import CatalogProvider, SpeciesProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionProgress:
    filled: int
    total: int | None

    @property
    def complete(self) -> bool:
        return self.total is not None and self.total > 0 and self.filled >= self.total


async def _total_slots(
    collection: Collection,
    catalog: CatalogProvider,
    species: SpeciesProvider,
    admin: AdminConfigService | None,
) -> int | None:
    try:
        if collection.type is BinderType.SET:
            return len(await build_group_slots(catalog, collection))
        if collection.type.is_master:
            return len(await build_master_roster(species, admin, collection))
        if collection.type is BinderType.SINGLE_SUBJECT:
            return len(await build_single_subject_slots(catalog, species, collection))
    except CatalogError as e:
        logger.warning("Total unavailable for %s: %s", collection.id, e.message)
        return None
    if collection.type is BinderType.CUSTOM:
        return len(collection.slots)
    return None


async def get_collection_progress(
    collection: Collection,
    catalog: CatalogProvider,
    species: SpeciesProvider,
    admin: AdminConfigService | None = None,
    removals: LocalRemovalStore | None = None,
) -> CollectionProgress:
    """Filled and total slot counts of one collection."""
    effective = await load_effective_slots(collection, admin, removals)
    total = await _total_slots(collection, catalog, species, admin)
    return CollectionProgress(filled=count_filled(effective), total=total)


async def get_progress_for_all(
    collections: Iterable[Collection],
    catalog: CatalogProvider,
    species: SpeciesProvider,
    admin: AdminConfigService | None = None,
    removals: LocalRemovalStore | None = None,
) -> dict[str, CollectionProgress]:
    """
    Progress of every collection, keyed by collection id.

    Results are gathered locally and returned together; a cancelled scan
    leaves nothing half-published.
    """
    results: dict[str, CollectionProgress] = {}
    for collection in collections:
        results[collection.id] = await get_collection_progress(
            collection, catalog, species, admin, removals
        )
    return results
