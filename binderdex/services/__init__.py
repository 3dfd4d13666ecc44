"""
BinderDex services.

Slot universe, variant resolution, persistence and effective-state logic.
"""

from binderdex.services.admin_config import AdminConfigService
from binderdex.services.binder_order import BinderOrderStore, order_collections
from binderdex.services.binder_slots import (
    PrintingSlot,
    build_group_slots,
    build_master_roster,
    build_single_subject_slots,
)
from binderdex.services.catalog import CatalogClient
from binderdex.services.collection_display import display_name, is_grandmaster, subtitle
from binderdex.services.collection_store import CollectionStore, get_slot, get_slot_card
from binderdex.services.local_removals import LocalRemovalStore
from binderdex.services.overlay import (
    count_filled,
    load_effective_slots,
    resolve_effective_slots,
)
from binderdex.services.progress import (
    CollectionProgress,
    get_collection_progress,
    get_progress_for_all,
)
from binderdex.services.snapshot_cache import CollectionSnapshotCache
from binderdex.services.species import SpeciesClient
from binderdex.services.species_expansion import (
    VARIATION_GROUPS,
    expand_roster,
    merge_roster,
    search_name_for,
)
from binderdex.services.variant_resolver import (
    display_variant,
    filter_variants_by_edition,
    filter_variants_by_group_counts,
    filter_variants_by_release_date,
    get_display_variants,
    resolve_printing_variants,
    resolve_variants,
    variant_label,
)

__all__ = [
    "VARIATION_GROUPS",
    "AdminConfigService",
    "BinderOrderStore",
    "CatalogClient",
    "CollectionProgress",
    "CollectionSnapshotCache",
    "CollectionStore",
    "LocalRemovalStore",
    "PrintingSlot",
    "SpeciesClient",
    "build_group_slots",
    "build_master_roster",
    "build_single_subject_slots",
    "count_filled",
    "display_name",
    "display_variant",
    "expand_roster",
    "filter_variants_by_edition",
    "filter_variants_by_group_counts",
    "filter_variants_by_release_date",
    "get_collection_progress",
    "get_display_variants",
    "get_progress_for_all",
    "get_slot",
    "get_slot_card",
    "is_grandmaster",
    "load_effective_slots",
    "merge_roster",
    "order_collections",
    "resolve_effective_slots",
    "resolve_printing_variants",
    "resolve_variants",
    "search_name_for",
    "subtitle",
    "variant_label",
]
