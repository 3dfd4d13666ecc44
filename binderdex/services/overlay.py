"""
Effective slot state.

What a binder shows is not the raw stored slots. Three hide layers with
different scopes sit on top of them:

1. Admin baseline (single-subject and set binders): the shared curated
   slots replace the user's own, except slots the user added themselves
2. Local removals: keys hidden on this device only
3. Exclusions: printing+finish versions hidden for everyone

Rendering and progress counting both use the result. Nothing here writes.
"""

from collections.abc import Collection as KeySet
from collections.abc import Iterable, Sequence

from binderdex.models.collection import BinderType, Collection
from binderdex.models.slot import Slot
from binderdex.services.admin_config import AdminConfigService
from binderdex.services.local_removals import LocalRemovalStore
from binderdex.slots.addressing import (
    card_version_key,
    group_binder_key,
    is_user_added_slot,
    subject_binder_key,
)


def resolve_effective_slots(
    own_slots: Sequence[Slot],
    baseline: Sequence[Slot] | None = None,
    local_removals: KeySet[str] = (),
    exclusions: KeySet[str] = (),
) -> list[Slot]:
    """
    Apply the hide layers to a binder's slots.

    Args:
        own_slots: The collection's stored slots
        baseline: Admin baseline for this binder, if any
        local_removals: Slot keys hidden on this device
        exclusions: "cardId|variant" keys hidden for everyone

    Returns:
        Effective slots. A hidden slot keeps its key with card=None.
    """
    if baseline is not None:
        slots = [*baseline, *(s for s in own_slots if is_user_added_slot(s))]
    else:
        slots = list(own_slots)

    effective: list[Slot] = []
    for slot in slots:
        if slot.card is not None and (
            slot.key in local_removals
            or card_version_key(slot.card.card_id, slot.card.variant) in exclusions
        ):
            effective.append(Slot(key=slot.key, card=None))
        else:
            effective.append(slot)
    return effective


def count_filled(slots: Iterable[Slot]) -> int:
    return sum(1 for slot in slots if slot.filled)


def admin_binder_key(collection: Collection) -> str | None:
    """Key of the admin baseline for a collection, if its type has one."""
    if not collection.type.has_global_baseline:
        return None
    cfg = collection.config
    if collection.type is BinderType.SET:
        return group_binder_key(cfg.group_id) if cfg.group_id else None
    return subject_binder_key(cfg.subject_name) if cfg.subject_name else None


async def load_effective_slots(
    collection: Collection,
    admin: AdminConfigService | None = None,
    removals: LocalRemovalStore | None = None,
) -> list[Slot]:
    """
    Fetch the hide layers for a collection and resolve its effective slots.

    Collaborator reads never raise; a missing layer is treated as empty.
    """
    baseline = None
    exclusions: frozenset[str] = frozenset()
    if admin is not None:
        binder_key = admin_binder_key(collection)
        if binder_key is not None:
            baseline = await admin.get_global_slots(binder_key)
        exclusions = await admin.get_excluded_versions()

    local_removals = await removals.get(collection.id) if removals is not None else frozenset()
    return resolve_effective_slots(collection.slots, baseline, local_removals, exclusions)
