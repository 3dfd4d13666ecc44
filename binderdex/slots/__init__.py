from binderdex.slots.addressing import (
    card_slot_key,
    card_version_key,
    custom_multi_slot_key,
    generate_user_slot_key,
    group_binder_key,
    is_user_added_slot,
    is_user_slot_key,
    resolve_slot_card,
    roster_entry_key,
    single_subject_slot_key,
    slugify,
    species_slot_key,
    subject_binder_key,
)

__all__ = [
    "card_slot_key",
    "card_version_key",
    "custom_multi_slot_key",
    "generate_user_slot_key",
    "group_binder_key",
    "is_user_added_slot",
    "is_user_slot_key",
    "resolve_slot_card",
    "roster_entry_key",
    "single_subject_slot_key",
    "slugify",
    "species_slot_key",
    "subject_binder_key",
]
