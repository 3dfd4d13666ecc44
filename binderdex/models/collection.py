from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from binderdex.models.slot import CardVariant, Slot

# Names written by older releases of the app
_LEGACY_BINDER_TYPES = {
    "collect_them_all": "collect-them-all",
    "master_dex": "master-dex",
    "master_set": "master-set",
    "single_pokemon": "single-subject",
    "single_subject": "single-subject",
    "by_set": "set",
}


class BinderType(str, Enum):
    """Kind of binder. Determines the slot key scheme."""

    COLLECT_THEM_ALL = "collect-them-all"
    MASTER_DEX = "master-dex"
    MASTER_SET = "master-set"
    SINGLE_SUBJECT = "single-subject"
    SET = "set"
    CUSTOM = "custom"

    @classmethod
    def _missing_(cls, value: object) -> "BinderType | None":
        if isinstance(value, str) and value in _LEGACY_BINDER_TYPES:
            return cls(_LEGACY_BINDER_TYPES[value])
        return None

    @property
    def is_master(self) -> bool:
        """Roster-based binders: one slot per species entry."""
        return self in MASTER_TYPES

    @property
    def has_global_baseline(self) -> bool:
        """Binder types that admins can curate a shared baseline for."""
        return self in (BinderType.SINGLE_SUBJECT, BinderType.SET)


MASTER_TYPES = frozenset(
    {BinderType.COLLECT_THEM_ALL, BinderType.MASTER_DEX, BinderType.MASTER_SET}
)


class EditionFilter(str, Enum):
    """First-edition vs unlimited filter chosen when a binder is created."""

    ALL = "all"
    FIRST_EDITION_ONLY = "firstEditionOnly"
    UNLIMITED_ONLY = "unlimitedOnly"

    @classmethod
    def _missing_(cls, value: object) -> "EditionFilter | None":
        if value == "1stEditionOnly":
            return cls.FIRST_EDITION_ONLY
        return None


@dataclass(frozen=True)
class MasterSetOptions:
    """
    Expansion toggles for master-set binders.

    All enabled is a "Grandmaster" collection.

    Attributes:
        regional_forms: Add regional forms (Alolan, Galarian, ...)
        variation_groups: Selected variation family ids (e.g. "unown")
        variations: Legacy flag from before variation groups existed;
            meant "add Unown"
        megas: Add Mega Evolutions
        gmax: Add Gigantamax forms
    """

    regional_forms: bool = False
    variation_groups: tuple[str, ...] | None = None
    variations: bool = False
    megas: bool = False
    gmax: bool = False


@dataclass(frozen=True)
class CollectionConfig:
    """Type-specific configuration of a binder."""

    languages: tuple[str, ...] = ()
    edition_filter: EditionFilter = EditionFilter.ALL
    master_set_options: MasterSetOptions | None = None

    # single-subject
    subject_dex_id: int | None = None
    subject_name: str | None = None
    include_regional_forms: bool = True

    # set
    group_id: str | None = None
    group_name: str | None = None
    group_symbol: str | None = None

    # custom multi-subject
    custom_subject_ids: tuple[int, ...] = ()
    custom_subject_names: tuple[str, ...] = ()

    binder_color: str | None = None


@dataclass(frozen=True)
class UserCardMeta:
    """Metadata for a card the user defined locally (not in the catalog)."""

    name: str
    set_name: str
    local_id: str | None = None
    slot_key: str | None = None
    variant: CardVariant | None = None


@dataclass(frozen=True)
class Collection:
    """
    A binder: a named, typed set of slots.

    Instances are treated as immutable snapshots; the store produces a new
    Collection (via dataclasses.replace) for every change.

    Attributes:
        id: Unique collection id
        name: User-visible name
        type: Binder type, decides the slot key scheme
        config: Type-specific configuration
        slots: Slot list, keys unique within the collection
        user_cards: Locally defined card metadata, keyed by card id
        created_at: Creation time, epoch milliseconds
        updated_at: Last change time, epoch milliseconds
    """

    id: str
    name: str
    type: BinderType
    config: CollectionConfig = field(default_factory=CollectionConfig)
    slots: tuple[Slot, ...] = ()
    user_cards: dict[str, UserCardMeta] = field(default_factory=dict)
    created_at: int = 0
    updated_at: int = 0

    def languages_or_default(self, default: str = "en") -> tuple[str, ...]:
        return self.config.languages or (default,)

    def to_summary(self) -> dict[str, Any]:
        """Short description used in log messages."""
        return {"id": self.id, "type": self.type.value, "slots": len(self.slots)}
