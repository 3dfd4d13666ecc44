from binderdex.models.admin import CustomCard, FinishFlags
from binderdex.models.catalog import (
    GroupFinishCounts,
    GroupInfo,
    Printing,
    PrintingBrief,
    group_id_from_card_id,
)
from binderdex.models.collection import (
    MASTER_TYPES,
    BinderType,
    Collection,
    CollectionConfig,
    EditionFilter,
    MasterSetOptions,
    UserCardMeta,
)
from binderdex.models.documents import (
    CollectionDocument,
    CustomCardDocument,
    SlotDocument,
    collection_to_document,
    custom_card_to_dict,
    parse_collection,
    parse_collections,
    parse_custom_cards,
    parse_slots,
    slot_to_dict,
    split_collections,
)
from binderdex.models.errors import (
    AdminPermissionError,
    BinderValidationError,
    CatalogError,
    FailureKind,
    KnownError,
    StorageUnavailableError,
)
from binderdex.models.roster import CustomEntry, RosterEntry, SpeciesEntry, UserEntry
from binderdex.models.slot import CARD_VARIANTS, CardVariant, Slot, SlotCard

__all__ = [
    "CARD_VARIANTS",
    "MASTER_TYPES",
    "AdminPermissionError",
    "BinderType",
    "BinderValidationError",
    "CardVariant",
    "CatalogError",
    "Collection",
    "CollectionConfig",
    "CollectionDocument",
    "CustomCard",
    "CustomCardDocument",
    "CustomEntry",
    "EditionFilter",
    "FailureKind",
    "FinishFlags",
    "GroupFinishCounts",
    "GroupInfo",
    "KnownError",
    "MasterSetOptions",
    "Printing",
    "PrintingBrief",
    "RosterEntry",
    "Slot",
    "SlotCard",
    "SlotDocument",
    "SpeciesEntry",
    "StorageUnavailableError",
    "UserCardMeta",
    "UserEntry",
    "collection_to_document",
    "custom_card_to_dict",
    "group_id_from_card_id",
    "parse_collection",
    "parse_collections",
    "parse_custom_cards",
    "parse_slots",
    "slot_to_dict",
    "split_collections",
]
