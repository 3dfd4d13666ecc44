"""
Persisted document schemas.

Collections, admin slot overrides and custom cards are stored as camelCase
JSON documents. These pydantic models validate what comes back from storage
and convert it to the dataclass domain models. Anything that fails
validation is treated as absent, never as fatal.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from binderdex.models.admin import CustomCard, FinishFlags
from binderdex.models.collection import (
    BinderType,
    Collection,
    CollectionConfig,
    EditionFilter,
    MasterSetOptions,
    UserCardMeta,
)
from binderdex.models.slot import CardVariant, Slot, SlotCard

logger = logging.getLogger(__name__)

# Config fields that older releases stored at the top level of the document
_LEGACY_CONFIG_FIELDS = {
    "languages": "languages",
    "editionFilter": "editionFilter",
    "masterSetOptions": "masterSetOptions",
    "singlePokemonDexId": "subjectDexId",
    "singlePokemonName": "subjectName",
    "includeRegionalForms": "includeRegionalForms",
    "setId": "groupId",
    "setName": "groupName",
    "setSymbol": "groupSymbol",
    "customPokemonIds": "customSubjectIds",
    "customPokemonNames": "customSubjectNames",
    "binderColor": "binderColor",
}


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SlotCardDocument(_Document):
    card_id: str
    variant: CardVariant
    language: str | None = None


class SlotDocument(_Document):
    key: str = Field(min_length=1)
    card: SlotCardDocument | None = None


class MasterSetOptionsDocument(_Document):
    regional_forms: bool = False
    variation_groups: list[str] | None = None
    variations: bool = False
    megas: bool = False
    gmax: bool = False


class CollectionConfigDocument(_Document):
    languages: list[str] = Field(default_factory=list)
    edition_filter: EditionFilter = EditionFilter.ALL
    master_set_options: MasterSetOptionsDocument | None = None
    subject_dex_id: int | None = None
    subject_name: str | None = None
    include_regional_forms: bool = True
    group_id: str | None = None
    group_name: str | None = None
    group_symbol: str | None = None
    custom_subject_ids: list[int] = Field(default_factory=list)
    custom_subject_names: list[str] = Field(default_factory=list)
    binder_color: str | None = None


class UserCardDocument(_Document):
    name: str
    set_name: str = ""
    local_id: str | None = None
    slot_key: str | None = None
    variant: CardVariant | None = None


class CollectionDocument(_Document):
    id: str = Field(min_length=1)
    name: str
    type: BinderType
    config: CollectionConfigDocument = Field(default_factory=CollectionConfigDocument)
    slots: list[SlotDocument] = Field(default_factory=list)
    user_cards: dict[str, UserCardDocument] = Field(default_factory=dict)
    created_at: int = 0
    updated_at: int = 0

    @model_validator(mode="before")
    @classmethod
    def _lift_legacy_config(cls, data: Any) -> Any:
        """Move config fields stored flat by older releases into `config`."""
        if not isinstance(data, dict) or "config" in data:
            return data
        legacy = {new: data[old] for old, new in _LEGACY_CONFIG_FIELDS.items() if old in data}
        if not legacy:
            return data
        lifted = {k: v for k, v in data.items() if k not in _LEGACY_CONFIG_FIELDS}
        lifted["config"] = legacy
        return lifted

    @field_validator("slots", mode="before")
    @classmethod
    def _drop_malformed_slots(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [item for item in value if _is_valid_slot(item)]


class FinishFlagsDocument(_Document):
    normal: bool = False
    reverse: bool = False
    holo: bool = False
    first_edition: bool = False
    w_promo: bool = False


class CustomCardDocument(_Document):
    id: str = Field(min_length=1)
    slot_key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    dex_id: int
    local_id: str
    group_id: str
    group_name: str
    image: str | None = None
    variants: FinishFlagsDocument = Field(default_factory=FinishFlagsDocument)
    created_at: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _rename_legacy_group_fields(cls, data: Any) -> Any:
        """Older documents call the containing group a "set"."""
        if not isinstance(data, dict):
            return data
        renamed = dict(data)
        if "setId" in renamed and "groupId" not in renamed:
            renamed["groupId"] = renamed.pop("setId")
        if "setName" in renamed and "groupName" not in renamed:
            renamed["groupName"] = renamed.pop("setName")
        return renamed


def _is_valid_slot(item: Any) -> bool:
    try:
        SlotDocument.model_validate(item)
    except ValidationError:
        return False
    return True


# --- Slots ---


def slot_from_document(doc: SlotDocument) -> Slot:
    card = None
    if doc.card is not None:
        card = SlotCard(
            card_id=doc.card.card_id, variant=doc.card.variant, language=doc.card.language
        )
    return Slot(key=doc.key, card=card)


def slot_to_dict(slot: Slot) -> dict[str, Any]:
    card: dict[str, Any] | None = None
    if slot.card is not None:
        card = {"cardId": slot.card.card_id, "variant": slot.card.variant.value}
        if slot.card.language is not None:
            card["language"] = slot.card.language
    return {"key": slot.key, "card": card}


def parse_slots(raw: Any) -> list[Slot]:
    """Parse a stored slot list, skipping malformed entries."""
    if not isinstance(raw, list):
        return []
    slots: list[Slot] = []
    for item in raw:
        try:
            slots.append(slot_from_document(SlotDocument.model_validate(item)))
        except ValidationError:
            logger.debug("Skipping malformed slot: %r", item)
    return slots


# --- Collections ---


def collection_from_document(doc: CollectionDocument) -> Collection:
    """Convert a validated document to a domain collection."""
    cfg = doc.config
    options = None
    if cfg.master_set_options is not None:
        opts = cfg.master_set_options
        options = MasterSetOptions(
            regional_forms=opts.regional_forms,
            variation_groups=(
                tuple(opts.variation_groups) if opts.variation_groups is not None else None
            ),
            variations=opts.variations,
            megas=opts.megas,
            gmax=opts.gmax,
        )

    # Keys are unique within a collection; keep the first if storage disagrees
    slots: list[Slot] = []
    seen: set[str] = set()
    for slot_doc in doc.slots:
        if slot_doc.key in seen:
            logger.warning("Duplicate slot key %r in collection %s", slot_doc.key, doc.id)
            continue
        seen.add(slot_doc.key)
        slots.append(slot_from_document(slot_doc))

    return Collection(
        id=doc.id,
        name=doc.name,
        type=doc.type,
        config=CollectionConfig(
            languages=tuple(cfg.languages),
            edition_filter=cfg.edition_filter,
            master_set_options=options,
            subject_dex_id=cfg.subject_dex_id,
            subject_name=cfg.subject_name,
            include_regional_forms=cfg.include_regional_forms,
            group_id=cfg.group_id,
            group_name=cfg.group_name,
            group_symbol=cfg.group_symbol,
            custom_subject_ids=tuple(cfg.custom_subject_ids),
            custom_subject_names=tuple(cfg.custom_subject_names),
            binder_color=cfg.binder_color,
        ),
        slots=tuple(slots),
        user_cards={
            card_id: UserCardMeta(
                name=meta.name,
                set_name=meta.set_name,
                local_id=meta.local_id,
                slot_key=meta.slot_key,
                variant=meta.variant,
            )
            for card_id, meta in doc.user_cards.items()
        },
        created_at=doc.created_at,
        updated_at=doc.updated_at,
    )


def collection_to_document(collection: Collection) -> dict[str, Any]:
    """Convert a domain collection to its JSON-ready document."""
    cfg = collection.config
    opts = cfg.master_set_options
    doc = CollectionDocument(
        id=collection.id,
        name=collection.name,
        type=collection.type,
        config=CollectionConfigDocument(
            languages=list(cfg.languages),
            edition_filter=cfg.edition_filter,
            master_set_options=(
                MasterSetOptionsDocument(
                    regional_forms=opts.regional_forms,
                    variation_groups=(
                        list(opts.variation_groups) if opts.variation_groups is not None else None
                    ),
                    variations=opts.variations,
                    megas=opts.megas,
                    gmax=opts.gmax,
                )
                if opts is not None
                else None
            ),
            subject_dex_id=cfg.subject_dex_id,
            subject_name=cfg.subject_name,
            include_regional_forms=cfg.include_regional_forms,
            group_id=cfg.group_id,
            group_name=cfg.group_name,
            group_symbol=cfg.group_symbol,
            custom_subject_ids=list(cfg.custom_subject_ids),
            custom_subject_names=list(cfg.custom_subject_names),
            binder_color=cfg.binder_color,
        ),
        user_cards={
            card_id: UserCardDocument(
                name=meta.name,
                set_name=meta.set_name,
                local_id=meta.local_id,
                slot_key=meta.slot_key,
                variant=meta.variant,
            )
            for card_id, meta in collection.user_cards.items()
        },
        created_at=collection.created_at,
        updated_at=collection.updated_at,
    )
    data = doc.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"slots"})
    # Slots keep explicit nulls: card=None is meaningful
    data["slots"] = [slot_to_dict(slot) for slot in collection.slots]
    return data


def parse_collection(raw: Any) -> Collection | None:
    """Validate one stored collection. Returns None if malformed."""
    try:
        return collection_from_document(CollectionDocument.model_validate(raw))
    except ValidationError as e:
        logger.warning("Ignoring malformed collection document: %s", e.error_count())
        return None


def split_collections(raw: Any) -> tuple[list[Collection], list[dict[str, Any]]]:
    """
    Validate a stored collection list.

    Returns the collections that validate and the raw documents that do not
    (a newer binder type, say), so a later save can write those back as-is.
    Entries that are not even objects are dropped.
    """
    if not isinstance(raw, list):
        return [], []
    collections: list[Collection] = []
    unparsed: list[dict[str, Any]] = []
    for item in raw:
        collection = parse_collection(item)
        if collection is not None:
            collections.append(collection)
        elif isinstance(item, dict):
            unparsed.append(item)
    return collections, unparsed


def parse_collections(raw: Any) -> list[Collection]:
    """Validate a stored collection list, dropping malformed entries."""
    return split_collections(raw)[0]


# --- Custom cards ---


def custom_card_from_document(doc: CustomCardDocument) -> CustomCard:
    return CustomCard(
        id=doc.id,
        slot_key=doc.slot_key,
        name=doc.name,
        dex_id=doc.dex_id,
        local_id=doc.local_id,
        group_id=doc.group_id,
        group_name=doc.group_name,
        image=doc.image,
        finishes=FinishFlags(
            normal=doc.variants.normal,
            reverse=doc.variants.reverse,
            holo=doc.variants.holo,
            first_edition=doc.variants.first_edition,
            w_promo=doc.variants.w_promo,
        ),
        created_at=doc.created_at,
    )


def custom_card_to_dict(card: CustomCard) -> dict[str, Any]:
    doc = CustomCardDocument(
        id=card.id,
        slot_key=card.slot_key,
        name=card.name,
        dex_id=card.dex_id,
        local_id=card.local_id,
        group_id=card.group_id,
        group_name=card.group_name,
        image=card.image,
        variants=FinishFlagsDocument(
            normal=card.finishes.normal,
            reverse=card.finishes.reverse,
            holo=card.finishes.holo,
            first_edition=card.finishes.first_edition,
            w_promo=card.finishes.w_promo,
        ),
        created_at=card.created_at,
    )
    data = doc.model_dump(mode="json", by_alias=True, exclude={"image"})
    # Image is nullable in storage, not omitted
    data["image"] = card.image
    return data


def parse_custom_cards(raw: Any) -> list[CustomCard]:
    """Parse the stored custom card list, skipping malformed entries."""
    if not isinstance(raw, list):
        return []
    cards: list[CustomCard] = []
    for item in raw:
        try:
            cards.append(custom_card_from_document(CustomCardDocument.model_validate(item)))
        except ValidationError:
            logger.debug("Skipping malformed custom card: %r", item)
    return cards
