"""
Binder slot universe builders.

Computes, from the catalog and species data, every slot a binder can
hold. Set and single-subject binders get one slot per printing and
resolved finish; master binders get one slot per roster entry.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from binderdex.config import GROUP_IDS_WITHOUT_PRINTINGS, settings
from binderdex.models.catalog import Printing
from binderdex.models.collection import BinderType, Collection
from binderdex.models.errors import CatalogError
from binderdex.models.roster import RosterEntry, SpeciesEntry, UserEntry
from binderdex.models.slot import CardVariant
from binderdex.services.admin_config import AdminConfigService
from binderdex.services.species_expansion import (
    GIGANTAMAX_PREFIX,
    expand_roster,
    merge_roster,
    search_name_for,
)
from binderdex.services.variant_resolver import resolve_printing_variants
from binderdex.slots.addressing import card_slot_key, is_user_slot_key, single_subject_slot_key
from binderdex.stores.base import CatalogProvider, SpeciesProvider

logger = logging.getLogger(__name__)

# Concurrent printing lookups
_PRINTING_BATCH_SIZE = 50


@dataclass(frozen=True)
class PrintingSlot:
    """One printing+finish slot of a set or single-subject binder."""

    key: str
    printing: Printing
    variant: CardVariant
    language: str | None = None


async def fetch_printings(
    catalog: CatalogProvider, lang: str, card_ids: Sequence[str]
) -> list[Printing]:
    """Full printings for ids, in order. Ids that fail to load are skipped."""
    printings: list[Printing] = []
    for start in range(0, len(card_ids), _PRINTING_BATCH_SIZE):
        batch = card_ids[start : start + _PRINTING_BATCH_SIZE]
        results = await asyncio.gather(
            *(catalog.get_printing(lang, card_id) for card_id in batch),
            return_exceptions=True,
        )
        for card_id, result in zip(batch, results, strict=True):
            if isinstance(result, CatalogError):
                logger.warning("Skipping printing %s (%s): %s", card_id, lang, result.message)
            elif isinstance(result, BaseException):
                raise result
            else:
                printings.append(result)
    return printings


async def build_group_slots(
    catalog: CatalogProvider, collection: Collection, lang: str | None = None
) -> list[PrintingSlot]:
    """
    Every slot of a set binder: its group's printings times resolved finishes.

    Raises:
        CatalogError: If the group cannot be loaded
    """
    group_id = collection.config.group_id
    if not group_id or group_id in GROUP_IDS_WITHOUT_PRINTINGS:
        return []
    lang = lang or settings.reference_language

    group = await catalog.get_group(lang, group_id)
    printings = await fetch_printings(catalog, lang, [p.id for p in group.printings])

    slots: list[PrintingSlot] = []
    for printing in printings:
        for variant in resolve_printing_variants(
            printing, group, collection.config.edition_filter
        ):
            slots.append(
                PrintingSlot(
                    key=card_slot_key(printing.id, variant), printing=printing, variant=variant
                )
            )
    return slots


async def _subject_search_name(
    species: SpeciesProvider, collection: Collection, lang: str
) -> str:
    cfg = collection.config
    name = cfg.subject_name or ""
    if name.startswith(GIGANTAMAX_PREFIX):
        entry = SpeciesEntry(dex_id=cfg.subject_dex_id or 0, name=name, form="gmax")
        return search_name_for(entry)
    if cfg.subject_dex_id:
        localized = await species.get_localized_name(cfg.subject_dex_id, lang)
        if localized:
            return localized
    return name


async def _printings_for_language(
    catalog: CatalogProvider, lang: str, search_name: str, exact: bool
) -> list[Printing]:
    briefs = await catalog.search_by_name(lang, search_name, exact=exact)
    reference = settings.reference_language
    if not briefs and lang != reference:
        # Some languages have no localized species name; resolve ids through
        # the reference language and fetch the same ids in this one
        reference_briefs = await catalog.search_by_name(reference, search_name, exact=exact)
        return await fetch_printings(catalog, lang, [b.id for b in reference_briefs])
    return await fetch_printings(catalog, lang, [b.id for b in briefs])


async def build_single_subject_slots(
    catalog: CatalogProvider, species: SpeciesProvider, collection: Collection
) -> list[PrintingSlot]:
    """
    Every slot of a single-subject binder, per selected language.

    A language whose lookups fail contributes no slots; the others are
    still built.
    """
    cfg = collection.config
    if not cfg.subject_name:
        return []
    exact = not cfg.include_regional_forms

    slots: list[PrintingSlot] = []
    for lang in collection.languages_or_default(settings.reference_language):
        try:
            search_name = await _subject_search_name(species, collection, lang)
            printings = await _printings_for_language(catalog, lang, search_name, exact)
        except CatalogError as e:
            logger.warning("No %s printings for %s: %s", lang, cfg.subject_name, e.message)
            continue
        for printing in printings:
            for variant in resolve_printing_variants(printing, None, cfg.edition_filter):
                slots.append(
                    PrintingSlot(
                        key=single_subject_slot_key(lang, printing.id, variant),
                        printing=printing,
                        variant=variant,
                        language=lang,
                    )
                )
    return slots


def user_roster_entries(collection: Collection) -> list[UserEntry]:
    """
    Slots the user added to a roster binder.

    Cards that only record a version choice for an existing slot (their
    metadata names a slot key) are not extra entries.
    """
    entries: list[UserEntry] = []
    for slot in collection.slots:
        if not is_user_slot_key(slot.key) or slot.card is None:
            continue
        meta = collection.user_cards.get(slot.card.card_id)
        if meta is not None and meta.slot_key:
            continue
        entries.append(
            UserEntry(slot_key=slot.key, name=meta.name if meta else "", card_id=slot.card.card_id)
        )
    return entries


async def build_master_roster(
    species: SpeciesProvider,
    admin: AdminConfigService | None,
    collection: Collection,
) -> list[RosterEntry]:
    """
    Full roster of a collect-them-all or master binder.

    Collect-them-all uses the base roster only; master binders add the
    extra entries enabled in their options. Admin custom cards and
    user-added entries are merged in.

    Raises:
        CatalogError: If the base roster cannot be loaded
    """
    base = await species.get_base_roster()
    options = (
        collection.config.master_set_options
        if collection.type in (BinderType.MASTER_SET, BinderType.MASTER_DEX)
        else None
    )
    expanded = expand_roster(base, options)
    custom_cards = await admin.get_custom_cards() if admin is not None else []
    return merge_roster(expanded, custom_cards, user_roster_entries(collection))
