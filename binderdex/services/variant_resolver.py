"""
Variant resolution.

Decides which finishes of a printing get a slot. The pipeline runs in a
fixed order and, up to the edition filter, never returns an empty list:

1. Finishes the catalog marks as present, in canonical order ([normal]
   when none is marked)
2. Single-print-run names (V, ex, GX, VMAX, VSTAR) collapse to [normal]
3. Finishes the group reports a zero count for are dropped
4. firstEdition is dropped for groups released after the last first
   edition print run
4b. masterBall is added for printings in Master Ball groups
5. The binder's edition filter (may empty the list; callers skip the
   printing)
"""

import re
from collections.abc import Collection, Iterable

from binderdex.config import LAST_FIRST_EDITION_RELEASE_DATE
from binderdex.models.admin import FinishFlags
from binderdex.models.catalog import GroupFinishCounts, GroupInfo, Printing
from binderdex.models.collection import EditionFilter
from binderdex.models.slot import CARD_VARIANTS, CardVariant
from binderdex.services.master_ball import add_master_ball_if_eligible

# Names that only ever have one finish per group
_SINGLE_PRINT_RUN_SUFFIX = re.compile(r"\s(V|ex|GX|VMAX|VSTAR)$", re.IGNORECASE)

_VARIANT_LABELS = {
    CardVariant.NORMAL: "Normal",
    CardVariant.REVERSE: "Reverse",
    CardVariant.HOLO: "Holo",
    CardVariant.FIRST_EDITION: "1st Edition",
    CardVariant.W_PROMO: "W Promo",
    CardVariant.MASTER_BALL: "Master Ball",
}


def variants_from_flags(flags: FinishFlags | None) -> list[CardVariant]:
    """Finishes marked present, in canonical order. Defaults to [normal]."""
    if flags is None:
        return [CardVariant.NORMAL]
    enabled = flags.enabled()
    variants = [v for v in CARD_VARIANTS if v in enabled]
    return variants or [CardVariant.NORMAL]


def is_single_print_run(name: str | None) -> bool:
    """True for names like "Pikachu VMAX" that have a single finish."""
    if not name:
        return False
    return _SINGLE_PRINT_RUN_SUFFIX.search(name.strip()) is not None


def get_display_variants(flags: FinishFlags | None, name: str | None) -> list[CardVariant]:
    """Steps 1 and 2. Never empty."""
    variants = variants_from_flags(flags)
    if is_single_print_run(name) and CardVariant.NORMAL in variants:
        return [CardVariant.NORMAL]
    return variants


def filter_variants_by_group_counts(
    variants: list[CardVariant], counts: GroupFinishCounts | None
) -> list[CardVariant]:
    """
    Drop finishes the group reports as exactly zero.

    Unknown counts (None) keep the finish. If every finish would be dropped
    the input is returned unchanged.
    """
    if counts is None:
        return list(variants)
    reported = {
        CardVariant.NORMAL: counts.normal,
        CardVariant.REVERSE: counts.reverse,
        CardVariant.HOLO: counts.holo,
        CardVariant.FIRST_EDITION: counts.first_edition,
    }
    kept = [v for v in variants if reported.get(v) != 0]
    return kept or list(variants)


def group_has_first_edition(release_date: str | None) -> bool:
    """Unknown release dates are assumed to have had a first edition run."""
    if not release_date:
        return True
    return release_date <= LAST_FIRST_EDITION_RELEASE_DATE


def filter_variants_by_release_date(
    variants: list[CardVariant], release_date: str | None
) -> list[CardVariant]:
    if group_has_first_edition(release_date):
        return list(variants)
    kept = [v for v in variants if v is not CardVariant.FIRST_EDITION]
    return kept or [CardVariant.NORMAL]


def filter_variants_by_edition(
    variants: Iterable[CardVariant], edition_filter: EditionFilter | str | None
) -> list[CardVariant]:
    """Apply the binder's edition filter. May return an empty list."""
    edition = EditionFilter(edition_filter) if edition_filter else EditionFilter.ALL
    if edition is EditionFilter.FIRST_EDITION_ONLY:
        return [v for v in variants if v is CardVariant.FIRST_EDITION]
    if edition is EditionFilter.UNLIMITED_ONLY:
        return [v for v in variants if v is not CardVariant.FIRST_EDITION]
    return list(variants)


def resolve_variants(
    flags: FinishFlags | None,
    name: str | None,
    *,
    finish_counts: GroupFinishCounts | None = None,
    release_date: str | None = None,
    edition_filter: EditionFilter | str | None = EditionFilter.ALL,
    group_id: str | None = None,
    local_id: str | None = None,
) -> list[CardVariant]:
    """
    Run the full pipeline for one printing.

    Args:
        flags: Finish flags reported by the catalog
        name: Printed name
        finish_counts: Per-finish counts of the containing group
        release_date: Group release date, "YYYY-MM-DD"
        edition_filter: Binder edition filter
        group_id: Containing group id, for Master Ball eligibility
        local_id: Collector number, for Master Ball eligibility

    Returns:
        Finishes that get a slot, in canonical order (masterBall last).
        Empty only when the edition filter removes everything.
    """
    variants = get_display_variants(flags, name)
    variants = filter_variants_by_group_counts(variants, finish_counts)
    variants = filter_variants_by_release_date(variants, release_date)
    variants = add_master_ball_if_eligible(variants, group_id, local_id, name)
    return filter_variants_by_edition(variants, edition_filter)


def resolve_printing_variants(
    printing: Printing,
    group: GroupInfo | None = None,
    edition_filter: EditionFilter | str | None = EditionFilter.ALL,
) -> list[CardVariant]:
    """resolve_variants for a catalog printing and its group."""
    return resolve_variants(
        printing.finishes,
        printing.name,
        finish_counts=group.finish_counts if group else None,
        release_date=group.release_date if group else None,
        edition_filter=edition_filter,
        group_id=printing.group_id,
        local_id=printing.local_id,
    )


def display_variant(
    stored: CardVariant, valid_variants: Collection[CardVariant] | None
) -> CardVariant:
    """
    Finish to render for a stored assignment.

    A stored finish the printing no longer has renders as normal. The
    stored value itself is never rewritten. Without a known valid set the
    stored finish is shown as is.
    """
    if valid_variants is None or stored in valid_variants:
        return stored
    return CardVariant.NORMAL


def variant_label(variant: CardVariant | str) -> str:
    """Human label, e.g. "1st Edition" for firstEdition."""
    return _VARIANT_LABELS[CardVariant(variant)]
