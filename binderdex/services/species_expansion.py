"""
Roster expansion for master-type binders.

The base roster is one entry per national dex species. Master binders can
add curated extra entries on top (Mega Evolutions, Gigantamax forms,
regional forms and variation families like the 28 Unown). The tables live
in data/roster_extras.json.

Expansion is pure and deterministic: the same base roster and options
always produce the same entries in the same order.
"""

import json
import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from binderdex.models.admin import CustomCard
from binderdex.models.collection import MasterSetOptions
from binderdex.models.roster import CustomEntry, RosterEntry, SpeciesEntry, UserEntry
from binderdex.slots.addressing import roster_entry_key

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

GIGANTAMAX_PREFIX = "Gigantamax "

# Variation group enabled by the legacy `variations` flag
LEGACY_VARIATION_GROUP = "unown"

_NUMBER_RUNS = re.compile(r"(\d+)")


@dataclass(frozen=True)
class VariationGroup:
    """
    A family of alternate forms that can be added as a unit.

    Attributes:
        id: Stable id stored in MasterSetOptions.variation_groups
        label: Picker label
        exclude_base: Dex ids whose plain base entry the forms replace
        entries: The form entries added
    """

    id: str
    label: str
    exclude_base: frozenset[int]
    entries: tuple[SpeciesEntry, ...]

    @property
    def slot_count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class RosterExtras:
    megas: tuple[SpeciesEntry, ...]
    gmax: tuple[SpeciesEntry, ...]
    regional_forms: tuple[SpeciesEntry, ...]
    variation_groups: dict[str, VariationGroup]


def _entries(raw: list[dict[str, Any]]) -> tuple[SpeciesEntry, ...]:
    return tuple(SpeciesEntry(dex_id=e["dexId"], name=e["name"], form=e["form"]) for e in raw)


def load_roster_extras(path: Path | None = None) -> RosterExtras:
    """
    Load the extra-entry tables from file.

    Args:
        path: Path to JSON file. Defaults to data/roster_extras.json

    Returns:
        Parsed tables, variation groups in picker order.
    """
    if path is None:
        path = DATA_DIR / "roster_extras.json"

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    groups = {
        g["id"]: VariationGroup(
            id=g["id"],
            label=g["label"],
            exclude_base=frozenset(g.get("excludeBase", [])),
            entries=_entries(g["entries"]),
        )
        for g in raw["variationGroups"]
    }
    return RosterExtras(
        megas=_entries(raw["megas"]),
        gmax=_entries(raw["gmax"]),
        regional_forms=_entries(raw["regionalForms"]),
        variation_groups=groups,
    )


@lru_cache(maxsize=1)
def get_roster_extras() -> RosterExtras:
    """Cached tables from the packaged data file."""
    return load_roster_extras()


# Picker metadata: id, label and slot_count of every variation group
VARIATION_GROUPS: tuple[VariationGroup, ...] = tuple(get_roster_extras().variation_groups.values())


def natural_key(text: str) -> tuple[tuple[int, Any], ...]:
    """Sort key comparing digit runs numerically ("6-mega" < "10")."""
    parts = _NUMBER_RUNS.split(text.lower())
    return tuple((0, int(p)) if p.isdigit() else (1, p) for p in parts if p)


def roster_sort_key(entry: RosterEntry) -> tuple[int, tuple[tuple[int, Any], ...]]:
    return entry.dex_id, natural_key(roster_entry_key(entry))


def selected_variation_groups(options: MasterSetOptions) -> tuple[str, ...]:
    """
    Variation group ids enabled by the options.

    An explicit variation_groups selection wins; the legacy `variations`
    flag only applies when no selection was ever stored.
    """
    if options.variation_groups is not None:
        if options.variations:
            logger.warning(
                "Both variation_groups and legacy variations flag set; using variation_groups"
            )
        return options.variation_groups
    return (LEGACY_VARIATION_GROUP,) if options.variations else ()


def expand_roster(
    base: Iterable[SpeciesEntry], options: MasterSetOptions | None
) -> list[SpeciesEntry]:
    """
    Add the extra entries enabled by the options to a base roster.

    Args:
        base: Base species entries
        options: Master set toggles; None means base roster only

    Returns:
        Entries sorted by dex id, then natural order of their slot key.
    """
    extras = get_roster_extras()
    out = list(base)
    if options is not None:
        if options.megas:
            out.extend(extras.megas)
        if options.gmax:
            out.extend(extras.gmax)
        if options.regional_forms:
            out.extend(extras.regional_forms)
        for group_id in selected_variation_groups(options):
            group = extras.variation_groups.get(group_id)
            if group is None:
                logger.warning("Unknown variation group %r", group_id)
                continue
            if group.exclude_base:
                out = [e for e in out if e.form is not None or e.dex_id not in group.exclude_base]
            out.extend(group.entries)

    # Selecting the same group twice must not duplicate slots
    unique: dict[str, SpeciesEntry] = {}
    for entry in out:
        unique.setdefault(roster_entry_key(entry), entry)
    return sorted(unique.values(), key=roster_sort_key)


def merge_roster(
    species: Sequence[SpeciesEntry],
    custom_cards: Iterable[CustomCard] = (),
    user_entries: Iterable[UserEntry] = (),
) -> list[RosterEntry]:
    """
    Merge species, admin custom cards and user-added entries.

    Slot keys are unique across the result: when two sources claim the
    same key the earlier source (species, then custom, then user) wins.
    """
    merged: dict[str, RosterEntry] = {}
    candidates: list[RosterEntry] = [*species]
    candidates.extend(
        CustomEntry(slot_key=card.slot_key, name=card.name, dex_id=card.dex_id, card=card)
        for card in custom_cards
    )
    candidates.extend(user_entries)

    for entry in candidates:
        key = roster_entry_key(entry)
        if key in merged:
            logger.warning("Roster key %r already taken, skipping %s", key, entry.name)
            continue
        merged[key] = entry
    return sorted(merged.values(), key=roster_sort_key)


def search_name_for(entry: RosterEntry) -> str:
    """
    Name to search the card catalog with.

    Gigantamax forms are printed as "<Base> VMAX" on cards.
    """
    if isinstance(entry, SpeciesEntry) and entry.form and entry.form.startswith("gmax"):
        base = entry.name.removeprefix(GIGANTAMAX_PREFIX)
        return f"{base} VMAX"
    return entry.name
