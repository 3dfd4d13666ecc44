"""
Slot key derivation.

Every binder type addresses its slots with a stable string key:

- Roster binders (collect-them-all, master): one slot per roster entry,
  "{dexId}" or "{dexId}-{form}"; admin custom entries and user-added
  entries carry their own key.
- Set binders: one slot per printing and finish, "{cardId}-{variant}".
- Single-subject binders: the same per language, "{lang}:{cardId}-{variant}".
- Custom multi-subject binders: "custom:{slug}:{lang}:{cardId}-{variant}".

Assignment, local removals and admin exclusions all go through the
functions here so a slot is addressed the same way everywhere.
"""

import random
import re
import string
import time

from binderdex.models.collection import Collection
from binderdex.models.roster import CustomEntry, RosterEntry, SpeciesEntry, UserEntry
from binderdex.models.slot import CardVariant, Slot, SlotCard

USER_KEY_PREFIX = "user-"
CUSTOM_KEY_PREFIX = "custom:"
# Subject slug used in custom multi-subject keys when a name has none
CUSTOM_SLUG_FALLBACK = "pokemon"

_BASE36 = string.digits + string.ascii_lowercase
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def species_slot_key(dex_id: int, form: str | None = None) -> str:
    return f"{dex_id}-{form}" if form else str(dex_id)


def roster_entry_key(entry: RosterEntry) -> str:
    """Slot key for a roster entry of a master-type binder."""
    match entry:
        case SpeciesEntry(dex_id=dex_id, form=form):
            return species_slot_key(dex_id, form)
        case CustomEntry(slot_key=slot_key) | UserEntry(slot_key=slot_key):
            return slot_key
        case _:
            raise TypeError(f"Not a roster entry: {entry!r}")


def card_slot_key(card_id: str, variant: CardVariant | str) -> str:
    """Slot key for one printing and finish in a set or custom binder."""
    return f"{card_id}-{CardVariant(variant).value}"


def single_subject_slot_key(language: str, card_id: str, variant: CardVariant | str) -> str:
    """Same printing in two languages occupies two slots."""
    return f"{language}:{card_slot_key(card_id, variant)}"


def slugify(name: str, fallback: str = "") -> str:
    """
    Lowercase, runs of non-alphanumerics collapsed to one hyphen, trimmed.

    A name with no ASCII letters or digits gives `fallback`.
    """
    slug = _NON_ALPHANUMERIC.sub("-", (name or "").lower()).strip("-")
    return slug or fallback


def custom_multi_slot_key(
    subject_name: str, language: str, card_id: str, variant: CardVariant | str
) -> str:
    slug = slugify(subject_name, fallback=CUSTOM_SLUG_FALLBACK)
    return f"{CUSTOM_KEY_PREFIX}{slug}:{language}:{card_slot_key(card_id, variant)}"


def group_binder_key(group_id: str) -> str:
    """Admin baseline key of a set binder."""
    return f"group:{group_id}"


def subject_binder_key(subject_name: str) -> str:
    """Admin baseline key of a single-subject binder."""
    return f"subject:{slugify(subject_name)}"


def card_version_key(card_id: str, variant: CardVariant | str) -> str:
    """Key of one printing+finish in the admin exclusion set."""
    return f"{card_id}|{CardVariant(variant).value}"


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def random_suffix(length: int = 7) -> str:
    return "".join(random.choices(_BASE36, k=length))


def generate_user_slot_key(timestamp_ms: int | None = None) -> str:
    """
    New key for a user-added slot. Also used as the id of the card in it.

    Format: "user-{epoch ms}-{7 random base36 chars}".
    """
    if timestamp_ms is None:
        timestamp_ms = now_ms()
    return f"{USER_KEY_PREFIX}{timestamp_ms}-{random_suffix()}"


def is_user_slot_key(key: str) -> bool:
    return key.startswith(USER_KEY_PREFIX)


def is_user_added_slot(slot: Slot) -> bool:
    """A slot the user added: its key or the card in it is user-defined."""
    if is_user_slot_key(slot.key):
        return True
    return slot.card is not None and is_user_slot_key(slot.card.card_id)


def resolve_slot_card(
    collection: Collection,
    card_id: str,
    variant: CardVariant | str,
    language: str | None = None,
) -> SlotCard | None:
    """
    Find the assignment for a printing+finish, tolerating older key formats.

    Tries the language-qualified key first (when a language is given), then
    the unqualified "{cardId}-{variant}" key, and for the normal finish the
    bare card id written by the earliest releases.
    """
    by_key = {slot.key: slot for slot in collection.slots}
    variant = CardVariant(variant)

    candidates = []
    if language:
        candidates.append(single_subject_slot_key(language, card_id, variant))
    candidates.append(card_slot_key(card_id, variant))
    if variant is CardVariant.NORMAL:
        candidates.append(card_id)

    for key in candidates:
        slot = by_key.get(key)
        if slot is not None and slot.card is not None:
            return slot.card
    return None
