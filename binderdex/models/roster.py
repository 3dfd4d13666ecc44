from dataclasses import dataclass

from binderdex.models.admin import CustomCard


@dataclass(frozen=True, slots=True)
class SpeciesEntry:
    """
    A species (or one of its forms) from the base roster or expansion tables.

    Attributes:
        dex_id: National dex number of the base species
        name: Display name, as printed on cards
        form: Form discriminator (e.g. "alola", "unown-a"); None for the base
    """

    dex_id: int
    name: str
    form: str | None = None


@dataclass(frozen=True, slots=True)
class CustomEntry:
    """Admin-added roster slot backed by a custom card."""

    slot_key: str
    name: str
    dex_id: int
    card: CustomCard


@dataclass(frozen=True, slots=True)
class UserEntry:
    """User-added roster slot holding a locally defined card."""

    slot_key: str
    name: str
    card_id: str

    @property
    def dex_id(self) -> int:
        # User entries have no species; they sort after every species entry
        return 10**9


RosterEntry = SpeciesEntry | CustomEntry | UserEntry
