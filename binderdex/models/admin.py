from dataclasses import dataclass, field

from binderdex.models.slot import CardVariant


@dataclass(frozen=True)
class FinishFlags:
    """Which finishes a printing exists in, as reported by the catalog."""

    normal: bool = False
    reverse: bool = False
    holo: bool = False
    first_edition: bool = False
    w_promo: bool = False

    def enabled(self) -> set[CardVariant]:
        flags = {
            CardVariant.NORMAL: self.normal,
            CardVariant.REVERSE: self.reverse,
            CardVariant.HOLO: self.holo,
            CardVariant.FIRST_EDITION: self.first_edition,
            CardVariant.W_PROMO: self.w_promo,
        }
        return {variant for variant, on in flags.items() if on}


@dataclass(frozen=True)
class CustomCard:
    """
    Admin-added card that owns an extra roster slot (e.g. a new Unown).

    Behaves like a catalog printing for show/hide rules.

    Attributes:
        id: Unique card id
        slot_key: Roster slot key this card occupies; unique
        name: Display name
        dex_id: Species number used for ordering
        local_id: Collector number within its group
        group_id: Containing group (set) id
        group_name: Containing group display name
        image: Image URL, or None
        finishes: Finish flags
        created_at: Creation time, epoch milliseconds
    """

    id: str
    slot_key: str
    name: str
    dex_id: int
    local_id: str
    group_id: str
    group_name: str
    image: str | None = None
    finishes: FinishFlags = field(default_factory=FinishFlags)
    created_at: int | None = None
