from dataclasses import dataclass
from enum import Enum


class CardVariant(str, Enum):
    """Physical finish of a printing."""

    NORMAL = "normal"
    REVERSE = "reverse"
    HOLO = "holo"
    FIRST_EDITION = "firstEdition"
    W_PROMO = "wPromo"
    MASTER_BALL = "masterBall"


# Canonical order used whenever a variant list is built
CARD_VARIANTS: tuple[CardVariant, ...] = tuple(CardVariant)


@dataclass(frozen=True, slots=True)
class SlotCard:
    """
    Reference to the printing a user placed in a slot.

    Attributes:
        card_id: Catalog printing id (e.g. "sv3-1"), or a "user-" id for
            locally defined cards
        variant: Which finish of the printing
        language: Language code for multi-language single-subject binders
    """

    card_id: str
    variant: CardVariant
    language: str | None = None


@dataclass(frozen=True, slots=True)
class Slot:
    """One addressable unit in a binder. card=None means not collected."""

    key: str
    card: SlotCard | None = None

    @property
    def filled(self) -> bool:
        return self.card is not None
