from dataclasses import dataclass, field

from binderdex.models.admin import FinishFlags


@dataclass(frozen=True, slots=True)
class PrintingBrief:
    """Printing summary as returned by a name search or group listing."""

    id: str
    name: str
    local_id: str
    image: str | None = None
    group_id: str | None = None


@dataclass(frozen=True)
class Printing:
    """
    Full catalog printing.

    Attributes:
        id: Printing id, "{groupId}-{localId}"
        name: Localized printed name
        local_id: Collector number within the group
        group_id: Containing group (set) id
        group_name: Containing group display name
        finishes: Finish flags reported by the catalog
        dex_ids: Species numbers depicted, if any
        image: Image URL, or None
    """

    id: str
    name: str
    local_id: str
    group_id: str
    group_name: str = ""
    finishes: FinishFlags = field(default_factory=FinishFlags)
    dex_ids: tuple[int, ...] = ()
    image: str | None = None


@dataclass(frozen=True)
class GroupFinishCounts:
    """
    Per-finish printing counts of a group.

    None means the group did not report the count; 0 means the group has
    no printing in that finish.
    """

    normal: int | None = None
    reverse: int | None = None
    holo: int | None = None
    first_edition: int | None = None


@dataclass(frozen=True)
class GroupInfo:
    """A catalog group (set) with its printing list."""

    id: str
    name: str
    release_date: str | None = None
    finish_counts: GroupFinishCounts | None = None
    printings: tuple[PrintingBrief, ...] = ()
    symbol: str | None = None


def group_id_from_card_id(card_id: str) -> str:
    """Printing ids are "{groupId}-{localId}"; group ids may contain dashes."""
    head, sep, _ = card_id.rpartition("-")
    return head if sep else card_id
