"""In-memory snapshot of the display-ordered collection list."""

from collections.abc import Iterable

from binderdex.models.collection import Collection


class CollectionSnapshotCache:
    """
    Last display-ordered collection list, for instant binder lists.

    Display acceleration only: nothing reads it to decide what to write.
    """

    def __init__(self) -> None:
        self._ordered: tuple[Collection, ...] | None = None

    def prime(self, ordered: Iterable[Collection]) -> None:
        self._ordered = tuple(ordered)

    def get(self) -> list[Collection] | None:
        """The cached list, or None if not primed since the last invalidation."""
        return list(self._ordered) if self._ordered is not None else None

    def find(self, collection_id: str) -> Collection | None:
        if self._ordered is None:
            return None
        return next((c for c in self._ordered if c.id == collection_id), None)

    def invalidate(self) -> None:
        self._ordered = None

    @property
    def primed(self) -> bool:
        return self._ordered is not None
