"""Protocol for the collection cache."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from infra_explorer.domain.models.collection import (
        CollectionKind,
        CollectionView,
        FetchOutcome,
    )


class CollectionCacheProtocol(Protocol):
    """Protocol for the fetch-tracked cache of infrastructure collections."""

    def get(self, kind: "CollectionKind") -> "CollectionView":
        """Get the current snapshot of a collection.

        Never blocks. The first access of a collection that was never
        requested dispatches its initial fetch.

        Args:
            kind: The collection to read.

        Returns:
            The current, possibly empty or stale, snapshot.
        """
        ...

    def peek(self, kind: "CollectionKind") -> "CollectionView":
        """Get the current snapshot without dispatching any fetch."""
        ...

    def refresh(self, kind: "CollectionKind") -> bool:
        """Dispatch a fetch unless one is already in flight for ``kind``.

        Returns:
            True if a new fetch was dispatched.
        """
        ...

    def ensure_loaded(self, kind: "CollectionKind") -> bool:
        """Dispatch a fetch unless the collection is loaded without error or one is in flight.

        Covers the first visit of a view and retrying after a failed fetch,
        including a failed refresh of data that loaded earlier.

        Returns:
            True if a new fetch was dispatched.
        """
        ...

    def on_fetch_complete(self, kind: "CollectionKind", outcome: "FetchOutcome") -> None:
        """Apply the outcome of a finished fetch.

        Args:
            kind: The collection the fetch was for.
            outcome: Records on success, the error otherwise.
        """
        ...
