"""In-memory cache of fetched infrastructure collections."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from infra_explorer.domain.contracts.collection_cache import CollectionCacheProtocol
from infra_explorer.domain.models import CollectionKind, CollectionView, FetchError

if TYPE_CHECKING:
    from infra_explorer.domain.models import FetchOutcome

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class CollectionCache(CollectionCacheProtocol):
    """Fetch-tracked store of the station and segment collections.

    The cache never talks to the network itself. ``dispatch`` starts an
    asynchronous fetch for a kind; its outcome comes back through
    ``on_fetch_complete``. At most one fetch per kind is in flight, and a
    failed fetch never discards previously loaded items.

    Freshness follows an explicit pull model: a collection is fetched on its
    first access and afterwards only when a refresh is requested.
    """

    def __init__(
        self,
        dispatch: Callable[[CollectionKind], None],
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the cache.

        Args:
            dispatch: Starts a fetch for the given kind without blocking.
            clock: Source of freshness timestamps.
        """
        self._dispatch = dispatch
        self._clock = clock
        self._collections: dict[CollectionKind, CollectionView] = {
            kind: CollectionView(kind=kind) for kind in CollectionKind
        }

    def get(self, kind: CollectionKind) -> CollectionView:
        if not self._collections[kind].requested:
            self.refresh(kind)
        return self._collections[kind]

    def peek(self, kind: CollectionKind) -> CollectionView:
        return self._collections[kind]

    def refresh(self, kind: CollectionKind) -> bool:
        current = self._collections[kind]
        if current.in_flight:
            logger.debug(f"Fetch for {kind.value} already in flight, not dispatching another")
            return False

        self._collections[kind] = replace(current, in_flight=True, requested=True)
        try:
            self._dispatch(kind)
        except Exception as e:
            # Without a running fetch nothing would ever clear the in-flight flag
            logger.error(f"Could not dispatch fetch for {kind.value}: {e}", exc_info=True)
            self._collections[kind] = replace(
                self._collections[kind], in_flight=False, error=FetchError.network(str(e))
            )
            return False

        logger.info(f"Dispatched fetch for {kind.value}")
        return True

    def ensure_loaded(self, kind: CollectionKind) -> bool:
        current = self._collections[kind]
        if current.in_flight or (current.is_loaded and current.error is None):
            return False
        return self.refresh(kind)

    def on_fetch_complete(self, kind: CollectionKind, outcome: FetchOutcome) -> None:
        current = self._collections[kind]
        if not current.in_flight:
            logger.warning(f"Received {kind.value} fetch result with no fetch in flight")

        if outcome.error is None:
            self._collections[kind] = replace(
                current,
                items=tuple(outcome.items),
                loaded_at=self._clock(),
                in_flight=False,
                error=None,
                requested=True,
            )
            logger.info(f"Loaded {len(outcome.items)} {kind.value}")
        else:
            self._collections[kind] = replace(
                current, in_flight=False, error=outcome.error, requested=True
            )
            logger.warning(
                f"Fetching {kind.value} failed: {outcome.error.message} "
                f"(keeping {len(current.items)} cached entries)"
            )
