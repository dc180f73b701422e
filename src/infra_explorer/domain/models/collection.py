"""Collection snapshot domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

from infra_explorer.domain.models.fetch_error import FetchError
from infra_explorer.domain.models.segment import Segment
from infra_explorer.domain.models.station import Station

Record = Union[Station, Segment]


class CollectionKind(str, Enum):
    """The entity kinds the explorer can browse; also names the active view."""

    STATIONS = "stations"
    SEGMENTS = "segments"

    @property
    def title(self) -> str:
        return "Stations" if self is CollectionKind.STATIONS else "Segments"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fetch: either records or the error that prevented them."""

    items: tuple[Record, ...] = ()
    error: FetchError | None = None

    @classmethod
    def succeeded(cls, items: "list[Record] | tuple[Record, ...]") -> "FetchOutcome":
        return cls(items=tuple(items))

    @classmethod
    def failed(cls, error: FetchError) -> "FetchOutcome":
        return cls(error=error)


@dataclass(frozen=True)
class CollectionView:
    """Immutable snapshot of one cached collection and its fetch metadata.

    Shapes a snapshot can take:
    - initial: no items, no error, not in flight
    - loaded: items from the last successful fetch, no error
    - stale-on-error: items from an earlier fetch (possibly none) plus the error
    """

    kind: CollectionKind
    items: tuple[Record, ...] = ()
    loaded_at: datetime | None = None
    in_flight: bool = False
    error: FetchError | None = None
    requested: bool = False
    _positions: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_positions", {item.id: index for index, item in enumerate(self.items)}
        )

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def is_loaded(self) -> bool:
        """Whether at least one fetch of this collection succeeded."""
        return self.loaded_at is not None

    @property
    def is_stale(self) -> bool:
        """Whether the displayed items predate a failed refresh."""
        return self.error is not None and self.is_loaded

    def index_of(self, item_id: str) -> int | None:
        return self._positions.get(item_id)

    def find(self, item_id: str) -> Record | None:
        index = self.index_of(item_id)
        return None if index is None else self.items[index]
