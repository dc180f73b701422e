"""Infrastructure repository port."""

from typing import Protocol

from infra_explorer.domain.models.collection import CollectionKind, Record
from infra_explorer.domain.models.segment import Segment
from infra_explorer.domain.models.station import Station


class InfrastructureRepository(Protocol):
    """Port for read-only access to the remote infrastructure data.

    Implementations raise ``FetchError`` on any failure and never retry.
    """

    async def fetch_stations(self) -> list[Station]:
        """Fetch the complete station collection."""
        ...

    async def fetch_segments(self) -> list[Segment]:
        """Fetch the complete segment collection."""
        ...

    async def fetch(self, kind: CollectionKind) -> list[Record]:
        """Fetch the collection of the given kind."""
        ...
