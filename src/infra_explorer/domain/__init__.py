"""Domain layer - records, errors, events and ports."""

from infra_explorer.domain.models import (
    CollectionKind,
    CollectionView,
    FetchError,
    FetchOutcome,
    Segment,
    Station,
)
from infra_explorer.domain.ports import InfrastructureRepository, Terminal

__all__ = [
    "CollectionKind",
    "CollectionView",
    "FetchError",
    "FetchOutcome",
    "InfrastructureRepository",
    "Segment",
    "Station",
    "Terminal",
]
