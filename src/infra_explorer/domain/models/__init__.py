"""Domain models for the infrastructure explorer."""

from infra_explorer.domain.models.collection import (
    CollectionKind,
    CollectionView,
    FetchOutcome,
    Record,
)
from infra_explorer.domain.models.events import Event, FetchCompleted, KeyPressed
from infra_explorer.domain.models.fetch_error import FetchError, FetchErrorKind
from infra_explorer.domain.models.frame import Frame, FrameLine, LineStyle
from infra_explorer.domain.models.segment import Segment
from infra_explorer.domain.models.station import Station

__all__ = [
    "CollectionKind",
    "CollectionView",
    "Event",
    "FetchCompleted",
    "FetchError",
    "FetchErrorKind",
    "FetchOutcome",
    "Frame",
    "FrameLine",
    "KeyPressed",
    "LineStyle",
    "Record",
    "Segment",
    "Station",
]
