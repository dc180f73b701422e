"""Events consumed by the explorer event loop."""

from dataclasses import dataclass
from typing import Union

from infra_explorer.domain.models.collection import CollectionKind, FetchOutcome


@dataclass(frozen=True)
class KeyPressed:
    """A normalised key name, e.g. ``"q"``, ``"up"`` or ``"page_down"``."""

    key: str


@dataclass(frozen=True)
class FetchCompleted:
    """An asynchronous fetch finished; carries its outcome to the loop."""

    kind: CollectionKind
    outcome: FetchOutcome


Event = Union[KeyPressed, FetchCompleted]
