"""Application layer - the interactive browsing engine."""

from infra_explorer.application.collection_cache import CollectionCache
from infra_explorer.application.event_loop import ExplorerApp
from infra_explorer.application.input_dispatcher import Action, InputDispatcher
from infra_explorer.application.navigation import NavigationState, StatusPhase, ViewStatus
from infra_explorer.application.renderer import render

__all__ = [
    "Action",
    "CollectionCache",
    "ExplorerApp",
    "InputDispatcher",
    "NavigationState",
    "StatusPhase",
    "ViewStatus",
    "render",
]
