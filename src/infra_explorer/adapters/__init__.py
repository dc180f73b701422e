"""Adapters layer - external system integrations."""

from infra_explorer.adapters.config import AppConfig
from infra_explorer.adapters.trassenfinder_api import TrassenfinderClient

__all__ = [
    "AppConfig",
    "TrassenfinderClient",
]
