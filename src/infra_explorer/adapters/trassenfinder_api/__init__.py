"""Trassenfinder infrastructure API adapter."""

from infra_explorer.adapters.trassenfinder_api.client import TrassenfinderClient

__all__ = ["TrassenfinderClient"]
