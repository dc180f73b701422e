"""Ports (interfaces) for the ports-and-adapters architecture."""

from infra_explorer.domain.ports.infrastructure_repository import InfrastructureRepository
from infra_explorer.domain.ports.terminal import Terminal

__all__ = [
    "InfrastructureRepository",
    "Terminal",
]
