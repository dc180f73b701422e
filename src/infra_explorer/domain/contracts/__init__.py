"""Contracts (protocols) implemented by the application layer."""

from infra_explorer.domain.contracts.collection_cache import CollectionCacheProtocol

__all__ = ["CollectionCacheProtocol"]
