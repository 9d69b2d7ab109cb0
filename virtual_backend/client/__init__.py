"""Async client for the virtual backend."""

from virtual_backend.client.cache import QueryCache
from virtual_backend.client.client import VirtualClient
from virtual_backend.client.query_builder import QueryBuilder

__all__ = ["QueryBuilder", "QueryCache", "VirtualClient"]
