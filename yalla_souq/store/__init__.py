"""Marketplace ads and categories: the in-memory store and the Supabase-backed repository."""

from yalla_souq.store.base import BaseAdRepository
from yalla_souq.store.mock_store import MockDataStore
from yalla_souq.store.models import Ad, AdCreate, AdFilters, AdPage, AdUpdate, Category, StoreResult, StoreStats

__all__ = [
    "BaseAdRepository",
    "MockDataStore",
    "Ad",
    "AdCreate",
    "AdFilters",
    "AdPage",
    "AdUpdate",
    "Category",
    "StoreResult",
    "StoreStats",
]
