"""Cache engines for store actions."""

from store_actions.caches.base import CacheEngine, Disposable
from store_actions.caches.conditional import ConditionalCache
from store_actions.caches.keyed import KeyedCache
from store_actions.caches.results import ResultsCache

__all__ = [
    "CacheEngine",
    "ConditionalCache",
    "Disposable",
    "KeyedCache",
    "ResultsCache",
]
