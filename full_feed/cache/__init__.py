"""
In-memory article cache.

A single CacheActor task owns the store; other components reach it
through a CacheHandle.
"""

from .actor import CacheActor, CacheHandle
from .codec import decode, encode
from .messages import Get, Set
from .store import CacheEntry, CacheStore

__all__ = [
    "CacheActor",
    "CacheHandle",
    "CacheEntry",
    "CacheStore",
    "Get",
    "Set",
    "encode",
    "decode",
]
