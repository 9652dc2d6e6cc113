"""
The store module holds the assets of a single generation pass.

- Uses the asset type as the key for every entry, so each type has a single
  canonical instance per pass.
- Tracks the generation status of each asset type (pending, ready, failed).
- Provides listeners so callers can observe assets as they are generated.

A store is created for one pass and discarded with it. It has a single
writer (the resolver) and is not safe for concurrent use.
"""

from .store import AssetStore, StoreEvent, Status, StatusInfo
from .in_memory import InMemoryAssetStore

__all__ = [
    "AssetStore",
    "StoreEvent",
    "InMemoryAssetStore",
    "Status",
    "StatusInfo",
]
