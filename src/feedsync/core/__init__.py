"""核心业务逻辑."""

from feedsync.core.errors import (
    DuplicateFeedError,
    FeedSyncError,
    FetchError,
    InactiveFeedError,
    ParseError,
)
from feedsync.core.cache_policy import CACHE_TTL, is_stale
from feedsync.core.read_state import ReadStateTracker
from feedsync.core.reader import FeedReader
from feedsync.core.storage import KeyValueStore, SqlKeyValueStore, StorageService
from feedsync.core.subscriptions import SubscriptionManager
from feedsync.core.sync import FeedSyncController

__all__ = [
    "CACHE_TTL",
    "DuplicateFeedError",
    "FeedReader",
    "FeedSyncController",
    "FeedSyncError",
    "FetchError",
    "InactiveFeedError",
    "KeyValueStore",
    "ParseError",
    "ReadStateTracker",
    "SqlKeyValueStore",
    "StorageService",
    "SubscriptionManager",
    "is_stale",
]
