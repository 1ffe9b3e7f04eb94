"""数据模型."""

from feedsync.models.database import async_session_maker, init_db
from feedsync.models.feed import CachedPostsEntry, Feed, FetchedFeed, OutlineEntry, Post
from feedsync.models.state import SessionState, SyncPhase
from feedsync.models.store import StoreItem

__all__ = [
    "CachedPostsEntry",
    "Feed",
    "FetchedFeed",
    "OutlineEntry",
    "Post",
    "SessionState",
    "StoreItem",
    "SyncPhase",
    "async_session_maker",
    "init_db",
]
