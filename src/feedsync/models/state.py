"""会话同步状态."""

from dataclasses import dataclass, field
from enum import Enum

from feedsync.models.feed import Feed, Post


class SyncPhase(str, Enum):
    """当前 Feed 的展示阶段."""

    IDLE = "idle"
    LOADING = "loading"
    SHOWING_CACHED = "showing_cached"
    SHOWING_EMPTY = "showing_empty"
    REFRESHING = "refreshing"
    SHOWING_FRESH = "showing_fresh"
    SHOWING_CACHED_STALE = "showing_cached_stale"


@dataclass
class SessionState:
    """会话状态（不持久化）.

    feeds 只由 SubscriptionManager 修改，其余字段只由 FeedSyncController 修改。
    """

    feeds: list[Feed] = field(default_factory=list)
    selected_feed: Feed | None = None
    posts: list[Post] = field(default_factory=list)
    loading: bool = False
    error: str | None = None
    is_data_stale: bool = False
    refreshing_feed_id: str | None = None
    phase: SyncPhase = SyncPhase.IDLE

    @property
    def selected_feed_id(self) -> str | None:
        """当前选中的 Feed ID."""
        return self.selected_feed.id if self.selected_feed else None

    def find_feed(self, feed_id: str) -> Feed | None:
        """按 ID 查找已订阅的 Feed."""
        return next((f for f in self.feeds if f.id == feed_id), None)

    def has_url(self, url: str) -> bool:
        """是否已订阅该 URL."""
        return any(f.url == url for f in self.feeds)
