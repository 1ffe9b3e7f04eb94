"""Feed 同步控制器 - 先展示缓存，后台刷新."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from feedsync.core.cache_policy import CACHE_TTL, is_stale
from feedsync.core.errors import FetchError, InactiveFeedError
from feedsync.core.storage import StorageService
from feedsync.fetcher.base import FeedFetcher
from feedsync.models.feed import Feed, Post
from feedsync.models.state import SessionState, SyncPhase

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FeedSyncController:
    """
    管理当前 Feed 的展示状态.

    状态流转:
        IDLE -> LOADING -> SHOWING_CACHED | SHOWING_EMPTY -> REFRESHING
             -> SHOWING_FRESH | SHOWING_CACHED | SHOWING_CACHED_STALE | SHOWING_EMPTY

    每次 activate 生成一个新的代数（generation），抓取结果只在代数未变时
    写入展示状态；过期的结果仍会写入缓存。
    """

    def __init__(
        self,
        state: SessionState,
        storage: StorageService,
        fetcher: FeedFetcher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.state = state
        self.storage = storage
        self.fetcher = fetcher
        self._clock = clock
        self._generation = 0

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def activate(self, feed: Feed | None) -> None:
        """切换到指定 Feed（None 表示取消选中）."""
        self._generation += 1
        generation = self._generation
        state = self.state

        if feed is None:
            state.selected_feed = None
            state.posts = []
            state.loading = False
            state.error = None
            state.is_data_stale = False
            state.refreshing_feed_id = None
            state.phase = SyncPhase.IDLE
            await self.storage.set_last_selected_feed_id(None)
            return

        state.loading = True
        state.error = None
        state.selected_feed = feed
        state.posts = []
        state.is_data_stale = False
        state.refreshing_feed_id = None
        state.phase = SyncPhase.LOADING
        await self.storage.set_last_selected_feed_id(feed.id)

        cached = await self.storage.get_cached_posts(feed.url)

        # 已被后续切换取代时不再展示缓存，但仍抓取并更新该 Feed 的缓存
        if self._is_current(generation):
            # 有缓存时立即展示，不等待网络
            if cached is not None:
                state.posts = list(cached.posts)
                state.is_data_stale = is_stale(cached, self._clock(), CACHE_TTL)
                state.loading = False
                state.phase = SyncPhase.SHOWING_CACHED
            else:
                state.phase = SyncPhase.SHOWING_EMPTY
            state.refreshing_feed_id = feed.id
            state.phase = SyncPhase.REFRESHING

        if cached is None:
            fallback_phase = SyncPhase.SHOWING_EMPTY
        elif state.is_data_stale:
            fallback_phase = SyncPhase.SHOWING_CACHED_STALE
        else:
            fallback_phase = SyncPhase.SHOWING_CACHED

        try:
            posts = await self._fetch_posts(feed)
        except FetchError as e:
            logger.warning(f"刷新 Feed 失败 {feed.url}: {e}")
            if self._is_current(generation):
                state.error = str(e)
                state.phase = fallback_phase
        else:
            await self._commit(generation, feed, posts)
        finally:
            if self._is_current(generation):
                state.loading = False
                state.refreshing_feed_id = None

    async def refresh(self, feed: Feed) -> None:
        """
        手动刷新当前 Feed.

        不修改 loading 和 error；抓取失败时向调用方重新抛出。
        """
        state = self.state
        if state.selected_feed_id != feed.id:
            msg = f"只能刷新当前选中的 Feed: {feed.id}"
            raise InactiveFeedError(msg)

        generation = self._generation
        previous_phase = state.phase
        state.refreshing_feed_id = feed.id
        state.phase = SyncPhase.REFRESHING
        try:
            posts = await self._fetch_posts(feed)
        except FetchError as e:
            logger.warning(f"手动刷新 Feed 失败 {feed.url}: {e}")
            if self._is_current(generation):
                state.phase = previous_phase
            raise
        else:
            await self._commit(generation, feed, posts)
        finally:
            if self._is_current(generation):
                state.refreshing_feed_id = None

    def set_loading(self, loading: bool) -> None:
        """设置加载标志（用于启动加载阶段）."""
        self.state.loading = loading

    def report_error(self, message: str) -> None:
        """记录与具体 Feed 无关的错误（如默认订阅导入失败）."""
        self.state.error = message
        self.state.loading = False

    async def _fetch_posts(self, feed: Feed) -> list[Post]:
        """抓取 Feed，并为每篇文章标注 Feed 标题."""
        fetched = await self.fetcher.fetch_feed(feed.url)
        feed_title = fetched.feed_title or feed.title
        return [p.model_copy(update={"feed_title": feed_title}) for p in fetched.items]

    async def _commit(self, generation: int, feed: Feed, posts: list[Post]) -> None:
        """展示新文章（仅当未被后续切换取代）并写入缓存."""
        if self._is_current(generation):
            self.state.posts = posts
            self.state.is_data_stale = False
            self.state.phase = SyncPhase.SHOWING_FRESH
        else:
            logger.info(f"Feed 已切换，丢弃 {feed.url} 的抓取结果")

        await self.storage.cache_posts(feed.url, posts, now=self._clock())
