"""订阅列表管理 - 添加、删除、OPML 导入."""

import asyncio
import logging
from collections.abc import Callable

from feedsync.core.errors import DuplicateFeedError
from feedsync.core.storage import StorageService
from feedsync.core.sync import FeedSyncController
from feedsync.fetcher.base import FeedFetcher
from feedsync.fetcher.opml import parse_opml
from feedsync.models.feed import Feed, OutlineEntry
from feedsync.models.state import SessionState

logger = logging.getLogger(__name__)


class SubscriptionManager:
    """
    订阅列表管理.

    每次修改先持久化完整列表，成功后才更新内存中的列表。
    读取列表到写回列表之间持有锁，并发修改不会互相覆盖。
    """

    def __init__(
        self,
        state: SessionState,
        storage: StorageService,
        fetcher: FeedFetcher,
        controller: FeedSyncController,
        outline_parser: Callable[[str], list[OutlineEntry]] = parse_opml,
    ) -> None:
        self.state = state
        self.storage = storage
        self.fetcher = fetcher
        self.controller = controller
        self.outline_parser = outline_parser
        self._lock = asyncio.Lock()

    @property
    def feeds(self) -> list[Feed]:
        return self.state.feeds

    async def load(self) -> list[Feed]:
        """从存储加载订阅列表."""
        self.state.feeds = await self.storage.get_feeds()
        return self.state.feeds

    async def add(self, url: str) -> Feed:
        """添加订阅源（先抓取校验），成功后切换到该 Feed."""
        if self.state.has_url(url):
            raise DuplicateFeedError(url)

        fetched = await self.fetcher.fetch_feed(url)
        feed = Feed.from_url(url, fetched.feed_title)

        async with self._lock:
            # 抓取期间可能已有同一 URL 被添加
            if self.state.has_url(url):
                raise DuplicateFeedError(url)
            await self._save([*self.state.feeds, feed])
        logger.info(f"已添加订阅源: {feed.title} ({url})")

        await self.controller.activate(feed)
        return feed

    async def remove(self, feed_id: str) -> bool:
        """删除订阅源及其缓存，返回是否存在."""
        async with self._lock:
            feed = self.state.find_feed(feed_id)
            if feed is None:
                logger.warning(f"订阅源不存在: {feed_id}")
                return False

            remaining = [f for f in self.state.feeds if f.id != feed_id]
            await self._save(remaining)
        await self.storage.remove_cached_posts(feed.url)
        logger.info(f"已删除订阅源: {feed_id}")

        if self.state.selected_feed_id == feed_id:
            await self.controller.activate(remaining[0] if remaining else None)
        return True

    async def import_from_outline(self, url: str) -> list[Feed]:
        """
        从 OPML 导入订阅，跳过已存在的 URL.

        没有新增时不写存储；导入前没有选中项时切换到第一个新增的 Feed。
        """
        opml_text = await self.fetcher.fetch_opml(url)
        outlines = self.outline_parser(opml_text)

        async with self._lock:
            seen = {f.url for f in self.state.feeds}
            new_feeds: list[Feed] = []
            for outline in outlines:
                if outline.xml_url in seen:
                    continue
                seen.add(outline.xml_url)
                new_feeds.append(outline.to_feed())

            if not new_feeds:
                logger.info(f"OPML 中没有新的订阅源: {url}")
                return []

            had_selection = self.state.selected_feed is not None
            await self._save([*self.state.feeds, *new_feeds])
        logger.info(f"从 OPML 导入了 {len(new_feeds)} 个订阅源")

        if not had_selection:
            await self.controller.activate(new_feeds[0])
        return new_feeds

    async def _save(self, feeds: list[Feed]) -> None:
        await self.storage.save_feeds(feeds)
        self.state.feeds = feeds
