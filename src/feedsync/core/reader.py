"""阅读器会话 - 组合订阅管理、同步控制与已读记录."""

import logging

from feedsync.core.errors import FetchError, ParseError
from feedsync.core.read_state import ReadStateTracker
from feedsync.core.storage import StorageService
from feedsync.core.subscriptions import SubscriptionManager
from feedsync.core.sync import FeedSyncController
from feedsync.fetcher.base import FeedFetcher
from feedsync.models.state import SessionState

logger = logging.getLogger(__name__)

DEFAULT_FEEDS_ERROR = "无法加载默认订阅，请手动添加订阅源。"


class FeedReader:
    """一个阅读会话."""

    def __init__(
        self,
        storage: StorageService,
        fetcher: FeedFetcher,
        default_opml_url: str | None = None,
    ) -> None:
        self.state = SessionState()
        self.storage = storage
        self.fetcher = fetcher
        self.default_opml_url = default_opml_url
        self.sync = FeedSyncController(self.state, storage, fetcher)
        self.subscriptions = SubscriptionManager(
            self.state, storage, fetcher, self.sync
        )
        self.read_state = ReadStateTracker(storage)

    async def load(self) -> None:
        """
        加载初始数据.

        有订阅时切换到上次选中的 Feed（不存在则第一个）；
        没有订阅时尝试导入默认 OPML。
        """
        self.sync.set_loading(True)
        await self.read_state.load()
        feeds = await self.subscriptions.load()

        if feeds:
            last_id = await self.storage.get_last_selected_feed_id()
            feed = (last_id and self.state.find_feed(last_id)) or feeds[0]
            await self.sync.activate(feed)
            return

        if not self.default_opml_url:
            self.sync.set_loading(False)
            return

        try:
            await self.subscriptions.import_from_outline(self.default_opml_url)
        except (FetchError, ParseError) as e:
            logger.error(f"加载默认 OPML 失败: {e}")
            self.sync.report_error(DEFAULT_FEEDS_ERROR)
        else:
            if self.state.selected_feed is None:
                self.sync.set_loading(False)


# 全局会话
_reader: FeedReader | None = None


def get_reader() -> FeedReader:
    """获取当前阅读会话（用于依赖注入）."""
    if _reader is None:
        msg = "阅读会话未初始化"
        raise RuntimeError(msg)
    return _reader


def set_reader(reader: FeedReader | None) -> None:
    """设置当前阅读会话."""
    global _reader
    _reader = reader
