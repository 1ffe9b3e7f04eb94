"""Feed 抓取抽象基类."""

from abc import ABC, abstractmethod

from feedsync.models.feed import FetchedFeed


class FeedFetcher(ABC):
    """Feed 与 OPML 抓取者，失败时抛出 FetchError."""

    @abstractmethod
    async def fetch_feed(self, url: str) -> FetchedFeed:
        """抓取并解析 Feed."""
        ...

    @abstractmethod
    async def fetch_opml(self, url: str) -> str:
        """抓取 OPML 原始文本."""
        ...
