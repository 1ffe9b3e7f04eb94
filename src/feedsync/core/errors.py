"""订阅同步相关异常."""


class FeedSyncError(Exception):
    """同步引擎异常基类."""


class DuplicateFeedError(FeedSyncError):
    """订阅源已存在."""

    def __init__(self, url: str) -> None:
        super().__init__(f"订阅源已存在: {url}")
        self.url = url


class FetchError(FeedSyncError):
    """抓取 Feed 或 OPML 失败（网络或远端错误）."""


class ParseError(FeedSyncError):
    """OPML 格式错误."""


class InactiveFeedError(FeedSyncError):
    """对非当前选中的 Feed 调用了 refresh."""
