"""Feed / OPML 抓取与解析."""

from feedsync.fetcher.base import FeedFetcher
from feedsync.fetcher.http import HttpFeedFetcher
from feedsync.fetcher.opml import parse_opml

__all__ = [
    "FeedFetcher",
    "HttpFeedFetcher",
    "parse_opml",
]
