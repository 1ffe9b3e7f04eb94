"""基于 httpx + feedparser 的 Feed 抓取."""

import logging
from datetime import UTC, datetime
from typing import Any

import feedparser
import httpx

from feedsync.core.errors import FetchError
from feedsync.fetcher.base import FeedFetcher
from feedsync.models.feed import FetchedFeed, Post
from feedsync.utils.html_parser import extract_first_image, html_to_text

logger = logging.getLogger(__name__)


class HttpFeedFetcher(FeedFetcher):
    """通过 HTTP 抓取 RSS/Atom Feed 和 OPML 文件."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"User-Agent": user_agent} if user_agent else None
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers=headers,
            transport=transport,
        )

    async def close(self) -> None:
        """关闭客户端."""
        await self._client.aclose()

    async def fetch_feed(self, url: str) -> FetchedFeed:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"抓取 Feed 失败 {url}: {e}")
            msg = f"无法获取订阅源，请检查 URL 和网络连接。详情: {e}"
            raise FetchError(msg) from e

        parsed = feedparser.parse(response.content)
        feed_title = parsed.feed.get("title") or None
        if parsed.bozo and not parsed.entries and not feed_title:
            msg = f"无法解析订阅源 {url}: {parsed.get('bozo_exception')}"
            raise FetchError(msg)

        items = [self._parse_entry(entry, feed_title or "") for entry in parsed.entries]
        return FetchedFeed(feed_title=feed_title, items=items)

    async def fetch_opml(self, url: str) -> str:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"抓取 OPML 失败 {url}: {e}")
            msg = f"无法获取 OPML 文件。详情: {e}"
            raise FetchError(msg) from e
        return response.text

    def _parse_entry(self, entry: Any, feed_title: str) -> Post:
        """将 feedparser 条目转换为 Post."""
        link = entry.get("link") or ""

        # 正文优先，其次摘要
        contents = entry.get("content") or []
        description = entry.get("summary") or ""
        content = contents[0].get("value", "") if contents else description

        return Post(
            guid=entry.get("id") or entry.get("guid") or link,
            title=entry.get("title") or "",
            link=link,
            iso_date=_iso_date(entry),
            content=content,
            summary=html_to_text(description),
            first_image=_thumbnail(entry) or extract_first_image(content),
            author=entry.get("author"),
            feed_title=feed_title,
        )


def _iso_date(entry: Any) -> str | None:
    """发布时间（缺省用更新时间），UTC ISO-8601."""
    stamp = entry.get("published_parsed") or entry.get("updated_parsed")
    if not stamp:
        return None
    return datetime(*stamp[:6], tzinfo=UTC).isoformat()


def _thumbnail(entry: Any) -> str | None:
    thumbnails = entry.get("media_thumbnail") or []
    if thumbnails and thumbnails[0].get("url"):
        return thumbnails[0]["url"]
    return None
