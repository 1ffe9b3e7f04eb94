"""测试 HttpFeedFetcher."""

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio

from feedsync.core.errors import FetchError
from feedsync.fetcher.http import HttpFeedFetcher

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com/</link>
    <item>
      <title>First</title>
      <link>https://example.com/first</link>
      <guid>urn:first</guid>
      <pubDate>Wed, 01 May 2024 10:30:00 GMT</pubDate>
      <author>alice@example.com (Alice)</author>
      <description><![CDATA[<p>Hello <img src="https://img.example/1.png"></p>]]></description>
    </item>
    <item>
      <title>Second</title>
      <link>https://example.com/second</link>
      <description>No guid here</description>
      <media:thumbnail url="https://img.example/thumb.png"/>
    </item>
  </channel>
</rss>
"""

Handler = Callable[[httpx.Request], httpx.Response]


@pytest_asyncio.fixture
async def make_fetcher() -> AsyncGenerator[Callable[[Handler], HttpFeedFetcher], None]:
    """创建使用 MockTransport 的抓取器."""
    fetchers: list[HttpFeedFetcher] = []

    def factory(handler: Handler) -> HttpFeedFetcher:
        fetcher = HttpFeedFetcher(timeout=5, transport=httpx.MockTransport(handler))
        fetchers.append(fetcher)
        return fetcher

    yield factory

    for fetcher in fetchers:
        await fetcher.close()


class TestFetchFeed:
    """测试 fetch_feed."""

    async def test_parses_items(self, make_fetcher) -> None:
        fetcher = make_fetcher(lambda request: httpx.Response(200, text=RSS))

        result = await fetcher.fetch_feed("https://example.com/rss")

        assert result.feed_title == "Example Blog"
        first, second = result.items
        assert first.guid == "urn:first"
        assert first.title == "First"
        assert first.link == "https://example.com/first"
        assert first.iso_date == "2024-05-01T10:30:00+00:00"
        assert first.first_image == "https://img.example/1.png"
        assert first.feed_title == "Example Blog"
        assert first.summary == "Hello"

    async def test_guid_falls_back_to_link(self, make_fetcher) -> None:
        fetcher = make_fetcher(lambda request: httpx.Response(200, text=RSS))

        result = await fetcher.fetch_feed("https://example.com/rss")

        second = result.items[1]
        assert second.guid == "https://example.com/second"
        assert second.iso_date is None
        assert second.first_image == "https://img.example/thumb.png"

    async def test_http_error_raises_fetch_error(self, make_fetcher) -> None:
        fetcher = make_fetcher(lambda request: httpx.Response(404))

        with pytest.raises(FetchError, match="404"):
            await fetcher.fetch_feed("https://example.com/missing")

    async def test_transport_error_raises_fetch_error(self, make_fetcher) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("network down", request=request)

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchError, match="network down"):
            await fetcher.fetch_feed("https://example.com/rss")

    async def test_malformed_url_raises_fetch_error(self, make_fetcher) -> None:
        fetcher = make_fetcher(lambda request: httpx.Response(200, text=RSS))

        with pytest.raises(FetchError):
            await fetcher.fetch_feed("http://[::1/rss")

    async def test_unparseable_body_raises_fetch_error(self, make_fetcher) -> None:
        fetcher = make_fetcher(
            lambda request: httpx.Response(200, text="<html><body><p>oops")
        )

        with pytest.raises(FetchError):
            await fetcher.fetch_feed("https://example.com/page")


class TestFetchOpml:
    """测试 fetch_opml."""

    async def test_returns_raw_text(self, make_fetcher) -> None:
        fetcher = make_fetcher(lambda request: httpx.Response(200, text="<opml/>"))
        assert await fetcher.fetch_opml("https://example.com/a.opml") == "<opml/>"

    async def test_error_status_raises_fetch_error(self, make_fetcher) -> None:
        fetcher = make_fetcher(lambda request: httpx.Response(500))

        with pytest.raises(FetchError):
            await fetcher.fetch_opml("https://example.com/a.opml")

    async def test_malformed_url_raises_fetch_error(self, make_fetcher) -> None:
        fetcher = make_fetcher(lambda request: httpx.Response(200, text="<opml/>"))

        with pytest.raises(FetchError):
            await fetcher.fetch_opml("http://[::1/a.opml")
