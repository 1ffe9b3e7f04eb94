"""测试配置和 fixtures."""

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from feedsync.core.errors import FetchError
from feedsync.core.read_state import ReadStateTracker
from feedsync.core.storage import SqlKeyValueStore, StorageService
from feedsync.core.subscriptions import SubscriptionManager
from feedsync.core.sync import FeedSyncController
from feedsync.fetcher.base import FeedFetcher
from feedsync.models.feed import Feed, FetchedFeed, Post
from feedsync.models.state import SessionState
from feedsync.models.store import StoreItem  # noqa: F401


class RecordingStore(SqlKeyValueStore):
    """记录写入和删除操作的存储."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        super().__init__(session_factory)
        self.writes: list[str] = []
        self.removals: list[str] = []

    async def set(self, key: str, value: Any) -> Any:
        self.writes.append(key)
        return await super().set(key, value)

    async def remove(self, key: str) -> None:
        self.removals.append(key)
        await super().remove(key)


class FakeFetcher(FeedFetcher):
    """可编程的抓取替身.

    未登记的 URL 抛出 FetchError；登记了 gate 的 URL 会等待 gate 打开后再返回。
    """

    def __init__(self) -> None:
        self.feeds: dict[str, FetchedFeed | Exception] = {}
        self.opml: dict[str, str | Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.feed_calls: list[str] = []
        self.opml_calls: list[str] = []

    async def fetch_feed(self, url: str) -> FetchedFeed:
        self.feed_calls.append(url)
        if url in self.gates:
            await self.gates[url].wait()
        result = self.feeds.get(url, FetchError(f"无法获取订阅源: {url}"))
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_opml(self, url: str) -> str:
        self.opml_calls.append(url)
        result = self.opml.get(url, FetchError(f"无法获取 OPML 文件: {url}"))
        if isinstance(result, Exception):
            raise result
        return result


def make_post(guid: str, feed_title: str = "", **kwargs: Any) -> Post:
    """创建测试用的 Post."""
    return Post(
        guid=guid,
        title=kwargs.pop("title", f"Post {guid}"),
        link=kwargs.pop("link", f"https://example.com/{guid}"),
        feed_title=feed_title,
        **kwargs,
    )


def make_opml(*urls: str) -> str:
    """生成包含指定订阅的 OPML 文本."""
    outlines = "\n".join(
        f'    <outline type="rss" text="Title {i}" xmlUrl="{url}" />'
        for i, url in enumerate(urls)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<opml version="1.0">\n'
        "  <head><title>Test</title></head>\n"
        "  <body>\n"
        f"{outlines}\n"
        "  </body>\n"
        "</opml>\n"
    )


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """创建测试用的内存数据库会话工厂."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    await engine.dispose()


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> RecordingStore:
    return RecordingStore(session_factory)


@pytest.fixture
def storage(store: RecordingStore) -> StorageService:
    return StorageService(store)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def state() -> SessionState:
    return SessionState()


@pytest.fixture
def controller(
    state: SessionState, storage: StorageService, fetcher: FakeFetcher
) -> FeedSyncController:
    return FeedSyncController(state, storage, fetcher)


@pytest.fixture
def subscriptions(
    state: SessionState,
    storage: StorageService,
    fetcher: FakeFetcher,
    controller: FeedSyncController,
) -> SubscriptionManager:
    return SubscriptionManager(state, storage, fetcher, controller)


@pytest.fixture
def read_state(storage: StorageService) -> ReadStateTracker:
    return ReadStateTracker(storage)


@pytest.fixture
def feed_a() -> Feed:
    return Feed(id="A", url="A", title="Feed A")


async def wait_for_fetch(fetcher: FakeFetcher, url: str, count: int = 1) -> None:
    """等待 fetcher 收到指定次数的 url 请求."""
    for _ in range(500):
        if fetcher.feed_calls.count(url) >= count:
            return
        await asyncio.sleep(0.01)
    msg = f"未等到对 {url} 的抓取"
    raise AssertionError(msg)
