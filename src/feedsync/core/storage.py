"""持久化存储 - 键值存储及其类型化访问."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from feedsync.models.feed import CachedPostsEntry, Feed, Post
from feedsync.models.store import StoreItem

logger = logging.getLogger(__name__)

FEEDS_KEY = "user_feeds"
LAST_FEED_KEY = "last_selected_feed"
POST_CACHE_PREFIX = "post_cache_"
DISPLAY_COUNT_KEY = "display_count"
READ_POSTS_KEY = "read_posts_guids"

DEFAULT_DISPLAY_COUNT = 24


class KeyValueStore(ABC):
    """异步键值存储，值需可 JSON 序列化."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """读取，不存在时返回 None."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> Any:
        """写入并返回写入的值."""
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        """删除，不存在时忽略."""
        ...


class SqlKeyValueStore(KeyValueStore):
    """基于数据库表 kv_store 的键值存储（SQLite）."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> Any | None:
        async with self._session_factory() as session:
            item = await session.get(StoreItem, key)
            if item is None:
                return None
            return json.loads(item.value)

    async def set(self, key: str, value: Any) -> Any:
        encoded = json.dumps(value, ensure_ascii=False)
        now = datetime.now(UTC)
        # 单条语句完成插入或覆盖，交错写入同一个键时不会冲突
        stmt = (
            insert(StoreItem)
            .values(key=key, value=encoded, updated_at=now)
            .on_conflict_do_update(
                index_elements=["key"],
                set_={"value": encoded, "updated_at": now},
            )
        )
        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()
        return value

    async def remove(self, key: str) -> None:
        async with self._session_factory() as session:
            item = await session.get(StoreItem, key)
            if item is not None:
                await session.delete(item)
                await session.commit()


def cache_key(feed_url: str) -> str:
    """Feed 文章缓存的存储键."""
    return f"{POST_CACHE_PREFIX}{feed_url}"


class StorageService:
    """订阅、选中项、文章缓存、已读记录和显示数量的类型化访问."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # 订阅列表
    async def save_feeds(self, feeds: list[Feed]) -> list[Feed]:
        await self.store.set(FEEDS_KEY, [f.model_dump(mode="json") for f in feeds])
        return feeds

    async def get_feeds(self) -> list[Feed]:
        data = await self.store.get(FEEDS_KEY)
        return [Feed.model_validate(f) for f in data or []]

    # 上次选中的 Feed
    async def set_last_selected_feed_id(self, feed_id: str | None) -> str | None:
        return await self.store.set(LAST_FEED_KEY, feed_id)

    async def get_last_selected_feed_id(self) -> str | None:
        return await self.store.get(LAST_FEED_KEY)

    # 文章缓存
    async def cache_posts(
        self,
        feed_url: str,
        posts: list[Post],
        now: datetime | None = None,
    ) -> CachedPostsEntry:
        """写入缓存，时间戳为当前时间."""
        entry = CachedPostsEntry(timestamp=now or datetime.now(UTC), posts=posts)
        await self.store.set(cache_key(feed_url), entry.model_dump(mode="json"))
        return entry

    async def get_cached_posts(self, feed_url: str) -> CachedPostsEntry | None:
        data = await self.store.get(cache_key(feed_url))
        if not data:
            return None
        return CachedPostsEntry.model_validate(data)

    async def remove_cached_posts(self, feed_url: str) -> None:
        await self.store.remove(cache_key(feed_url))

    # 显示数量
    async def set_display_count(self, count: int) -> int:
        if count < 1:
            msg = f"显示数量必须为正整数: {count}"
            raise ValueError(msg)
        return await self.store.set(DISPLAY_COUNT_KEY, count)

    async def get_display_count(self) -> int:
        count = await self.store.get(DISPLAY_COUNT_KEY)
        return DEFAULT_DISPLAY_COUNT if count is None else int(count)

    # 已读记录
    async def save_read_post_guids(self, guids: list[str]) -> list[str]:
        return await self.store.set(READ_POSTS_KEY, guids)

    async def get_read_post_guids(self) -> list[str]:
        return list(await self.store.get(READ_POSTS_KEY) or [])
