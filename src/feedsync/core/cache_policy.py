"""文章缓存新鲜度判定."""

from datetime import datetime, timedelta

from feedsync.models.feed import CachedPostsEntry

# 缓存有效期（全局固定）
CACHE_TTL = timedelta(minutes=15)


def is_stale(
    entry: CachedPostsEntry,
    now: datetime,
    ttl: timedelta = CACHE_TTL,
) -> bool:
    """
    判断缓存是否过期.

    缓存年龄严格大于 ttl 时视为过期，等于 ttl 时仍然有效。
    """
    return now - entry.timestamp > ttl
