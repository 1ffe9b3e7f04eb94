"""文章 API."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from feedsync.core.errors import FetchError
from feedsync.core.reader import FeedReader, get_reader

router = APIRouter(prefix="/api/posts", tags=["posts"])


class MarkReadRequest(BaseModel):
    """标记已读请求."""

    guid: str


async def state_payload(reader: FeedReader, limit: int | None = None) -> dict:
    """当前会话状态及文章列表."""
    state = reader.state
    if limit is None:
        limit = await reader.storage.get_display_count()

    return {
        "selected_feed_id": state.selected_feed_id,
        "phase": state.phase.value,
        "loading": state.loading,
        "error": state.error,
        "is_data_stale": state.is_data_stale,
        "refreshing_feed_id": state.refreshing_feed_id,
        "total": len(state.posts),
        "items": [
            {**post.model_dump(), "is_read": reader.read_state.is_read(post.guid)}
            for post in state.posts[:limit]
        ],
    }


@router.get("")
async def list_posts(
    limit: int | None = Query(None, ge=1, description="返回数量，默认使用显示数量设置"),
    reader: FeedReader = Depends(get_reader),
) -> dict:
    """获取当前 Feed 的文章及同步状态."""
    return await state_payload(reader, limit)


@router.post("/refresh")
async def refresh_posts(reader: FeedReader = Depends(get_reader)) -> dict:
    """手动刷新当前 Feed."""
    feed = reader.state.selected_feed
    if feed is None:
        raise HTTPException(status_code=409, detail="当前没有选中的 Feed")

    try:
        await reader.sync.refresh(feed)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return await state_payload(reader)


@router.post("/read")
async def mark_read(
    request: MarkReadRequest,
    reader: FeedReader = Depends(get_reader),
) -> dict:
    """标记文章已读."""
    await reader.read_state.mark_read(request.guid)
    return {"guid": request.guid, "is_read": True}
