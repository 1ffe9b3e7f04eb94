"""Feed 订阅源 API."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from feedsync.api.posts import state_payload
from feedsync.core.errors import DuplicateFeedError, FetchError, ParseError
from feedsync.core.reader import FeedReader, get_reader

router = APIRouter(prefix="/api/feeds", tags=["feeds"])


class AddFeedRequest(BaseModel):
    """添加订阅请求."""

    url: str


class ImportRequest(BaseModel):
    """OPML 导入请求."""

    url: str


class SelectRequest(BaseModel):
    """切换 Feed 请求，feed_id 为空表示取消选中."""

    feed_id: str | None = None


@router.get("")
async def list_feeds(reader: FeedReader = Depends(get_reader)) -> dict:
    """获取订阅列表."""
    state = reader.state
    return {
        "total": len(state.feeds),
        "selected_feed_id": state.selected_feed_id,
        "items": [feed.model_dump() for feed in state.feeds],
    }


@router.post("", status_code=201)
async def add_feed(
    request: AddFeedRequest,
    reader: FeedReader = Depends(get_reader),
) -> dict:
    """添加订阅源."""
    try:
        feed = await reader.subscriptions.add(request.url)
    except DuplicateFeedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except FetchError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return feed.model_dump()


@router.delete("")
async def remove_feed(
    feed_id: str = Query(..., description="Feed ID（即 URL）"),
    reader: FeedReader = Depends(get_reader),
) -> dict:
    """删除订阅源."""
    if not await reader.subscriptions.remove(feed_id):
        raise HTTPException(status_code=404, detail="Feed 不存在")

    return {"id": feed_id, "selected_feed_id": reader.state.selected_feed_id}


@router.post("/import")
async def import_opml(
    request: ImportRequest,
    reader: FeedReader = Depends(get_reader),
) -> dict:
    """从 OPML 导入订阅."""
    try:
        feeds = await reader.subscriptions.import_from_outline(request.url)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except ParseError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return {
        "imported": len(feeds),
        "items": [feed.model_dump() for feed in feeds],
    }


@router.post("/select")
async def select_feed(
    request: SelectRequest,
    reader: FeedReader = Depends(get_reader),
) -> dict:
    """切换当前 Feed."""
    feed = None
    if request.feed_id is not None:
        feed = reader.state.find_feed(request.feed_id)
        if feed is None:
            raise HTTPException(status_code=404, detail="Feed 不存在")

    await reader.sync.activate(feed)
    return await state_payload(reader)
