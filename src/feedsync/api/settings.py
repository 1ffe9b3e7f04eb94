"""设置 API."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from feedsync.core.reader import FeedReader, get_reader

router = APIRouter(prefix="/api/settings", tags=["settings"])


class DisplayCountRequest(BaseModel):
    """显示数量更新请求."""

    count: int = Field(..., ge=1, description="每页显示的文章数")


@router.get("/display-count")
async def get_display_count(reader: FeedReader = Depends(get_reader)) -> dict:
    """获取显示数量."""
    return {"count": await reader.storage.get_display_count()}


@router.put("/display-count")
async def set_display_count(
    request: DisplayCountRequest,
    reader: FeedReader = Depends(get_reader),
) -> dict:
    """更新显示数量."""
    count = await reader.storage.set_display_count(request.count)
    return {"count": count}
