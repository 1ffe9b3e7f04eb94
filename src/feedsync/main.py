"""feedsync 主应用入口."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from feedsync.api import feeds, posts, settings
from feedsync.config import get_settings
from feedsync.core.reader import FeedReader, set_reader
from feedsync.core.storage import SqlKeyValueStore, StorageService
from feedsync.fetcher.http import HttpFeedFetcher
from feedsync.models.database import async_session_maker, close_db, init_db

# 配置日志
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """应用生命周期管理."""
    app_settings = get_settings()

    # 启动时初始化
    logger.info("正在初始化存储...")
    await init_db(app_settings.database_url)

    fetcher = HttpFeedFetcher(
        timeout=app_settings.fetch_timeout_seconds,
        user_agent=app_settings.user_agent,
    )
    storage = StorageService(SqlKeyValueStore(async_session_maker()))
    reader = FeedReader(storage, fetcher, app_settings.default_opml_url)
    set_reader(reader)

    logger.info("正在加载订阅...")
    await reader.load()

    logger.info("feedsync 启动完成！")
    yield

    # 关闭时清理
    logger.info("正在关闭...")
    set_reader(None)
    await fetcher.close()
    await close_db()
    logger.info("feedsync 已关闭")


app = FastAPI(
    title="feedsync",
    description="RSS 订阅同步与本地缓存",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(feeds.router)
app.include_router(posts.router)
app.include_router(settings.router)


@app.get("/")
async def root() -> dict:
    """根路径."""
    return {
        "name": "feedsync",
        "version": "0.1.0",
        "description": "RSS 订阅同步与本地缓存",
    }


@app.get("/health")
async def health() -> dict:
    """健康检查."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "feedsync.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
