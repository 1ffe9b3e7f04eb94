"""Feed / Post 数据模型."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Feed(BaseModel):
    """订阅源，以 URL 作为唯一标识."""

    id: str = Field(description="与 url 相同")
    url: str = Field(description="Feed URL")
    title: str = Field(description="Feed 标题")

    @classmethod
    def from_url(cls, url: str, title: str | None = None) -> "Feed":
        """根据 URL 创建 Feed（id 即 url）."""
        return cls(id=url, url=url, title=title or url)


class Post(BaseModel):
    """文章快照（不可变）."""

    model_config = ConfigDict(frozen=True)

    guid: str = Field(description="唯一标识，缺省时使用 link")
    title: str = ""
    link: str = ""
    iso_date: str | None = Field(default=None, description="发布时间 ISO-8601")
    content: str = Field(default="", description="HTML 内容")
    summary: str = Field(default="", description="纯文本摘要")
    first_image: str | None = None
    author: str | None = None
    feed_title: str = ""


class CachedPostsEntry(BaseModel):
    """某个 Feed 的文章缓存."""

    timestamp: datetime = Field(description="最近一次成功抓取的时间")
    posts: list[Post] = Field(default_factory=list)


class FetchedFeed(BaseModel):
    """Feed 抓取结果."""

    feed_title: str | None = None
    items: list[Post] = Field(default_factory=list)


class OutlineEntry(BaseModel):
    """OPML 中的一条 outline."""

    xml_url: str
    title: str | None = None
    html_url: str | None = None
    text: str | None = None

    def to_feed(self) -> Feed:
        """转换为 Feed."""
        return Feed.from_url(self.xml_url, self.title or self.text)
