"""键值存储模型."""

from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StoreItem(SQLModel, table=True):
    """持久化键值对."""

    __tablename__ = "kv_store"  # type: ignore[assignment]

    key: str = Field(primary_key=True, description="存储键")
    value: str = Field(description="JSON 编码的值")
    updated_at: datetime = Field(default_factory=_utcnow)
