"""已读文章记录."""

from feedsync.core.storage import StorageService


class ReadStateTracker:
    """已读 guid 集合，只增不减."""

    def __init__(self, storage: StorageService) -> None:
        self.storage = storage
        self._guids: set[str] = set()

    @property
    def guids(self) -> frozenset[str]:
        return frozenset(self._guids)

    async def load(self) -> None:
        """从存储加载已读记录."""
        self._guids = set(await self.storage.get_read_post_guids())

    def is_read(self, guid: str) -> bool:
        return guid in self._guids

    async def mark_read(self, guid: str) -> None:
        """标记已读（幂等），新增时持久化完整集合."""
        if guid in self._guids:
            return

        updated = self._guids | {guid}
        await self.storage.save_read_post_guids(sorted(updated))
        self._guids = updated
