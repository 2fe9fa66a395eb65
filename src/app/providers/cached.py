"""
Read-through 캐시 Content Store.

locator당 내용 불변 → 성공한 fetch는 만료 없이 캐시.
- 항목 수 기준 LRU (max_entries)
- 실패(NotFound, timeout 등)는 캐시하지 않음
"""

import logging
from collections import OrderedDict

from src.domain.schemas import ContentLocator

from .base import ContentStore, FetchedContent

logger = logging.getLogger(__name__)


class CachedContentStore(ContentStore):
    """
    다른 ContentStore를 감싸는 LRU 캐시.

    Usage:
        store = CachedContentStore(OrdfsContentStore(), max_entries=1024)
    """

    def __init__(self, inner: ContentStore, max_entries: int = 1024):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive: {max_entries}")
        self.inner = inner
        self.max_entries = max_entries
        self._cache: OrderedDict[ContentLocator, FetchedContent] = OrderedDict()
        self.hits = 0
        self.misses = 0

    async def fetch(self, locator: ContentLocator) -> FetchedContent:
        cached = self._cache.get(locator)
        if cached is not None:
            self._cache.move_to_end(locator)
            self.hits += 1
            return cached

        self.misses += 1
        content = await self.inner.fetch(locator)

        self._cache[locator] = content
        self._cache.move_to_end(locator)
        while len(self._cache) > self.max_entries:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug(f"Cache evicted: {evicted}")
        return content

    def __contains__(self, locator: object) -> bool:
        return locator in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    async def close(self) -> None:
        await self.inner.close()
