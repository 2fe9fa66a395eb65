"""
In-memory Content Store.

로컬 개발/테스트용. put_bundle()로 BundleItem 목록을 특정 txid에 "inscribe".
"""

from collections.abc import Sequence

from src.core.locator import validate_txid
from src.domain.errors import NotFoundError
from src.domain.schemas import BundleItem, ContentLocator

from .base import ContentStore, FetchedContent


class InMemoryContentStore(ContentStore):
    """
    dict 기반 content store.

    Usage:
        store = InMemoryContentStore()
        store.put_bundle(txid, result.items)
        content = await store.fetch(ContentLocator(txid, 0))
    """

    def __init__(self) -> None:
        self._contents: dict[ContentLocator, FetchedContent] = {}
        self.fetch_count = 0

    def put(self, locator: ContentLocator, payload: bytes, mime_type: str) -> None:
        self._contents[locator] = FetchedContent(payload=payload, mime_type=mime_type)

    def put_bundle(self, txid: str, items: Sequence[BundleItem]) -> list[ContentLocator]:
        """
        아이템 목록을 txid_0.. 순서로 저장.

        Returns:
            저장된 locator 목록 (아이템 순서)
        """
        txid = validate_txid(txid)
        locators = []
        for index, item in enumerate(items):
            locator = ContentLocator(txid=txid, index=index)
            self.put(locator, item.payload, item.mime_type)
            locators.append(locator)
        return locators

    def remove(self, locator: ContentLocator) -> None:
        self._contents.pop(locator, None)

    async def fetch(self, locator: ContentLocator) -> FetchedContent:
        self.fetch_count += 1
        content = self._contents.get(locator)
        if content is None:
            raise NotFoundError(locator=str(locator))
        return content

    def __len__(self) -> int:
        return len(self._contents)
