"""
Content Store 추상 인터페이스.

inscription 내용을 ContentLocator로 조회.
- 저장소는 append-only, locator당 내용 불변 → 성공한 결과는 영구 캐시 가능
- 없는 locator → NotFoundError
- 그 외 실패(timeout, 5xx) → ContentStoreError
- 재시도하지 않음 (호출 측 책임)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from src.domain.schemas import ContentLocator


@dataclass(frozen=True)
class FetchedContent:
    """fetch 결과: payload + mime."""
    payload: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.payload)


class ContentStore(ABC):
    """
    Content Store 추상 인터페이스.

    Usage:
        content = await store.fetch(parse_locator("abc..._0"))
    """

    @abstractmethod
    async def fetch(self, locator: ContentLocator) -> FetchedContent:
        """
        locator 내용 조회.

        Args:
            locator: (txid, index)

        Returns:
            FetchedContent

        Raises:
            NotFoundError: locator 없음
            ContentStoreError: 그 외 조회 실패
        """
        ...

    async def close(self) -> None:
        """리소스 정리 (HTTP 클라이언트 등). 기본은 no-op."""
        return None
