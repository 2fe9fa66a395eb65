"""
ORDFS Content Store (httpx).

GET {base_url}/content/{txid}_{index}
- 404 → NotFoundError
- timeout → ContentStoreError(FETCH_TIMEOUT)
- 그 외 4xx/5xx, 네트워크 오류 → ContentStoreError(CONTENT_STORE_FAILED)
"""

import logging
import os

import httpx

from src.domain.constants import DEFAULT_CONTENT_BASE_URL
from src.domain.errors import ContentStoreError, ErrorCodes, NotFoundError
from src.domain.schemas import ContentLocator

from .base import ContentStore, FetchedContent

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class OrdfsContentStore(ContentStore):
    """
    ORDFS HTTP gateway 기반 content store.

    Usage:
        store = OrdfsContentStore(base_url="https://ordfs.network", timeout=10.0)
        content = await store.fetch(locator)
        await store.close()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            base_url: ORDFS 주소 (환경변수 ORDFS_BASE_URL 사용 가능)
            timeout: 요청 timeout (초)
            client: 외부 주입 클라이언트 (테스트용 MockTransport 등)
        """
        self.base_url = (
            base_url or os.environ.get("ORDFS_BASE_URL") or DEFAULT_CONTENT_BASE_URL
        ).rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """httpx 클라이언트 (lazy init)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    def content_url(self, locator: ContentLocator) -> str:
        return f"{self.base_url}/content/{locator}"

    async def fetch(self, locator: ContentLocator) -> FetchedContent:
        url = self.content_url(locator)
        try:
            response = await self._get_client().get(url)
        except httpx.TimeoutException as e:
            logger.warning(f"ORDFS timeout: {locator}")
            raise ContentStoreError(
                ErrorCodes.FETCH_TIMEOUT,
                locator=str(locator),
                timeout=self.timeout,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"ORDFS request failed: {locator} ({e})")
            raise ContentStoreError(locator=str(locator), error=str(e)) from e

        if response.status_code == 404:
            raise NotFoundError(locator=str(locator))
        if response.status_code >= 400:
            raise ContentStoreError(locator=str(locator), status=response.status_code)

        mime_type = response.headers.get("content-type", DEFAULT_MIME_TYPE)
        logger.debug(f"ORDFS fetched {locator}: {len(response.content)} bytes ({mime_type})")
        return FetchedContent(payload=response.content, mime_type=mime_type)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
