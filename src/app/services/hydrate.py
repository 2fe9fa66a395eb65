"""
Hydration Service: component/block manifest의 sibling 파일 내용 채우기.

규칙:
- sibling fetch는 동시에 실행 후 join (지연 = 가장 느린 fetch 하나)
- fetch마다 timeout → 초과는 실패 (hang 금지)
- 하나라도 실패하면 나머지 in-flight fetch 취소 후 HydrationError
- 부분 hydration 결과는 반환하지 않음
- sibling 내용은 수정하지 않음 (디코딩만)
"""

import asyncio
import base64
import logging

from src.app.providers.base import ContentStore, FetchedContent
from src.domain.constants import is_text_mime
from src.domain.errors import (
    ContentStoreError,
    ErrorCodes,
    HydrationError,
    NotFoundError,
)
from src.domain.schemas import (
    HydratedFile,
    HydratedRegistryManifest,
    RegistryFileEntry,
    RegistryManifest,
)

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 10.0


def decode_content(content: FetchedContent, path: str, locator: str) -> str:
    """
    fetch 결과 → 문자열.

    - 텍스트 mime: charset(기본 UTF-8)으로 엄격 디코딩
    - 그 외: data:<mime>;base64,... URI

    Raises:
        HydrationError: 빈 내용, 디코딩 불가
    """
    if not content.payload:
        raise HydrationError(ErrorCodes.SIBLING_EMPTY, path=path, locator=locator)

    if not is_text_mime(content.mime_type):
        mime = content.mime_type.split(";", 1)[0].strip()
        encoded = base64.b64encode(content.payload).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    charset = _charset(content.mime_type)
    try:
        return content.payload.decode(charset)
    except (UnicodeDecodeError, LookupError) as e:
        raise HydrationError(
            ErrorCodes.SIBLING_UNDECODABLE,
            path=path,
            locator=locator,
            mime_type=content.mime_type,
        ) from e


def _charset(mime_type: str) -> str:
    for param in mime_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return "utf-8"


class ManifestHydrator:
    """
    manifest hydration.

    Usage:
        hydrator = ManifestHydrator(store, timeout=10.0)
        hydrated = await hydrator.hydrate(manifest)
    """

    def __init__(self, store: ContentStore, timeout: float = DEFAULT_FETCH_TIMEOUT):
        """
        Args:
            store: sibling 조회용 content store
            timeout: fetch 하나당 timeout (초)
        """
        self.store = store
        self.timeout = timeout

    async def hydrate(self, manifest: RegistryManifest) -> HydratedRegistryManifest:
        """
        모든 참조 파일의 content 채우기.

        Args:
            manifest: 검증된 component/block manifest

        Returns:
            HydratedRegistryManifest (모든 파일에 content)

        Raises:
            HydrationError: sibling 하나라도 실패
        """
        tasks: dict[int, asyncio.Task[str]] = {
            position: asyncio.create_task(self._fetch_file(entry))
            for position, entry in enumerate(manifest.files)
            if not entry.is_inline
        }

        try:
            contents = await asyncio.gather(*tasks.values())
        except BaseException:
            for task in tasks.values():
                task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)
            raise

        fetched = dict(zip(tasks.keys(), contents, strict=True))
        files = [
            HydratedFile(
                path=entry.path,
                type=entry.type,
                content=fetched[position] if position in fetched else str(entry.content),
                target=entry.target,
            )
            for position, entry in enumerate(manifest.files)
        ]

        logger.debug(f"Hydrated {manifest.locator}: {len(fetched)} siblings fetched")

        return HydratedRegistryManifest(
            locator=manifest.locator,
            kind=manifest.kind,
            name=manifest.name,
            type=manifest.type,
            files=files,
            description=manifest.description,
            dependencies=list(manifest.dependencies),
            registry_dependencies=list(manifest.registry_dependencies),
            css_vars=manifest.css_vars,
            css=manifest.css,
            tailwind=manifest.tailwind,
        )

    async def _fetch_file(self, entry: RegistryFileEntry) -> str:
        """sibling 하나 fetch + 디코딩. 실패는 모두 HydrationError."""
        if entry.source is None:
            raise HydrationError(path=entry.path, reason="no sibling reference")
        locator = str(entry.source)

        try:
            content = await asyncio.wait_for(self.store.fetch(entry.source), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise HydrationError(
                ErrorCodes.SIBLING_TIMEOUT,
                path=entry.path,
                locator=locator,
                timeout=self.timeout,
            ) from e
        except NotFoundError as e:
            raise HydrationError(ErrorCodes.SIBLING_NOT_FOUND, path=entry.path, locator=locator) from e
        except ContentStoreError as e:
            code = (
                ErrorCodes.SIBLING_TIMEOUT
                if e.code == ErrorCodes.FETCH_TIMEOUT
                else ErrorCodes.HYDRATION_FAILED
            )
            raise HydrationError(code, path=entry.path, locator=locator, cause=e.code) from e

        return decode_content(content, entry.path, locator)


async def hydrate(
    manifest: RegistryManifest,
    store: ContentStore,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> HydratedRegistryManifest:
    """ManifestHydrator 단발 호출."""
    return await ManifestHydrator(store, timeout=timeout).hydrate(manifest)
