"""
Gateway Orchestrator: ContentLocator → 번역된 registry-item 문서.

상태 머신:
    FETCHING → RESOLVING → VALIDATING → (HYDRATING) → TRANSLATING → DONE
    어느 단계에서든 → FAILED

규칙:
- 재시도 없음 (fail fast, 재시도 정책은 호출 측)
- 에러는 예외로 던지지 않고 GatewayResult에 타입 그대로 담음
- 요청 취소(CancelledError)는 그대로 전파 → in-flight fetch 함께 취소
- 요청 간 공유 상태 없음 (content store 캐시 제외)
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.app.providers.base import ContentStore, FetchedContent
from src.app.services.hydrate import DEFAULT_FETCH_TIMEOUT, ManifestHydrator
from src.app.services.translate import manifest_kind, translate
from src.app.services.validate import validate_manifest
from src.core.documents import parse_document
from src.core.hashing import compute_document_hash
from src.core.logging import complete_request_log, create_request_log, record_stage
from src.core.resolver import resolve_template
from src.domain.constants import DEFAULT_CONTENT_BASE_URL
from src.domain.errors import BundleProtocolError, ContentStoreError, ErrorCodes, SchemaError
from src.domain.schemas import (
    ContentLocator,
    GatewayStage,
    ManifestKind,
    RegistryManifest,
    RequestLog,
)


@dataclass
class GatewayResult:
    """
    gateway 요청 결과.

    stage == DONE → document 있음
    stage == FAILED → error, failed_stage 있음
    """
    locator: ContentLocator
    stage: GatewayStage
    kind: ManifestKind | None = None
    document: dict[str, Any] | None = None
    document_hash: str | None = None
    error: BundleProtocolError | None = None
    failed_stage: GatewayStage | None = None
    request_log: RequestLog | None = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.stage is GatewayStage.DONE


class GatewayOrchestrator:
    """
    fetch → resolve → validate → hydrate → translate 파이프라인.

    Usage:
        gateway = GatewayOrchestrator(store, content_base_url="https://ordfs.network")
        result = await gateway.serve(parse_locator("abc..._0"))
        if result.ok:
            return result.document
    """

    def __init__(
        self,
        store: ContentStore,
        content_base_url: str = DEFAULT_CONTENT_BASE_URL,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        hydration_timeout: float = DEFAULT_FETCH_TIMEOUT,
    ):
        """
        Args:
            store: content store (캐시 포함 가능)
            content_base_url: locator → URL 변환 기준 주소
            fetch_timeout: entry 문서 fetch timeout (초)
            hydration_timeout: sibling fetch 하나당 timeout (초)
        """
        self.store = store
        self.content_base_url = content_base_url
        self.fetch_timeout = fetch_timeout
        self.hydrator = ManifestHydrator(store, timeout=hydration_timeout)

    async def serve(
        self,
        locator: ContentLocator,
        expected_kind: ManifestKind | None = None,
        overrides: Mapping[str, str | None] | None = None,
    ) -> GatewayResult:
        """
        요청 하나 처리.

        Args:
            locator: entry 문서 locator
            expected_kind: 타입 지정 라우트의 기대 kind (다르면 SchemaError)
            overrides: project config override (/init 쿼리)

        Returns:
            GatewayResult (예외를 던지지 않음, 취소 제외)
        """
        request_log = create_request_log(str(locator))
        stage = GatewayStage.FETCHING

        try:
            record_stage(request_log, stage)
            content = await self._fetch_entry(locator)

            stage = GatewayStage.RESOLVING
            record_stage(request_log, stage)
            try:
                template = parse_document(content.payload)
            except ValueError as e:
                raise SchemaError(ErrorCodes.SCHEMA_NOT_JSON, locator=str(locator), error=str(e)) from e
            resolved = resolve_template(template, locator)

            stage = GatewayStage.VALIDATING
            record_stage(request_log, stage)
            manifest = validate_manifest(resolved, expected_kind)
            kind = manifest.kind if isinstance(manifest, RegistryManifest) else manifest_kind(manifest)
            request_log.kind = kind.value

            if isinstance(manifest, RegistryManifest):
                stage = GatewayStage.HYDRATING
                record_stage(request_log, stage)
                translatable = await self.hydrator.hydrate(manifest)
                request_log.siblings_fetched = sum(1 for f in manifest.files if not f.is_inline)
            else:
                translatable = manifest

            stage = GatewayStage.TRANSLATING
            record_stage(request_log, stage)
            document = translate(translatable, self.content_base_url, overrides)

        except BundleProtocolError as e:
            record_stage(request_log, GatewayStage.FAILED)
            complete_request_log(
                request_log,
                success=False,
                error_code=e.code,
                error_context={**e.context, "stage": stage.value},
            )
            return GatewayResult(
                locator=locator,
                stage=GatewayStage.FAILED,
                kind=ManifestKind(request_log.kind) if request_log.kind else None,
                error=e,
                failed_stage=stage,
                request_log=request_log,
            )

        document_hash = compute_document_hash(document)
        record_stage(request_log, GatewayStage.DONE)
        complete_request_log(request_log, success=True, document_hash=document_hash)

        return GatewayResult(
            locator=locator,
            stage=GatewayStage.DONE,
            kind=kind,
            document=document,
            document_hash=document_hash,
            request_log=request_log,
        )

    async def _fetch_entry(self, locator: ContentLocator) -> FetchedContent:
        """entry 문서 fetch (timeout → ContentStoreError)."""
        try:
            return await asyncio.wait_for(self.store.fetch(locator), timeout=self.fetch_timeout)
        except asyncio.TimeoutError as e:
            raise ContentStoreError(
                ErrorCodes.FETCH_TIMEOUT,
                locator=str(locator),
                timeout=self.fetch_timeout,
            ) from e
