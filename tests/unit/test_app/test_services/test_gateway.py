"""
test_gateway.py - Gateway Orchestrator 테스트

DoD:
- FETCHING → RESOLVING → VALIDATING → (HYDRATING) → TRANSLATING → DONE
- 어느 단계 실패든 FAILED + 타입이 있는 에러 (예외로 던지지 않음)
- 등록 안 된 kind → UnsupportedKindError
- 요청 취소는 그대로 전파
"""

import asyncio
import json

import pytest

from src.app.providers.base import ContentStore, FetchedContent
from src.app.services.gateway import GatewayOrchestrator
from src.bundle.project import build_project_bundle
from src.bundle.registry import build_registry_bundle
from src.bundle.theme import ThemeBundleAsset, build_theme_bundle
from src.domain.errors import (
    ContentStoreError,
    ErrorCodes,
    HydrationError,
    NotFoundError,
    SchemaError,
    UnsupportedKindError,
)
from src.domain.schemas import ContentLocator, GatewayStage, ManifestKind

BASE_URL = "https://content.example"


class HangingStore(ContentStore):
    """응답하지 않는 store."""

    async def fetch(self, locator: ContentLocator) -> FetchedContent:
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


def _gateway(store: ContentStore, **kwargs) -> GatewayOrchestrator:
    return GatewayOrchestrator(store, content_base_url=BASE_URL, **kwargs)


def _stages(result) -> list[GatewayStage]:
    return [event.stage for event in result.request_log.stages]


# =============================================================================
# 정상 케이스
# =============================================================================

class TestServeSuccess:
    """bundle → registry-item."""

    @pytest.mark.asyncio
    async def test_theme_bundle(self, memory_store, sample_theme, txid):
        bundle = build_theme_bundle(
            sample_theme,
            [ThemeBundleAsset(slot="sans", payload=b"wOF2", mime_type="font/woff2")],
        )
        memory_store.put_bundle(txid, bundle.items)

        result = await _gateway(memory_store).serve(ContentLocator(txid, 1))

        assert result.ok
        assert result.kind is ManifestKind.THEME
        assert result.document["cssVars"]["light"]["font-sans"] == f"{BASE_URL}/content/{txid}_0"
        assert result.document_hash is not None
        assert _stages(result) == [
            GatewayStage.FETCHING,
            GatewayStage.RESOLVING,
            GatewayStage.VALIDATING,
            GatewayStage.TRANSLATING,
            GatewayStage.DONE,
        ]
        assert result.request_log.result == "success"

    @pytest.mark.asyncio
    async def test_component_bundle_hydrated(self, memory_store, sample_component, txid):
        bundle = build_registry_bundle(sample_component)
        memory_store.put_bundle(txid, bundle.items)

        result = await _gateway(memory_store).serve(ContentLocator(txid, 0))

        assert result.ok
        assert result.kind is ManifestKind.COMPONENT
        assert [f["content"] for f in result.document["files"]] == [
            f["content"] for f in sample_component["files"]
        ]
        assert GatewayStage.HYDRATING in _stages(result)
        assert result.request_log.siblings_fetched == 2

    @pytest.mark.asyncio
    async def test_project_with_overrides(self, memory_store, sample_theme, txid):
        bundle = build_project_bundle(sample_theme)
        memory_store.put_bundle(txid, bundle.items)

        result = await _gateway(memory_store).serve(
            ContentLocator(txid, 0),
            expected_kind=ManifestKind.PROJECT,
            overrides={"iconLibrary": "hugeicons", "baseColor": "not-a-color"},
        )

        assert result.ok
        assert result.document["config"]["iconLibrary"] == "hugeicons"
        assert result.document["config"]["tailwind"]["baseColor"] == "zinc"

    @pytest.mark.asyncio
    async def test_same_locator_same_document(self, memory_store, sample_theme, txid):
        memory_store.put_bundle(txid, build_theme_bundle(sample_theme, []).items)
        gateway = _gateway(memory_store)

        first = await gateway.serve(ContentLocator(txid, 0))
        second = await gateway.serve(ContentLocator(txid, 0))

        assert first.document == second.document
        assert first.document_hash == second.document_hash
        assert first.request_log.request_id != second.request_log.request_id


# =============================================================================
# 실패 케이스
# =============================================================================

class TestServeFailure:
    """단계별 실패 → FAILED + 타입이 있는 에러."""

    @pytest.mark.asyncio
    async def test_not_found(self, memory_store, txid):
        result = await _gateway(memory_store).serve(ContentLocator(txid, 0))

        assert not result.ok
        assert result.stage is GatewayStage.FAILED
        assert isinstance(result.error, NotFoundError)
        assert result.failed_stage is GatewayStage.FETCHING
        assert result.request_log.error_context["stage"] == "fetching"
        assert _stages(result)[-1] is GatewayStage.FAILED

    @pytest.mark.asyncio
    async def test_not_json(self, memory_store, entry_locator):
        memory_store.put(entry_locator, b"\x00\x01binary", "application/octet-stream")

        result = await _gateway(memory_store).serve(entry_locator)

        assert isinstance(result.error, SchemaError)
        assert result.error.code == ErrorCodes.SCHEMA_NOT_JSON
        assert result.failed_stage is GatewayStage.RESOLVING

    @pytest.mark.asyncio
    async def test_unknown_kind(self, memory_store, entry_locator):
        """알 수 없는 discriminator → UnsupportedKindError."""
        document = {"type": "registry:hook", "name": "use-thing"}
        memory_store.put(entry_locator, json.dumps(document).encode(), "application/json")

        result = await _gateway(memory_store).serve(entry_locator)

        assert isinstance(result.error, UnsupportedKindError)
        assert result.failed_stage is GatewayStage.VALIDATING
        assert result.document is None

    @pytest.mark.asyncio
    async def test_kind_mismatch(self, memory_store, sample_theme, txid):
        memory_store.put_bundle(txid, build_theme_bundle(sample_theme, []).items)

        result = await _gateway(memory_store).serve(
            ContentLocator(txid, 0), expected_kind=ManifestKind.COMPONENT
        )

        assert isinstance(result.error, SchemaError)
        assert result.error.code == ErrorCodes.KIND_MISMATCH

    @pytest.mark.asyncio
    async def test_missing_sibling(self, memory_store, sample_component, txid):
        bundle = build_registry_bundle(sample_component)
        locators = memory_store.put_bundle(txid, bundle.items)
        memory_store.remove(locators[1])

        result = await _gateway(memory_store).serve(ContentLocator(txid, 0))

        assert isinstance(result.error, HydrationError)
        assert result.failed_stage is GatewayStage.HYDRATING
        assert result.kind is ManifestKind.COMPONENT
        assert result.document is None

    @pytest.mark.asyncio
    async def test_fetch_timeout(self, entry_locator):
        result = await _gateway(HangingStore(), fetch_timeout=0.05).serve(entry_locator)

        assert isinstance(result.error, ContentStoreError)
        assert result.error.code == ErrorCodes.FETCH_TIMEOUT
        assert result.failed_stage is GatewayStage.FETCHING


class TestCancellation:
    """요청 취소 전파."""

    @pytest.mark.asyncio
    async def test_cancel_propagates(self, entry_locator):
        task = asyncio.create_task(_gateway(HangingStore(), fetch_timeout=30.0).serve(entry_locator))
        await asyncio.sleep(0.01)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
