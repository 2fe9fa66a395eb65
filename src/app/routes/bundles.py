"""
Bundle Routes: 오프라인 번들 생성 / placeholder resolve.

- POST /api/bundles/theme → theme bundle (manifest-last)
- POST /api/bundles/registry → component/block bundle (manifest-first)
- POST /api/bundles/project → project bundle (registry:base)
- POST /api/bundles/resolve → template + txid → resolve된 문서

응답 items는 inscription 순서 그대로 (payload는 base64).
서명/브로드캐스트는 하지 않음.
"""

import base64
import binascii
import re
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from src.bundle.builder import estimate_bundle_cost, estimate_bundle_size
from src.bundle.project import ProjectBundleAsset, build_project_bundle
from src.bundle.registry import build_registry_bundle
from src.bundle.theme import ThemeBundleAsset, build_theme_bundle
from src.core.documents import parse_document
from src.core.ids import generate_bundle_id
from src.core.resolver import resolve, resolve_value
from src.domain.constants import INSCRIPTION_OVERHEAD_BYTES, PROJECT_INSCRIPTION_OVERHEAD_BYTES
from src.domain.errors import ErrorCodes, InvalidRequestError
from src.domain.schemas import BuildResult

api_router = APIRouter()

_DATA_URI_PREFIX = re.compile(r"^data:[^;]+;base64,")


# =============================================================================
# Request Models
# =============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ThemeAssetIn(_CamelModel):
    slot: str
    base64_data: str = Field(alias="base64Data")
    mime_type: str = Field(alias="mimeType")
    name: str | None = None


class ThemeBundleRequest(_CamelModel):
    theme: dict[str, Any]
    assets: list[ThemeAssetIn] = []
    prompt: str | None = None
    provider: str | None = None
    model: str | None = None


class RegistryBundleRequest(_CamelModel):
    manifest: dict[str, Any]
    author: str | None = None


class ProjectAssetIn(_CamelModel):
    type: str
    base64_data: str = Field(alias="base64Data")
    mime_type: str = Field(alias="mimeType")
    slot: str | None = None
    library: str | None = None
    name: str | None = None


class ProjectBundleRequest(_CamelModel):
    theme: dict[str, Any]
    config: dict[str, Any] = {}
    assets: list[ProjectAssetIn] = []
    author: str | None = None


class ResolveRequest(_CamelModel):
    txid: str
    document: dict[str, Any] | None = None
    base64_data: str | None = Field(default=None, alias="base64Data")


# =============================================================================
# Helpers
# =============================================================================

def decode_base64_payload(value: str, field: str = "base64Data") -> bytes:
    """
    base64 문자열 → bytes ("data:<mime>;base64," prefix 허용).

    Raises:
        InvalidRequestError: base64 아님 (400)
    """
    cleaned = _DATA_URI_PREFIX.sub("", value.strip())
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidRequestError(ErrorCodes.INVALID_BASE64, field=field) from None


def bundle_response(result: BuildResult, overhead: int = INSCRIPTION_OVERHEAD_BYTES) -> dict[str, Any]:
    return {
        "bundleId": generate_bundle_id(result.items, result.primary_item.display_name),
        "orderPolicy": result.order_policy.value,
        "primaryIndex": result.primary_index,
        "itemCount": len(result.items),
        "items": [item.to_dict() for item in result.items],
        "document": result.document,
        "slotIndices": result.slot_indices,
        "estimatedSize": estimate_bundle_size(result.items, overhead),
        "estimatedCost": estimate_bundle_cost(len(result.items)),
    }


# =============================================================================
# API Routes
# =============================================================================

@api_router.post("/theme")
async def create_theme_bundle(body: ThemeBundleRequest) -> dict[str, Any]:
    """theme + font/pattern/wallpaper asset → manifest-last bundle."""
    assets = [
        ThemeBundleAsset(
            slot=asset.slot,
            payload=decode_base64_payload(asset.base64_data, f"assets[{i}].base64Data"),
            mime_type=asset.mime_type,
            name=asset.name,
        )
        for i, asset in enumerate(body.assets)
    ]
    result = build_theme_bundle(
        body.theme,
        assets,
        prompt=body.prompt,
        provider=body.provider,
        model=body.model,
    )
    return bundle_response(result)


@api_router.post("/registry")
async def create_registry_bundle(body: RegistryBundleRequest) -> dict[str, Any]:
    """component/block manifest (파일 content 포함) → manifest-first bundle."""
    result = build_registry_bundle(body.manifest, author=body.author)
    return bundle_response(result)


@api_router.post("/project")
async def create_project_bundle(body: ProjectBundleRequest) -> dict[str, Any]:
    """theme + config + asset → registry:base bundle."""
    assets = [
        ProjectBundleAsset(
            type=asset.type,
            payload=decode_base64_payload(asset.base64_data, f"assets[{i}].base64Data"),
            mime_type=asset.mime_type,
            slot=asset.slot,
            library=asset.library,
            name=asset.name,
        )
        for i, asset in enumerate(body.assets)
    ]
    result = build_project_bundle(body.theme, body.config, assets, author=body.author)
    return bundle_response(result, PROJECT_INSCRIPTION_OVERHEAD_BYTES)


@api_router.post("/resolve")
async def resolve_bundle_document(body: ResolveRequest) -> dict[str, Any]:
    """
    template의 "{{vout:N}}" → "<txid>_N".

    base64Data(inscription payload)를 주면 바이트 보존 resolve,
    document(JSON object)를 주면 트리 resolve.
    """
    if (body.document is None) == (body.base64_data is None):
        raise InvalidRequestError(expected="exactly one of document, base64Data")

    if body.base64_data is not None:
        resolved_bytes = resolve(decode_base64_payload(body.base64_data), body.txid)
        return {
            "base64Data": base64.b64encode(resolved_bytes).decode("ascii"),
            "document": parse_document(resolved_bytes),
        }

    return {"document": resolve_value(body.document, body.txid)}
