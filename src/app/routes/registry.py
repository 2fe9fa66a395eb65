"""
Registry Routes: on-chain manifest → shadcn registry-item.

- GET /r/{origin} → kind 자동 판별
- GET /r/themes/{origin}, /r/components/{origin}, /r/blocks/{origin} → kind 강제
- GET /init?project={origin} → registry:base preset (+ config override)

origin: "<txid>_<N>" (".json" 허용, txid만 주면 _0)
성공 응답은 locator당 불변 → immutable 캐시 헤더 + ETag
"""

from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from src.app.services.gateway import GatewayOrchestrator, GatewayResult
from src.core.hashing import make_etag
from src.core.locator import normalize_origin
from src.domain.errors import ErrorCodes, InvalidLocatorError
from src.domain.schemas import ManifestKind

router = APIRouter()

DEFAULT_CACHE_CONTROL = "public, max-age=31536000, immutable"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def get_gateway(request: Request) -> GatewayOrchestrator:
    """요청마다 새 orchestrator (공유 상태는 content store 캐시뿐)."""
    config: dict[str, Any] = request.app.state.config
    store_config = config.get("content_store", {})
    gateway_config = config.get("gateway", {})

    return GatewayOrchestrator(
        store=request.app.state.content_store,
        content_base_url=request.app.state.content_base_url,
        fetch_timeout=float(store_config.get("timeout", 10.0)),
        hydration_timeout=float(gateway_config.get("hydration_timeout", 10.0)),
    )


def registry_response(request: Request, result: GatewayResult) -> Response:
    """
    GatewayResult → HTTP 응답.

    실패는 예외로 던져서 공통 에러 핸들러가 처리.
    """
    if result.error is not None:
        raise result.error

    etag = make_etag(result.document) if result.document is not None else None
    gateway_config = request.app.state.config.get("gateway", {})
    headers = {
        "Cache-Control": gateway_config.get("cache_control", DEFAULT_CACHE_CONTROL),
        "Access-Control-Allow-Origin": "*",
    }
    if etag:
        headers["ETag"] = etag
        if request.headers.get("if-none-match") == etag:
            return Response(status_code=304, headers=headers)

    return JSONResponse(content=result.document, headers=headers)


async def _serve(
    request: Request,
    origin: str,
    expected_kind: ManifestKind | None = None,
    overrides: dict[str, str | None] | None = None,
) -> Response:
    locator = normalize_origin(origin)
    result = await get_gateway(request).serve(locator, expected_kind, overrides)
    return registry_response(request, result)


# =============================================================================
# Registry Items
# =============================================================================

@router.get("/r/themes/{origin}")
async def get_theme(request: Request, origin: str) -> Response:
    """theme(registry:style) 전용."""
    return await _serve(request, origin, ManifestKind.THEME)


@router.get("/r/components/{origin}")
async def get_component(request: Request, origin: str) -> Response:
    """component 전용 (sibling 파일 hydration 포함)."""
    return await _serve(request, origin, ManifestKind.COMPONENT)


@router.get("/r/blocks/{origin}")
async def get_block(request: Request, origin: str) -> Response:
    """block 전용 (sibling 파일 hydration 포함)."""
    return await _serve(request, origin, ManifestKind.BLOCK)


@router.get("/r/{origin}")
async def get_registry_item(request: Request, origin: str) -> Response:
    """kind 자동 판별."""
    return await _serve(request, origin)


# =============================================================================
# Project Preset (shadcn create)
# =============================================================================

@router.get("/init")
async def init_project(
    request: Request,
    project: str | None = None,
    iconLibrary: str | None = None,
    baseColor: str | None = None,
    menuColor: str | None = None,
    menuAccent: str | None = None,
) -> Response:
    """
    registry:base preset.

    Usage:
        bunx shadcn@latest create --preset "https://<host>/init?project={origin}"

    허용값 밖의 override 값은 무시.
    """
    if not project:
        raise InvalidLocatorError(
            ErrorCodes.INVALID_LOCATOR,
            parameter="project",
            usage="GET /init?project={origin}",
        )

    overrides = {
        "iconLibrary": iconLibrary,
        "baseColor": baseColor,
        "menuColor": menuColor,
        "menuAccent": menuAccent,
    }
    return await _serve(request, project, ManifestKind.PROJECT, overrides)


@router.options("/init")
async def init_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)
