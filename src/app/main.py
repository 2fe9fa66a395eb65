"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI

from src.app.providers import (
    CachedContentStore,
    ContentStore,
    InMemoryContentStore,
    OrdfsContentStore,
)
from src.app.routes import bundles, registry
from src.app.routes.errors import register_error_handlers
from src.core.logging import configure_logging
from src.domain.constants import DEFAULT_CONTENT_BASE_URL

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def content_base_url(config: dict) -> str:
    """locator → URL 변환 기준 주소 (ORDFS_BASE_URL 우선)."""
    base_url = os.environ.get("ORDFS_BASE_URL") or config.get("content_store", {}).get(
        "base_url", DEFAULT_CONTENT_BASE_URL
    )
    return str(base_url).rstrip("/")


def create_content_store(config: dict) -> ContentStore:
    """
    설정 → content store.

    content_store.backend: ordfs | memory
    content_store.cache.enabled: true → LRU 캐시로 감쌈
    """
    store_config = config.get("content_store", {})
    backend = store_config.get("backend", "ordfs")

    store: ContentStore
    if backend == "memory":
        store = InMemoryContentStore()
    elif backend == "ordfs":
        store = OrdfsContentStore(
            base_url=content_base_url(config),
            timeout=float(store_config.get("timeout", 10.0)),
        )
    else:
        raise ValueError(f"Unknown content_store.backend: {backend}")

    cache_config = store_config.get("cache", {})
    if cache_config.get("enabled", True):
        store = CachedContentStore(store, max_entries=int(cache_config.get("max_entries", 1024)))

    logger.info(f"Content store: {backend} (cache={'on' if cache_config.get('enabled', True) else 'off'})")
    return store


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 로깅 설정, content store 생성
    종료 시: content store HTTP client 정리
    """
    # Startup
    app.state.config = load_config()
    configure_logging(app.state.config)
    app.state.content_base_url = content_base_url(app.state.config)
    app.state.content_store = create_content_store(app.state.config)

    yield

    # Shutdown
    await app.state.content_store.close()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Theme Token Registry Gateway",
    description="on-chain 번들 manifest → shadcn registry-item",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)


# =============================================================================
# Routes
# =============================================================================

# registry 라우트 (shadcn CLI가 직접 호출)
app.include_router(registry.router, prefix="", tags=["Registry"])

# API 라우트
app.include_router(bundles.api_router, prefix="/api/bundles", tags=["Bundles API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/")
async def root() -> dict[str, Any]:
    return {
        "message": "Theme Token Registry Gateway",
        "endpoints": {
            "registry": "/r/{origin}",
            "themes": "/r/themes/{origin}",
            "components": "/r/components/{origin}",
            "blocks": "/r/blocks/{origin}",
            "init": "/init?project={origin}",
            "bundles": "/api/bundles",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
