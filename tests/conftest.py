"""
Pytest fixtures for the bundle protocol tests.

테스트 구성:
- 정상 케이스, 필드 누락/형식 오류 케이스 분리
- 네트워크 대신 InMemoryContentStore 사용
"""

from pathlib import Path

import pytest
import yaml

from src.app.providers.memory import InMemoryContentStore
from src.domain.schemas import ContentLocator

# =============================================================================
# Path / Config Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Locator Fixtures
# =============================================================================

@pytest.fixture
def txid() -> str:
    """inscription 트랜잭션 ID (64-hex)."""
    return "a" * 64


@pytest.fixture
def other_txid() -> str:
    return "b" * 64


@pytest.fixture
def entry_locator(txid: str) -> ContentLocator:
    return ContentLocator(txid=txid, index=0)


# =============================================================================
# Document Fixtures
# =============================================================================

@pytest.fixture
def sample_theme() -> dict:
    """
    기본 theme 문서 (registry:style).

    light/dark의 radius, font-mono가 같음 → cssVars.theme 공통값
    """
    return {
        "name": "Midnight Neon",
        "author": "satoshi",
        "styles": {
            "light": {
                "background": "oklch(1 0 0)",
                "foreground": "oklch(0.2 0 0)",
                "card": "oklch(0.98 0 0)",
                "card-foreground": "oklch(0.2 0 0)",
                "primary": "oklch(0.6 0.2 280)",
                "primary-foreground": "oklch(1 0 0)",
                "secondary": "oklch(0.9 0.05 280)",
                "accent": "oklch(0.85 0.1 200)",
                "muted": "oklch(0.95 0 0)",
                "muted-foreground": "oklch(0.5 0 0)",
                "border": "oklch(0.9 0 0)",
                "ring": "oklch(0.6 0.2 280)",
                "radius": "0.5rem",
                "font-mono": "JetBrains Mono, monospace",
            },
            "dark": {
                "background": "oklch(0.15 0 0)",
                "foreground": "oklch(0.95 0 0)",
                "card": "oklch(0.2 0 0)",
                "card-foreground": "oklch(0.95 0 0)",
                "primary": "oklch(0.7 0.2 280)",
                "primary-foreground": "oklch(0.1 0 0)",
                "radius": "0.5rem",
                "font-mono": "JetBrains Mono, monospace",
            },
        },
    }


@pytest.fixture
def sample_component() -> dict:
    """생성된 component manifest (파일 content 포함)."""
    return {
        "name": "glow-button",
        "type": "registry:component",
        "description": "Button with neon glow",
        "dependencies": ["class-variance-authority"],
        "registryDependencies": ["button"],
        "files": [
            {
                "path": "components/glow-button.tsx",
                "type": "registry:component",
                "content": "export function GlowButton() {\n  return <button />\n}\n",
            },
            {
                "path": "lib/glow.ts",
                "type": "registry:lib",
                "content": "export const glow = \"0 0 8px\"\n",
            },
        ],
    }


# =============================================================================
# Content Store Fixtures
# =============================================================================

@pytest.fixture
def memory_store() -> InMemoryContentStore:
    """빈 in-memory content store."""
    return InMemoryContentStore()
