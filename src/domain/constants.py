"""
Domain Constants: 번들 프로토콜 전역 상수.

placeholder 포맷, locator 포맷, 외부 registry 스키마 기본값 등.
"""

import os
import re

# =============================================================================
# Addressing (locator / placeholder)
# =============================================================================
# ContentLocator: "<64-hex txid>_<index>"
# Placeholder: "{{vout:<index>}}" (unresolved template 문자열 값 안에서만 유효)

TXID_LENGTH = 64
TXID_PATTERN = re.compile(r"^[0-9a-f]{64}$")
LOCATOR_PATTERN = re.compile(r"^(?P<txid>[0-9a-f]{64})_(?P<index>\d+)$")
PLACEHOLDER_PATTERN = re.compile(r"\{\{vout:(\d+)\}\}")


def placeholder(index: int) -> str:
    """index에 대한 forward reference 토큰."""
    return f"{{{{vout:{index}}}}}"


DEFAULT_CONTENT_BASE_URL = "https://ordfs.network"

# =============================================================================
# Manifest Discriminators
# =============================================================================

KIND_ALIASES = {
    "registry:style": "registry:style",
    "theme": "registry:style",
    "registry:component": "registry:component",
    "registry:ui": "registry:component",
    "registry:block": "registry:block",
    "registry:base": "registry:base",
}

THEME_BUNDLE_VERSION = 1
PROJECT_BUNDLE_VERSION = 2

# =============================================================================
# External Registry Schema (shadcn registry-item)
# =============================================================================

REGISTRY_ITEM_SCHEMA_URL = "https://ui.shadcn.com/schema/registry-item.json"

# cssVars.theme로 올라가는 키 (light/dark 값이 같을 때만)
SHARED_THEME_KEYS = (
    "font-sans",
    "font-serif",
    "font-mono",
    "radius",
    "spacing",
    "tracking-normal",
)

DEFAULT_RADIUS = "0.625rem"

# radius 파생값: base radius에서 고정 offset
RADIUS_OFFSETS = {
    "radius-sm": "- 4px",
    "radius-md": "- 2px",
    "radius-lg": "",
    "radius-xl": "+ 4px",
}

DEFAULT_FONT_STACKS = {
    "font-sans": (
        "ui-sans-serif, system-ui, sans-serif, "
        "\"Apple Color Emoji\", \"Segoe UI Emoji\", \"Segoe UI Symbol\", \"Noto Color Emoji\""
    ),
    "font-serif": "ui-serif, Georgia, Cambria, \"Times New Roman\", Times, serif",
    "font-mono": (
        "ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, "
        "\"Liberation Mono\", \"Courier New\", monospace"
    ),
}

# sidebar-* ← base color
SIDEBAR_COLOR_SOURCES = {
    "sidebar": "card",
    "sidebar-foreground": "card-foreground",
    "sidebar-primary": "primary",
    "sidebar-primary-foreground": "primary-foreground",
    "sidebar-accent": "accent",
    "sidebar-accent-foreground": "accent-foreground",
    "sidebar-border": "border",
    "sidebar-ring": "ring",
}

CHART_COLOR_SOURCES = {
    "chart-1": "primary",
    "chart-2": "secondary",
    "chart-3": "accent",
    "chart-4": "muted",
    "chart-5": "muted-foreground",
}

# =============================================================================
# Project (registry:base)
# =============================================================================

DEFAULT_PROJECT_DEPENDENCIES = (
    "shadcn@latest",
    "class-variance-authority",
    "tw-animate-css",
)

ICON_LIBRARY_PACKAGES = {
    "lucide": ("lucide-react",),
    "hugeicons": ("@hugeicons/react", "@hugeicons/core-free-icons"),
    "tabler": ("@tabler/icons-react",),
}

VALID_BASE_COLORS = ("neutral", "gray", "zinc", "stone", "slate")
VALID_MENU_COLORS = ("default", "primary", "accent")
VALID_MENU_ACCENTS = ("subtle", "normal", "bold")

DEFAULT_PROJECT_CSS = {
    "@import \"tw-animate-css\"": {},
    "@import \"shadcn/tailwind.css\"": {},
    "@layer base": {
        "*": {"@apply border-border outline-ring/50": ""},
        "body": {"@apply bg-background text-foreground": ""},
    },
}

# =============================================================================
# Size Estimation
# =============================================================================

INSCRIPTION_OVERHEAD_BYTES = 250  # envelope ~50 + MAP metadata ~200
PROJECT_INSCRIPTION_OVERHEAD_BYTES = 300
SATS_PER_OUTPUT = 1

# =============================================================================
# MIME Types
# =============================================================================

JSON_MIME_TYPE = "application/json"
CODE_FILE_MIME_TYPE = "text/plain"

MIME_TYPES = {
    ".woff2": "font/woff2",
    ".woff": "font/woff",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".json": "application/json",
    ".tsx": "text/plain",
    ".ts": "text/plain",
    ".css": "text/css",
}

# 텍스트로 디코딩하는 mime (나머지는 data URI)
TEXT_MIME_TYPES = frozenset([
    "application/json",
    "application/javascript",
    "application/typescript",
    "application/xml",
    "image/svg+xml",
])


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, "application/octet-stream")


def is_text_mime(mime_type: str) -> bool:
    """text/* 또는 텍스트 계열 application mime인지."""
    base = mime_type.split(";", 1)[0].strip().lower()
    return base.startswith("text/") or base in TEXT_MIME_TYPES
