"""
Asset MAP 메타데이터 빌더.

inscription마다 붙는 key/value 메타데이터 (전부 문자열).
- app: 항상 "theme-token"
- pattern: ctx 기본 "tile", license 기본 "CC0"
"""

import re

APP_NAME = "theme-token"
DEFAULT_LICENSE = "CC0"

# ctx: CSS 렌더링 방식
ASSET_CONTEXTS = ("tile", "wallpaper", "sprite", "avatar")

_PATTERN_SIZE = re.compile(r'<pattern[^>]*width="(\d+)"[^>]*height="(\d+)"')
_PATTERN_SIZE_SWAPPED = re.compile(r'<pattern[^>]*height="(\d+)"[^>]*width="(\d+)"')


def build_pattern_metadata(
    name: str | None = None,
    author: str | None = None,
    license: str | None = None,
    prompt: str | None = None,
    ctx: str = "tile",
    meta: tuple[int, int] | None = None,
) -> dict[str, str]:
    """
    pattern/wallpaper 메타데이터.

    Args:
        name: 표시 이름
        author: 작성자
        license: 라이선스 (없으면 CC0)
        prompt: 생성 프롬프트
        ctx: 렌더링 컨텍스트 (tile, wallpaper, sprite, avatar)
        meta: (width, height) 타일 크기

    Returns:
        문자열 key/value dict
    """
    if ctx not in ASSET_CONTEXTS:
        raise ValueError(f"Unknown asset context: {ctx}")

    result = {"app": APP_NAME, "ctx": ctx}

    if meta:
        result["meta"] = ",".join(str(v) for v in meta)
    if name:
        result["name"] = name
    if author:
        result["author"] = author
    result["license"] = license or DEFAULT_LICENSE
    if prompt:
        result["prompt"] = prompt

    return result


def build_font_metadata(
    author: str | None = None,
    license: str | None = None,
    prompt: str | None = None,
) -> dict[str, str]:
    """font 메타데이터 (license 기본값 없음)."""
    result = {"app": APP_NAME, "type": "font"}

    if author:
        result["author"] = author
    if license:
        result["license"] = license
    if prompt:
        result["prompt"] = prompt

    return result


def build_theme_metadata() -> dict[str, str]:
    return {"app": APP_NAME, "type": "theme"}


def extract_tile_dimensions(svg: str) -> tuple[int, int] | None:
    """SVG <pattern>의 (width, height). 없으면 None."""
    match = _PATTERN_SIZE.search(svg)
    if match:
        return int(match.group(1)), int(match.group(2))

    match = _PATTERN_SIZE_SWAPPED.search(svg)
    if match:
        return int(match.group(2)), int(match.group(1))

    return None
