"""
Theme style 파생값.

- sidebar/chart 색: 기본 색에서 복사 (소스 키가 없으면 건너뜀)
- radius 스케일: base radius + 고정 offset
- light/dark 공통값: SHARED_THEME_KEYS 중 값이 같은 것만
"""

from collections.abc import Mapping

from src.domain.constants import (
    CHART_COLOR_SOURCES,
    DEFAULT_FONT_STACKS,
    DEFAULT_RADIUS,
    RADIUS_OFFSETS,
    SHARED_THEME_KEYS,
    SIDEBAR_COLOR_SOURCES,
)


def derive_sidebar_colors(styles: Mapping[str, str]) -> dict[str, str]:
    return {
        target: styles[source]
        for target, source in SIDEBAR_COLOR_SOURCES.items()
        if source in styles
    }


def derive_chart_colors(styles: Mapping[str, str]) -> dict[str, str]:
    return {
        target: styles[source]
        for target, source in CHART_COLOR_SOURCES.items()
        if source in styles
    }


def extend_styles(styles: Mapping[str, str], overwrite: bool = True) -> dict[str, str]:
    """
    sidebar/chart 색 추가.

    Args:
        styles: 한 모드의 CSS 변수
        overwrite: True면 파생값으로 덮어씀, False면 없는 키만 채움
    """
    derived = {**derive_sidebar_colors(styles), **derive_chart_colors(styles)}
    if overwrite:
        return {**styles, **derived}
    return {**derived, **styles}


def radius_scale(radius: str | None) -> dict[str, str]:
    """radius-sm/md/lg/xl (calc(var(--radius) ± offset))."""
    scale = {"radius": radius or DEFAULT_RADIUS}
    for key, offset in RADIUS_OFFSETS.items():
        scale[key] = f"calc(var(--radius) {offset})" if offset else "var(--radius)"
    return scale


def with_fallbacks(styles: Mapping[str, str]) -> dict[str, str]:
    """기본 폰트 스택, 기본 radius 채움 (있는 값은 유지)."""
    result = dict(styles)
    for key, stack in DEFAULT_FONT_STACKS.items():
        result.setdefault(key, stack)
    result.setdefault("radius", DEFAULT_RADIUS)
    return result


def shared_theme_vars(light: Mapping[str, str], dark: Mapping[str, str]) -> dict[str, str]:
    """light/dark에서 값이 같은 공통 키."""
    shared: dict[str, str] = {}
    for key in SHARED_THEME_KEYS:
        value = light.get(key)
        if value and value == dark.get(key):
            shared[key] = value
    return shared
