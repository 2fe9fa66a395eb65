"""
Translation Service: 검증/hydration된 manifest → shadcn registry-item 문서.

규칙:
- 순수 함수 (I/O 없음)
- kind마다 translator 하나, 등록 안 된 kind → UnsupportedKindError
- 외부 스키마 필수 필드는 항상 채움 (기본 폰트 스택, radius 0.625rem, 기본 config)
- 값 전체가 locator인 문자열 → {content_base_url}/content/{locator}
"""

import copy
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from src.bundle.project import CONFIG_CHOICES, icon_dependencies, make_project_config
from src.core.documents import map_strings
from src.core.locator import is_locator
from src.core.styles import extend_styles, radius_scale, shared_theme_vars, with_fallbacks
from src.domain.constants import (
    DEFAULT_CONTENT_BASE_URL,
    DEFAULT_PROJECT_CSS,
    REGISTRY_ITEM_SCHEMA_URL,
)
from src.domain.errors import UnsupportedKindError
from src.domain.schemas import (
    HydratedRegistryManifest,
    ManifestKind,
    ProjectManifest,
    ThemeManifest,
    TranslatableManifest,
)

logger = logging.getLogger(__name__)


def shadcn_name(name: str) -> str:
    """shadcn 이름 규칙: 소문자, 영숫자 외 '-', 양끝 '-' 제거."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _omit_none(document: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in document.items() if v is not None}


# =============================================================================
# Translators
# =============================================================================

class Translator(ABC):
    """manifest kind 하나에 대한 translator."""

    kind: ManifestKind

    def __init__(self, content_base_url: str = DEFAULT_CONTENT_BASE_URL):
        self.content_base_url = content_base_url.rstrip("/")

    def content_url(self, value: str) -> str:
        if is_locator(value):
            return f"{self.content_base_url}/content/{value}"
        return value

    def link(self, value: Any) -> Any:
        """트리 안의 locator 값 → content URL."""
        return map_strings(value, self.content_url)

    @abstractmethod
    def translate(self, manifest: Any) -> dict[str, Any]:
        ...


class ThemeTranslator(Translator):
    """
    registry:style.

    styles.{light,dark} → cssVars.{theme, light, dark}
    - theme: light/dark 공통값 + radius 스케일
    - 없는 sidebar/chart 색은 기본 색에서 파생
    """

    kind = ManifestKind.THEME

    def translate(self, manifest: ThemeManifest) -> dict[str, Any]:
        light = self._mode(manifest.light)
        dark = self._mode(manifest.dark)

        theme_vars = shared_theme_vars(light, dark)
        scale = radius_scale(theme_vars.get("radius") or light.get("radius"))
        theme_vars.update({k: v for k, v in scale.items() if k != "radius"})

        return _omit_none({
            "$schema": REGISTRY_ITEM_SCHEMA_URL,
            "name": shadcn_name(manifest.name) or "theme",
            "type": ManifestKind.THEME.value,
            "title": manifest.name,
            "description": manifest.description,
            "author": manifest.author,
            "cssVars": {
                "theme": theme_vars,
                "light": light,
                "dark": dark,
            },
        })

    def _mode(self, styles: Mapping[str, str]) -> dict[str, str]:
        linked = {key: self.content_url(value) for key, value in styles.items()}
        return extend_styles(with_fallbacks(linked), overwrite=False)


class RegistryItemTranslator(Translator):
    """registry:component / registry:block (hydration 완료 manifest만)."""

    kind = ManifestKind.COMPONENT

    def __init__(
        self,
        content_base_url: str = DEFAULT_CONTENT_BASE_URL,
        kind: ManifestKind = ManifestKind.COMPONENT,
    ):
        super().__init__(content_base_url)
        self.kind = kind

    def translate(self, manifest: HydratedRegistryManifest) -> dict[str, Any]:
        files = [
            _omit_none({
                "path": file.path,
                "type": file.type,
                "content": file.content,
                "target": file.target,
            })
            for file in manifest.files
        ]

        return _omit_none({
            "$schema": REGISTRY_ITEM_SCHEMA_URL,
            "name": manifest.name,
            "type": manifest.type,
            "description": manifest.description,
            "dependencies": list(manifest.dependencies),
            "registryDependencies": [self.content_url(d) for d in manifest.registry_dependencies],
            "files": files,
            "cssVars": self.link(manifest.css_vars),
            "css": manifest.css,
            "tailwind": manifest.tailwind,
        })


class ProjectTranslator(Translator):
    """
    registry:base (shadcn create preset).

    /init 쿼리 override (iconLibrary, baseColor, menuColor, menuAccent) 적용.
    허용값 밖의 override는 무시.
    """

    kind = ManifestKind.PROJECT

    def __init__(
        self,
        content_base_url: str = DEFAULT_CONTENT_BASE_URL,
        overrides: Mapping[str, str | None] | None = None,
    ):
        super().__init__(content_base_url)
        self.overrides = {
            key: value
            for key, value in (overrides or {}).items()
            if value in CONFIG_CHOICES.get(key, ())
        }

    def translate(self, manifest: ProjectManifest) -> dict[str, Any]:
        base = manifest.config
        config = make_project_config(
            manifest.name,
            {
                "style": base.style,
                "iconLibrary": base.icon_library,
                "baseColor": base.base_color,
                "menuColor": base.menu_color,
                "menuAccent": base.menu_accent,
                **self.overrides,
            },
            strict=False,
        )

        dependencies = list(manifest.dependencies)
        if config.icon_library != base.icon_library or not dependencies:
            dependencies = icon_dependencies(dependencies, config.icon_library)

        light = extend_styles(with_fallbacks(self.link(manifest.light)), overwrite=False)
        dark = extend_styles(with_fallbacks(self.link(manifest.dark)), overwrite=False)

        return {
            "$schema": REGISTRY_ITEM_SCHEMA_URL,
            "type": ManifestKind.PROJECT.value,
            "name": manifest.name,
            "extends": manifest.extends,
            "dependencies": dependencies,
            "registryDependencies": [
                self.content_url(d) for d in manifest.registry_dependencies
            ] or ["utils"],
            "cssVars": {"light": light, "dark": dark},
            "css": manifest.css if manifest.css is not None else copy.deepcopy(DEFAULT_PROJECT_CSS),
            "config": config.to_dict(),
        }


# =============================================================================
# Registry
# =============================================================================

def get_translator(
    kind: ManifestKind,
    content_base_url: str = DEFAULT_CONTENT_BASE_URL,
    overrides: Mapping[str, str | None] | None = None,
) -> Translator:
    """
    kind → translator.

    Raises:
        UnsupportedKindError: 등록된 translator 없음
    """
    if kind is ManifestKind.THEME:
        return ThemeTranslator(content_base_url)
    if kind in (ManifestKind.COMPONENT, ManifestKind.BLOCK):
        return RegistryItemTranslator(content_base_url, kind=kind)
    if kind is ManifestKind.PROJECT:
        return ProjectTranslator(content_base_url, overrides=overrides)
    raise UnsupportedKindError(kind=str(kind))


def manifest_kind(manifest: TranslatableManifest) -> ManifestKind:
    """
    번역 가능한 manifest 타입 → kind.

    hydration 전 RegistryManifest는 번역 대상이 아님 (TypeError).
    """
    if isinstance(manifest, ThemeManifest):
        return ManifestKind.THEME
    if isinstance(manifest, ProjectManifest):
        return ManifestKind.PROJECT
    if isinstance(manifest, HydratedRegistryManifest):
        return manifest.kind
    raise TypeError(f"Not a translatable manifest: {type(manifest).__name__}")


def translate(
    manifest: TranslatableManifest,
    content_base_url: str = DEFAULT_CONTENT_BASE_URL,
    overrides: Mapping[str, str | None] | None = None,
) -> dict[str, Any]:
    """manifest → registry-item 문서 (kind별 translator 선택)."""
    kind = manifest_kind(manifest)
    translator = get_translator(kind, content_base_url, overrides)
    document = translator.translate(manifest)
    logger.debug(f"Translated {kind.value}: {manifest.locator}")
    return document
