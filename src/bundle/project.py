"""
Project bundle (registry:base, manifest-last).

구조:
- output 0..k-1: font / icons / wallpaper / pattern asset
- output k: project manifest, registryDependencies = ["utils", "{{vout:i}}" (font마다)]

/init 엔드포인트가 이 manifest를 shadcn create preset으로 제공.
"""

import copy
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from src.bundle.builder import build
from src.core.styles import extend_styles
from src.domain.constants import (
    DEFAULT_PROJECT_CSS,
    DEFAULT_PROJECT_DEPENDENCIES,
    ICON_LIBRARY_PACKAGES,
    PROJECT_BUNDLE_VERSION,
    VALID_BASE_COLORS,
    VALID_MENU_ACCENTS,
    VALID_MENU_COLORS,
    placeholder,
)
from src.domain.errors import ErrorCodes, SchemaError
from src.domain.schemas import (
    AssetKind,
    BuildResult,
    BundleAsset,
    BundleAssetRef,
    JsonObject,
    ManifestKind,
    OrderPolicy,
    ProjectConfig,
)

PROJECT_ASSET_KINDS = {
    "font": AssetKind.FONT,
    "icons": AssetKind.ICON,
    "wallpaper": AssetKind.WALLPAPER,
    "pattern": AssetKind.PATTERN,
}

# config 키 → 허용값
CONFIG_CHOICES: dict[str, tuple[str, ...]] = {
    "iconLibrary": tuple(ICON_LIBRARY_PACKAGES),
    "baseColor": VALID_BASE_COLORS,
    "menuColor": VALID_MENU_COLORS,
    "menuAccent": VALID_MENU_ACCENTS,
}


@dataclass(frozen=True)
class ProjectBundleAsset:
    """project에 묶을 asset 하나."""
    type: str  # font, icons, wallpaper, pattern
    payload: bytes
    mime_type: str
    slot: str | None = None
    library: str | None = None
    name: str | None = None


def style_name(name: str) -> str:
    """프로젝트 이름 → config.style (소문자, 공백은 '-')."""
    return re.sub(r"\s+", "-", name.strip().lower())


def make_project_config(
    name: str,
    overrides: Mapping[str, Any] | None = None,
    strict: bool = True,
) -> ProjectConfig:
    """
    ProjectConfig 생성.

    Args:
        name: 프로젝트 이름 (style 기본값)
        overrides: iconLibrary, baseColor, menuColor, menuAccent, style
            (tailwind.baseColor 중첩 형식도 허용)
        strict: True면 허용값 밖의 값에 SchemaError, False면 무시

    Raises:
        SchemaError: strict 모드에서 허용값 밖의 값
    """
    values = dict(overrides or {})
    tailwind = values.get("tailwind")
    if isinstance(tailwind, dict) and "baseColor" in tailwind:
        values.setdefault("baseColor", tailwind["baseColor"])

    accepted: dict[str, str] = {}
    for key, choices in CONFIG_CHOICES.items():
        value = values.get(key)
        if value is None:
            continue
        if value in choices:
            accepted[key] = value
        elif strict:
            raise SchemaError(
                ErrorCodes.SCHEMA_FIELD_TYPE,
                field=f"config.{key}",
                value=value,
                expected=list(choices),
            )

    config = ProjectConfig(style=str(values.get("style") or style_name(name)))
    if "iconLibrary" in accepted:
        config.icon_library = accepted["iconLibrary"]
    if "baseColor" in accepted:
        config.base_color = accepted["baseColor"]
    if "menuColor" in accepted:
        config.menu_color = accepted["menuColor"]
    if "menuAccent" in accepted:
        config.menu_accent = accepted["menuAccent"]
    return config


def icon_dependencies(dependencies: Sequence[str], icon_library: str) -> list[str]:
    """기존 아이콘 패키지 제거 후 icon_library 패키지 추가."""
    known = {pkg for packages in ICON_LIBRARY_PACKAGES.values() for pkg in packages}
    kept = [dep for dep in dependencies if dep not in known]
    return [*kept, *ICON_LIBRARY_PACKAGES[icon_library]]


def create_project_manifest(
    theme: JsonObject,
    config: ProjectConfig | None = None,
    assets: Sequence[BundleAssetRef] | None = None,
) -> JsonObject:
    """
    theme + config → registry:base manifest.

    sidebar/chart 색은 theme 기본 색에서 파생.
    """
    name = str(theme.get("name", ""))
    config = config or make_project_config(name)

    styles = theme.get("styles")
    styles = styles if isinstance(styles, dict) else {}
    light = styles.get("light") if isinstance(styles.get("light"), dict) else {}
    dark = styles.get("dark") if isinstance(styles.get("dark"), dict) else {}

    manifest: JsonObject = {
        "type": ManifestKind.PROJECT.value,
        "name": name,
        "extends": "none",
        "dependencies": icon_dependencies(DEFAULT_PROJECT_DEPENDENCIES, config.icon_library),
        "registryDependencies": ["utils"],
        "cssVars": {
            "light": extend_styles(light),
            "dark": extend_styles(dark),
        },
        "css": copy.deepcopy(DEFAULT_PROJECT_CSS),
        "config": config.to_dict(),
    }
    if assets:
        manifest["bundle"] = {
            "version": PROJECT_BUNDLE_VERSION,
            "assets": [ref.to_dict() for ref in assets],
        }
    return manifest


def build_project_bundle(
    theme: JsonObject,
    config: Mapping[str, Any] | None = None,
    assets: Sequence[ProjectBundleAsset] = (),
    author: str | None = None,
) -> BuildResult:
    """
    project bundle 생성.

    Args:
        theme: 기본 theme 문서
        config: config override (iconLibrary, baseColor, menuColor, menuAccent)
        assets: 묶을 asset (순서대로 output 0, 1, ...)
        author: 작성자

    Returns:
        BuildResult (마지막 아이템이 manifest)

    Raises:
        SchemaError: 알 수 없는 asset type 또는 config 값
    """
    bundle_assets: list[BundleAsset] = []
    refs: list[BundleAssetRef] = []
    font_indices: list[int] = []

    for index, asset in enumerate(assets):
        kind = PROJECT_ASSET_KINDS.get(asset.type)
        if kind is None:
            raise SchemaError(
                ErrorCodes.SCHEMA_FIELD_TYPE,
                field=f"assets[{index}].type",
                value=asset.type,
                expected=list(PROJECT_ASSET_KINDS),
            )

        metadata = {"projectAsset": "true", "assetType": asset.type}
        if asset.slot:
            metadata["slot"] = asset.slot
        if asset.library:
            metadata["library"] = asset.library

        bundle_assets.append(
            BundleAsset(
                kind=kind,
                payload=asset.payload,
                mime_type=asset.mime_type,
                display_name=asset.name or asset.slot or asset.type,
                metadata=metadata,
            )
        )
        refs.append(BundleAssetRef(index=index, kind=asset.type, slot=asset.slot, library=asset.library))
        if asset.type == "font" and asset.slot:
            font_indices.append(index)

    name = str(theme.get("name", ""))
    project_config = make_project_config(name, config)
    template = create_project_manifest(theme, project_config, refs)
    template["registryDependencies"] = ["utils", *(placeholder(i) for i in font_indices)]

    metadata = {"registryType": ManifestKind.PROJECT.value}
    if author:
        metadata["author"] = author

    return build(
        bundle_assets,
        template,
        {},
        OrderPolicy.MANIFEST_LAST,
        primary_kind=AssetKind.PROJECT,
        primary_name=name,
        primary_metadata=metadata,
    )
