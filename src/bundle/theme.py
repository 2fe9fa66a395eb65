"""
Theme bundle (manifest-last).

구조:
- output 0..k-1: font / pattern / wallpaper asset
- output k: theme JSON (registry:style), asset 필드는 "{{vout:N}}"

slot → theme 필드:
- sans/serif/mono → styles.{light,dark}.font-*
- pattern → styles.{light,dark}.--bg-pattern
- wallpaper → styles.{light,dark}.--hero-image
"""

from collections.abc import Sequence
from dataclasses import dataclass

from src.bundle.builder import build
from src.bundle.metadata import (
    build_font_metadata,
    build_pattern_metadata,
    build_theme_metadata,
    extract_tile_dimensions,
)
from src.core.documents import FieldPath
from src.domain.constants import THEME_BUNDLE_VERSION
from src.domain.errors import ErrorCodes, SchemaError
from src.domain.schemas import (
    AssetKind,
    BuildResult,
    BundleAsset,
    JsonObject,
    ManifestKind,
    OrderPolicy,
)

THEME_MODES = ("light", "dark")

SLOT_PROPERTIES = {
    "sans": "font-sans",
    "serif": "font-serif",
    "mono": "font-mono",
    "pattern": "--bg-pattern",
    "wallpaper": "--hero-image",
}

SLOT_KINDS = {
    "sans": AssetKind.FONT,
    "serif": AssetKind.FONT,
    "mono": AssetKind.FONT,
    "pattern": AssetKind.PATTERN,
    "wallpaper": AssetKind.WALLPAPER,
}


@dataclass(frozen=True)
class ThemeBundleAsset:
    """theme에 묶을 asset 하나."""
    slot: str
    payload: bytes
    mime_type: str
    name: str | None = None


def build_theme_bundle(
    theme: JsonObject,
    assets: Sequence[ThemeBundleAsset],
    prompt: str | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> BuildResult:
    """
    theme bundle 생성.

    Args:
        theme: theme 문서 (name, styles.light, styles.dark)
        assets: slot별 asset (순서대로 output 0, 1, ...)
        prompt/provider/model: 생성 출처 (아이템 메타데이터에 기록)

    Returns:
        BuildResult (마지막 아이템이 theme)

    Raises:
        SchemaError: name/styles.light/styles.dark 누락, 알 수 없는 slot, slot 중복
    """
    name = theme.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field="name")

    styles = theme.get("styles")
    for mode in THEME_MODES:
        if not isinstance(styles, dict) or not isinstance(styles.get(mode), dict):
            raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=f"styles.{mode}")

    bundle_assets: list[BundleAsset] = []
    slot_map: dict[str, int] = {}
    placements: dict[str, list[FieldPath]] = {}
    asset_refs: list[dict] = []

    for index, asset in enumerate(assets):
        if asset.slot not in SLOT_PROPERTIES:
            raise SchemaError(ErrorCodes.UNKNOWN_SLOT, slot=asset.slot, index=index)
        # slot당 asset 하나 (중복이면 앞 asset이 참조 없는 output이 됨)
        if asset.slot in slot_map:
            raise SchemaError(
                ErrorCodes.DUPLICATE_SLOT,
                slot=asset.slot,
                index=index,
                first_index=slot_map[asset.slot],
            )

        kind = SLOT_KINDS[asset.slot]
        bundle_assets.append(
            BundleAsset(
                kind=kind,
                payload=asset.payload,
                mime_type=asset.mime_type,
                display_name=asset.name or asset.slot,
                metadata=_asset_metadata(kind, asset, prompt),
            )
        )
        slot_map[asset.slot] = index
        placements[asset.slot] = [("styles", mode, SLOT_PROPERTIES[asset.slot]) for mode in THEME_MODES]
        asset_refs.append({"index": index, "kind": kind.value, "slot": asset.slot})

    template = dict(theme)
    template["type"] = ManifestKind.THEME.value
    template["bundle"] = {"version": THEME_BUNDLE_VERSION, "assets": asset_refs}

    primary_metadata = build_theme_metadata()
    if prompt:
        primary_metadata["prompt"] = prompt
    if provider:
        primary_metadata["provider"] = provider
    if model:
        primary_metadata["model"] = model

    return build(
        bundle_assets,
        template,
        slot_map,
        OrderPolicy.MANIFEST_LAST,
        placements=placements,
        primary_kind=AssetKind.THEME,
        primary_name=name,
        primary_metadata=primary_metadata,
    )


def _asset_metadata(kind: AssetKind, asset: ThemeBundleAsset, prompt: str | None) -> dict[str, str]:
    if kind is AssetKind.FONT:
        return build_font_metadata(prompt=prompt)
    if kind is AssetKind.WALLPAPER:
        return build_pattern_metadata(name=asset.name, prompt=prompt, ctx="wallpaper")

    tile_size = None
    if asset.mime_type.startswith("image/svg"):
        tile_size = extract_tile_dimensions(asset.payload.decode("utf-8", errors="replace"))
    return build_pattern_metadata(name=asset.name, prompt=prompt, ctx="tile", meta=tile_size)
