"""
test_theme_bundle.py - theme bundle 테스트

DoD:
- asset 순서대로 output 0..k-1, theme는 마지막
- slot 필드는 light/dark 모두에 "{{vout:N}}"
- bundle.assets에 {index, kind, slot}
- slot 중복, styles.light/dark 누락은 build 시점에 SchemaError
"""

import json

import pytest

from src.bundle.theme import ThemeBundleAsset, build_theme_bundle
from src.domain.errors import ErrorCodes, SchemaError
from src.domain.schemas import AssetKind, OrderPolicy


@pytest.fixture
def theme_assets() -> list[ThemeBundleAsset]:
    return [
        ThemeBundleAsset(slot="sans", payload=b"wOF2", mime_type="font/woff2", name="Inter"),
        ThemeBundleAsset(slot="pattern", payload=b"<svg/>", mime_type="image/svg+xml"),
    ]


class TestBuildThemeBundle:
    """build_theme_bundle 함수 테스트."""

    def test_order(self, sample_theme, theme_assets):
        result = build_theme_bundle(sample_theme, theme_assets)

        assert result.order_policy is OrderPolicy.MANIFEST_LAST
        assert [item.kind for item in result.items] == [
            AssetKind.FONT,
            AssetKind.PATTERN,
            AssetKind.THEME,
        ]

    def test_slot_fields(self, sample_theme, theme_assets):
        result = build_theme_bundle(sample_theme, theme_assets)

        for mode in ("light", "dark"):
            styles = result.document["styles"][mode]
            assert styles["font-sans"] == "{{vout:0}}"
            assert styles["--bg-pattern"] == "{{vout:1}}"

    def test_type_and_bundle_section(self, sample_theme, theme_assets):
        result = build_theme_bundle(sample_theme, theme_assets)

        assert result.document["type"] == "registry:style"
        assert result.document["bundle"] == {
            "version": 1,
            "assets": [
                {"index": 0, "kind": "font", "slot": "sans"},
                {"index": 1, "kind": "pattern", "slot": "pattern"},
            ],
        }
        assert result.slot_indices == {"sans": 0, "pattern": 1}

    def test_input_theme_not_mutated(self, sample_theme, theme_assets):
        before = json.dumps(sample_theme, sort_keys=True)

        build_theme_bundle(sample_theme, theme_assets)

        assert json.dumps(sample_theme, sort_keys=True) == before

    def test_metadata(self, sample_theme, theme_assets):
        result = build_theme_bundle(
            sample_theme, theme_assets, prompt="neon night", provider="p", model="m"
        )

        font, pattern, theme = result.items
        assert font.metadata == {"app": "theme-token", "type": "font", "prompt": "neon night"}
        assert pattern.metadata["ctx"] == "tile"
        assert pattern.metadata["license"] == "CC0"
        assert theme.metadata == {
            "app": "theme-token",
            "type": "theme",
            "prompt": "neon night",
            "provider": "p",
            "model": "m",
        }
        assert theme.display_name == "Midnight Neon"

    def test_wallpaper_context(self, sample_theme):
        assets = [ThemeBundleAsset(slot="wallpaper", payload=b"png", mime_type="image/png")]

        result = build_theme_bundle(sample_theme, assets)

        assert result.items[0].kind is AssetKind.WALLPAPER
        assert result.items[0].metadata["ctx"] == "wallpaper"
        assert result.document["styles"]["light"]["--hero-image"] == "{{vout:0}}"

    def test_unknown_slot(self, sample_theme):
        assets = [ThemeBundleAsset(slot="cursor", payload=b"x", mime_type="image/png")]

        with pytest.raises(SchemaError) as exc_info:
            build_theme_bundle(sample_theme, assets)

        assert exc_info.value.code == ErrorCodes.UNKNOWN_SLOT

    def test_no_assets(self, sample_theme):
        result = build_theme_bundle(sample_theme, [])

        assert len(result.items) == 1
        assert result.document["bundle"]["assets"] == []

    def test_svg_pattern_tile_size(self, sample_theme):
        svg = b'<svg><pattern id="p" width="24" height="12"></pattern></svg>'
        assets = [ThemeBundleAsset(slot="pattern", payload=svg, mime_type="image/svg+xml")]

        result = build_theme_bundle(sample_theme, assets)

        assert result.items[0].metadata["meta"] == "24,12"


# =============================================================================
# 입력 검증
# =============================================================================

class TestThemeBundleInputErrors:
    """서빙 불가능한 번들은 아이템 생성 전에 거부."""

    def test_duplicate_slot(self, sample_theme):
        """같은 slot 두 번 → 앞 asset이 참조 없는 output이 되므로 실패."""
        assets = [
            ThemeBundleAsset(slot="sans", payload=b"a", mime_type="font/woff2"),
            ThemeBundleAsset(slot="sans", payload=b"b", mime_type="font/woff2"),
        ]

        with pytest.raises(SchemaError) as exc_info:
            build_theme_bundle(sample_theme, assets)

        assert exc_info.value.code == ErrorCodes.DUPLICATE_SLOT
        assert exc_info.value.context["index"] == 1
        assert exc_info.value.context["first_index"] == 0

    @pytest.mark.parametrize("mode", ["light", "dark"])
    def test_missing_mode_styles(self, sample_theme, mode):
        del sample_theme["styles"][mode]
        assets = [ThemeBundleAsset(slot="sans", payload=b"a", mime_type="font/woff2")]

        with pytest.raises(SchemaError) as exc_info:
            build_theme_bundle(sample_theme, assets)

        assert exc_info.value.code == ErrorCodes.SCHEMA_FIELD_MISSING
        assert exc_info.value.context["field"] == f"styles.{mode}"

    def test_missing_styles(self):
        assets = [ThemeBundleAsset(slot="sans", payload=b"a", mime_type="font/woff2")]

        with pytest.raises(SchemaError) as exc_info:
            build_theme_bundle({"name": "n"}, assets)

        assert exc_info.value.context["field"] == "styles.light"

    def test_missing_name(self, sample_theme):
        del sample_theme["name"]

        with pytest.raises(SchemaError) as exc_info:
            build_theme_bundle(sample_theme, [])

        assert exc_info.value.context["field"] == "name"
