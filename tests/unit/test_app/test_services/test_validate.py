"""
test_validate.py - manifest 검증 테스트

DoD:
- type 필드로 kind 판별, type 없이 styles만 있으면 legacy theme
- 등록 안 된 type → UnsupportedKindError
- 타입 지정 라우트에서 kind가 다르면 SchemaError(KIND_MISMATCH)
- 남은 placeholder → SchemaError(UNRESOLVED_REFERENCE)
"""

import pytest

from src.app.services.validate import detect_kind, validate_manifest
from src.domain.errors import ErrorCodes, SchemaError, UnsupportedKindError
from src.domain.schemas import (
    ContentLocator,
    ManifestKind,
    ProjectManifest,
    RegistryManifest,
    ResolvedDocument,
    ThemeManifest,
)


def _resolved(document: dict, locator: ContentLocator) -> ResolvedDocument:
    return ResolvedDocument(locator=locator, document=document)


# =============================================================================
# detect_kind 테스트
# =============================================================================

class TestDetectKind:
    """detect_kind 함수 테스트."""

    @pytest.mark.parametrize(
        "declared,expected",
        [
            ("registry:style", ManifestKind.THEME),
            ("theme", ManifestKind.THEME),
            ("registry:component", ManifestKind.COMPONENT),
            ("registry:ui", ManifestKind.COMPONENT),
            ("registry:block", ManifestKind.BLOCK),
            ("registry:base", ManifestKind.PROJECT),
        ],
    )
    def test_declared_type(self, declared, expected):
        assert detect_kind({"type": declared}) is expected

    def test_legacy_theme(self):
        assert detect_kind({"styles": {}}) is ManifestKind.THEME

    @pytest.mark.parametrize("document", [{"type": "registry:hook"}, {"name": "x"}, {"type": 3}])
    def test_unsupported(self, document):
        with pytest.raises(UnsupportedKindError):
            detect_kind(document)


# =============================================================================
# Theme 검증 테스트
# =============================================================================

class TestValidateTheme:
    """registry:style 검증."""

    def test_valid(self, sample_theme, entry_locator):
        manifest = validate_manifest(_resolved(sample_theme, entry_locator))

        assert isinstance(manifest, ThemeManifest)
        assert manifest.name == "Midnight Neon"
        assert manifest.author == "satoshi"
        assert manifest.light["radius"] == "0.5rem"

    def test_numbers_stringified(self, sample_theme, entry_locator):
        sample_theme["styles"]["light"]["spacing"] = 4

        manifest = validate_manifest(_resolved(sample_theme, entry_locator))

        assert manifest.light["spacing"] == "4"

    def test_missing_dark(self, sample_theme, entry_locator):
        del sample_theme["styles"]["dark"]

        with pytest.raises(SchemaError) as exc_info:
            validate_manifest(_resolved(sample_theme, entry_locator))

        assert exc_info.value.context["field"] == "styles.dark"

    def test_missing_name(self, sample_theme, entry_locator):
        del sample_theme["name"]

        with pytest.raises(SchemaError) as exc_info:
            validate_manifest(_resolved(sample_theme, entry_locator))

        assert exc_info.value.code == ErrorCodes.SCHEMA_FIELD_MISSING

    def test_unresolved_placeholder(self, sample_theme, entry_locator):
        sample_theme["styles"]["light"]["font-sans"] = "{{vout:0}}"

        with pytest.raises(SchemaError) as exc_info:
            validate_manifest(_resolved(sample_theme, entry_locator))

        assert exc_info.value.code == ErrorCodes.UNRESOLVED_REFERENCE

    def test_bundle_assets(self, sample_theme, entry_locator):
        sample_theme["bundle"] = {"version": 1, "assets": [{"vout": 0, "type": "font", "slot": "sans"}]}

        manifest = validate_manifest(_resolved(sample_theme, entry_locator))

        assert manifest.assets[0].index == 0
        assert manifest.assets[0].kind == "font"
        assert manifest.assets[0].slot == "sans"


# =============================================================================
# Registry 검증 테스트
# =============================================================================

class TestValidateRegistry:
    """registry:component / registry:block 검증."""

    def _document(self, files: list) -> dict:
        return {"name": "glow-button", "type": "registry:component", "files": files}

    def test_index_reference(self, entry_locator, txid):
        document = self._document([{"path": "a.tsx", "index": 1}])

        manifest = validate_manifest(_resolved(document, entry_locator))

        assert isinstance(manifest, RegistryManifest)
        assert manifest.files[0].source == ContentLocator(txid=txid, index=1)
        assert manifest.files[0].type == "registry:component"
        assert manifest.files[0].is_inline is False

    def test_legacy_vout(self, entry_locator, txid):
        document = self._document([{"path": "a.tsx", "vout": 2}])

        manifest = validate_manifest(_resolved(document, entry_locator))

        assert manifest.files[0].source == ContentLocator(txid=txid, index=2)

    def test_target_locator(self, entry_locator, other_txid):
        """resolve된 placeholder가 target에 있는 경우."""
        document = self._document([{"path": "a.tsx", "target": f"{other_txid}_1"}])

        manifest = validate_manifest(_resolved(document, entry_locator))

        assert manifest.files[0].source == ContentLocator(txid=other_txid, index=1)
        assert manifest.files[0].target is None

    def test_inline_content(self, entry_locator):
        document = self._document([{"path": "a.tsx", "content": "x", "target": "~/a.tsx"}])

        manifest = validate_manifest(_resolved(document, entry_locator))

        assert manifest.files[0].is_inline is True
        assert manifest.files[0].source is None
        assert manifest.files[0].target == "~/a.tsx"

    def test_no_reference_no_content(self, entry_locator):
        with pytest.raises(SchemaError):
            validate_manifest(_resolved(self._document([{"path": "a.tsx"}]), entry_locator))

    def test_empty_content_keeps_reference(self, entry_locator, txid):
        """빈 content는 inline 아님 → index 참조 유지."""
        document = self._document([{"path": "a.tsx", "content": "", "index": 1}])

        manifest = validate_manifest(_resolved(document, entry_locator))

        assert manifest.files[0].is_inline is False
        assert manifest.files[0].source == ContentLocator(txid=txid, index=1)

    def test_empty_content_without_reference(self, entry_locator):
        document = self._document([{"path": "a.tsx", "content": ""}])

        with pytest.raises(SchemaError) as exc_info:
            validate_manifest(_resolved(document, entry_locator))

        assert exc_info.value.context["field"] == "files[0].content"

    def test_self_reference(self, entry_locator):
        with pytest.raises(SchemaError):
            validate_manifest(_resolved(self._document([{"path": "a.tsx", "index": 0}]), entry_locator))

    def test_negative_index(self, entry_locator):
        with pytest.raises(SchemaError):
            validate_manifest(_resolved(self._document([{"path": "a.tsx", "index": -1}]), entry_locator))

    def test_files_missing(self, entry_locator):
        with pytest.raises(SchemaError) as exc_info:
            validate_manifest(_resolved({"name": "x", "type": "registry:block"}, entry_locator))

        assert exc_info.value.context["field"] == "files"

    def test_kind_mismatch(self, entry_locator):
        document = self._document([{"path": "a.tsx", "index": 1}])

        with pytest.raises(SchemaError) as exc_info:
            validate_manifest(_resolved(document, entry_locator), ManifestKind.BLOCK)

        assert exc_info.value.code == ErrorCodes.KIND_MISMATCH

    def test_optional_fields(self, entry_locator):
        document = self._document([{"path": "a.tsx", "index": 1}])
        document["dependencies"] = ["clsx"]
        document["cssVars"] = {"light": {"glow": "red"}}

        manifest = validate_manifest(_resolved(document, entry_locator))

        assert manifest.dependencies == ["clsx"]
        assert manifest.css_vars == {"light": {"glow": "red"}}

    def test_bad_dependencies(self, entry_locator):
        document = self._document([{"path": "a.tsx", "index": 1}])
        document["dependencies"] = "clsx"

        with pytest.raises(SchemaError):
            validate_manifest(_resolved(document, entry_locator))


# =============================================================================
# Project 검증 테스트
# =============================================================================

class TestValidateProject:
    """registry:base 검증."""

    def _document(self) -> dict:
        return {
            "type": "registry:base",
            "name": "Midnight Neon",
            "cssVars": {"light": {"primary": "p"}, "dark": {"primary": "q"}},
            "config": {"style": "midnight-neon", "tailwind": {"baseColor": "stone"}},
        }

    def test_valid(self, entry_locator):
        manifest = validate_manifest(_resolved(self._document(), entry_locator))

        assert isinstance(manifest, ProjectManifest)
        assert manifest.config.base_color == "stone"
        assert manifest.extends == "none"

    def test_invalid_config_value(self, entry_locator):
        document = self._document()
        document["config"]["iconLibrary"] = "fontawesome"

        with pytest.raises(SchemaError):
            validate_manifest(_resolved(document, entry_locator))

    def test_missing_css_vars(self, entry_locator):
        document = self._document()
        del document["cssVars"]

        with pytest.raises(SchemaError):
            validate_manifest(_resolved(document, entry_locator))
