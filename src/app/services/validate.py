"""
Validation Service: resolve된 문서 → kind별 검증된 manifest 타입.

규칙:
- 검증은 ResolvedDocument에만 적용 (template은 검증 불가)
- kind 판별은 type 필드 (type 없이 styles만 있으면 legacy theme)
- 등록되지 않은 type → UnsupportedKindError (조용한 통과 금지)
- 필드 누락/타입 오류 → SchemaError(field=...)
"""

import logging
from typing import Any

from src.bundle.project import make_project_config
from src.core.locator import is_locator, parse_locator
from src.core.resolver import has_references
from src.domain.constants import KIND_ALIASES
from src.domain.errors import ErrorCodes, SchemaError, UnsupportedKindError
from src.domain.schemas import (
    BundleAssetRef,
    ContentLocator,
    JsonObject,
    ManifestKind,
    ProjectManifest,
    RegistryFileEntry,
    RegistryManifest,
    ResolvedDocument,
    ThemeManifest,
    ValidatedManifest,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Kind Detection
# =============================================================================

def detect_kind(document: JsonObject) -> ManifestKind:
    """
    manifest kind 판별.

    Raises:
        UnsupportedKindError: 등록된 translator가 없는 type
    """
    declared = document.get("type")

    if isinstance(declared, str) and declared in KIND_ALIASES:
        return ManifestKind(KIND_ALIASES[declared])

    if declared is None and isinstance(document.get("styles"), dict):
        return ManifestKind.THEME

    raise UnsupportedKindError(kind=declared, supported=sorted(KIND_ALIASES))


def validate_manifest(
    resolved: ResolvedDocument,
    expected: ManifestKind | None = None,
) -> ValidatedManifest:
    """
    resolve된 문서 검증.

    Args:
        resolved: resolve 완료 문서
        expected: 기대 kind (타입 지정 라우트). 다르면 SchemaError

    Returns:
        ThemeManifest | RegistryManifest | ProjectManifest

    Raises:
        UnsupportedKindError: kind 판별 불가
        SchemaError: 스키마 불일치 / kind 불일치 / 미해결 placeholder
    """
    document = resolved.document
    kind = detect_kind(document)

    if expected is not None and kind is not expected:
        raise SchemaError(
            ErrorCodes.KIND_MISMATCH,
            expected=expected.value,
            received=kind.value,
        )

    if has_references(document):
        raise SchemaError(ErrorCodes.UNRESOLVED_REFERENCE, locator=str(resolved.locator))

    manifest: ValidatedManifest
    if kind is ManifestKind.THEME:
        manifest = _validate_theme(resolved.locator, document)
    elif kind is ManifestKind.PROJECT:
        manifest = _validate_project(resolved.locator, document)
    else:
        manifest = _validate_registry(resolved.locator, kind, document)

    logger.debug(f"Validated {kind.value} manifest: {resolved.locator}")
    return manifest


# =============================================================================
# Kind Validators
# =============================================================================

def _validate_theme(locator: ContentLocator, document: JsonObject) -> ThemeManifest:
    styles = _require_dict(document, "styles")
    return ThemeManifest(
        locator=locator,
        name=_require_str(document, "name"),
        light=_css_vars(styles, "light", "styles.light"),
        dark=_css_vars(styles, "dark", "styles.dark"),
        description=_optional_str(document, "description"),
        author=_optional_str(document, "author"),
        assets=_bundle_assets(document),
    )


def _validate_registry(
    locator: ContentLocator,
    kind: ManifestKind,
    document: JsonObject,
) -> RegistryManifest:
    declared_type = str(document["type"])
    raw_files = document.get("files")
    if not isinstance(raw_files, list):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field="files")

    files = [
        _file_entry(locator, declared_type, raw, position)
        for position, raw in enumerate(raw_files)
    ]

    return RegistryManifest(
        locator=locator,
        kind=kind,
        name=_require_str(document, "name"),
        type=declared_type,
        files=files,
        description=_optional_str(document, "description"),
        dependencies=_str_list(document, "dependencies"),
        registry_dependencies=_str_list(document, "registryDependencies"),
        css_vars=_optional_dict(document, "cssVars"),
        css=_optional_dict(document, "css"),
        tailwind=_optional_dict(document, "tailwind"),
    )


def _validate_project(locator: ContentLocator, document: JsonObject) -> ProjectManifest:
    name = _require_str(document, "name")
    css_vars = _require_dict(document, "cssVars")
    raw_config = _optional_dict(document, "config") or {}

    return ProjectManifest(
        locator=locator,
        name=name,
        light=_css_vars(css_vars, "light", "cssVars.light"),
        dark=_css_vars(css_vars, "dark", "cssVars.dark"),
        config=make_project_config(name, raw_config, strict=True),
        extends=_optional_str(document, "extends") or "none",
        dependencies=_str_list(document, "dependencies"),
        registry_dependencies=_str_list(document, "registryDependencies"),
        css=_optional_dict(document, "css"),
        assets=_bundle_assets(document),
    )


def _file_entry(
    locator: ContentLocator,
    default_type: str,
    raw: Any,
    position: int,
) -> RegistryFileEntry:
    """
    files[] 항목 검증.

    sibling 참조 형식 (우선순위):
    1. index: int
    2. vout: int (legacy)
    3. target: "<txid>_<N>" (resolve된 placeholder)
    """
    field = f"files[{position}]"
    if not isinstance(raw, dict):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=field, expected="object")

    path = raw.get("path")
    if not isinstance(path, str) or not path:
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=f"{field}.path")

    file_type = raw.get("type", default_type)
    if not isinstance(file_type, str):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=f"{field}.type", expected="string")

    content = raw.get("content")
    if content is not None and not isinstance(content, str):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=f"{field}.content", expected="string")

    target = raw.get("target")
    source: ContentLocator | None = None

    for key in ("index", "vout"):
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SchemaError(
                ErrorCodes.SCHEMA_FIELD_TYPE,
                field=f"{field}.{key}",
                expected="non-negative integer",
            )
        source = locator.sibling(value)
        break

    if source is None and is_locator(target):
        source = parse_locator(str(target))
        target = None

    # 빈 content는 inline으로 보지 않음 → sibling 참조 필요
    if not content and source is None:
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=f"{field}.content")

    if not content and source == locator:
        raise SchemaError(
            ErrorCodes.SCHEMA_FIELD_TYPE,
            field=field,
            reason="file references the manifest itself",
        )

    return RegistryFileEntry(
        path=path,
        type=file_type,
        content=content,
        source=None if content else source,
        target=target if isinstance(target, str) else None,
    )


def _bundle_assets(document: JsonObject) -> list[BundleAssetRef]:
    """bundle.assets[] (없으면 빈 목록). legacy vout/type 키 허용."""
    bundle = document.get("bundle")
    if bundle is None:
        return []
    if not isinstance(bundle, dict) or not isinstance(bundle.get("assets", []), list):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field="bundle.assets", expected="array")

    refs = []
    for position, raw in enumerate(bundle.get("assets", [])):
        if not isinstance(raw, dict):
            raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=f"bundle.assets[{position}]")
        index = raw.get("index", raw.get("vout"))
        kind = raw.get("kind", raw.get("type"))
        if not isinstance(index, int) or isinstance(index, bool) or not isinstance(kind, str):
            raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=f"bundle.assets[{position}]")
        slot = raw.get("slot")
        library = raw.get("library")
        refs.append(
            BundleAssetRef(
                index=index,
                kind=kind,
                slot=slot if isinstance(slot, str) else None,
                library=library if isinstance(library, str) else None,
            )
        )
    return refs


# =============================================================================
# Field Helpers
# =============================================================================

def _require_str(document: JsonObject, key: str) -> str:
    value = document.get(key)
    if value is None or value == "":
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=key)
    if not isinstance(value, str):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=key, expected="string")
    return value


def _optional_str(document: JsonObject, key: str) -> str | None:
    value = document.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=key, expected="string")
    return value


def _require_dict(document: JsonObject, key: str) -> dict[str, Any]:
    value = document.get(key)
    if value is None:
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=key)
    if not isinstance(value, dict):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=key, expected="object")
    return value


def _optional_dict(document: JsonObject, key: str) -> dict[str, Any] | None:
    value = document.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=key, expected="object")
    return value


def _str_list(document: JsonObject, key: str) -> list[str]:
    value = document.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=key, expected="array of strings")
    return list(value)


def _css_vars(container: dict[str, Any], mode: str, field: str) -> dict[str, str]:
    """한 모드의 CSS 변수: 값은 모두 문자열 (숫자는 문자열로 정규화)."""
    value = container.get(mode)
    if value is None:
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=field)
    if not isinstance(value, dict):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=field, expected="object")

    result: dict[str, str] = {}
    for key, item in value.items():
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=f"{field}.{key}", expected="string")
        result[key] = str(item)
    return result
