"""
Block/Component bundle (manifest-first).

구조:
- output 0: manifest JSON (application/json), files[]에 {path, type, index}
- output 1..k: 코드 파일 (text/plain)

파일 content는 manifest에 넣지 않음 → gateway가 hydration 시 채움
"""

from collections.abc import Mapping
from typing import Any

from src.bundle.builder import build
from src.domain.constants import CODE_FILE_MIME_TYPE
from src.domain.errors import ErrorCodes, SchemaError, UnsupportedKindError
from src.domain.schemas import (
    AssetKind,
    BuildResult,
    BundleAsset,
    JsonObject,
    JsonValue,
    ManifestKind,
    OrderPolicy,
)

REGISTRY_BUNDLE_KINDS = {
    ManifestKind.COMPONENT.value: AssetKind.COMPONENT,
    ManifestKind.BLOCK.value: AssetKind.BLOCK,
}


def build_registry_bundle(manifest: Mapping[str, Any], author: str | None = None) -> BuildResult:
    """
    block/component bundle 생성.

    Args:
        manifest: 생성된 manifest (files[]에 path, type, content 포함)
        author: 작성자 (manifest 아이템 메타데이터)

    Returns:
        BuildResult (첫 아이템이 manifest)

    Raises:
        UnsupportedKindError: registry:component / registry:block 외의 type
        SchemaError: 파일 항목 형식 오류
    """
    registry_type = manifest.get("type")
    if registry_type not in REGISTRY_BUNDLE_KINDS:
        raise UnsupportedKindError(kind=registry_type, expected=list(REGISTRY_BUNDLE_KINDS))

    name = manifest.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field="name")

    files = manifest.get("files")
    if not isinstance(files, list):
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field="files")

    assets: list[BundleAsset] = []
    file_entries: list[JsonValue] = []
    for position, file in enumerate(files):
        if not isinstance(file, dict):
            raise SchemaError(ErrorCodes.SCHEMA_FIELD_TYPE, field=f"files[{position}]")
        path = file.get("path")
        content = file.get("content")
        if not isinstance(path, str) or not path:
            raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=f"files[{position}].path")
        # 빈 파일은 gateway에서 hydration 불가
        if not isinstance(content, str) or not content:
            raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field=f"files[{position}].content")

        file_type = str(file.get("type") or registry_type)
        assets.append(
            BundleAsset(
                kind=AssetKind.FILE,
                payload=content.encode("utf-8"),
                mime_type=CODE_FILE_MIME_TYPE,
                display_name=path,
                metadata={"registryType": file_type, "path": path},
            )
        )
        file_entries.append({"path": path, "type": file_type})

    template: JsonObject = {
        "name": name,
        "type": registry_type,
        "description": manifest.get("description", ""),
        "dependencies": list(manifest.get("dependencies") or []),
        "registryDependencies": list(manifest.get("registryDependencies") or []),
        "files": file_entries,
    }

    metadata = {"registryType": registry_type}
    if author:
        metadata["author"] = author

    return build(
        assets,
        template,
        {},
        OrderPolicy.MANIFEST_FIRST,
        primary_kind=REGISTRY_BUNDLE_KINDS[registry_type],
        primary_name=name,
        primary_metadata=metadata,
    )
