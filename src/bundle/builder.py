"""
Bundle Builder: asset + primary template → 순서가 확정된 BundleItem 목록.

규칙:
- asset은 입력 순서대로 index 할당 (결정론적)
- MANIFEST_LAST: asset 0..k-1, primary k
- MANIFEST_FIRST: primary 0, asset 1..k (files에 {path, index} 기록)
- slot_map 값은 output index → 해당 필드에 "{{vout:N}}" 기록
- 범위 밖/음수/자기 참조는 아이템을 하나도 만들기 전에 DanglingReferenceError
- placeholder를 기록할 위치가 없는 slot은 SchemaError (참조 없는 output 금지)
"""

import logging
from collections.abc import Mapping, Sequence

from src.core.documents import FieldPath, clone, dump_document, set_path
from src.core.resolver import referenced_indices
from src.domain.constants import (
    INSCRIPTION_OVERHEAD_BYTES,
    JSON_MIME_TYPE,
    SATS_PER_OUTPUT,
    placeholder,
)
from src.domain.errors import DanglingReferenceError, ErrorCodes, SchemaError
from src.domain.schemas import (
    AssetKind,
    BuildResult,
    BundleAsset,
    BundleItem,
    JsonObject,
    JsonValue,
    OrderPolicy,
)

logger = logging.getLogger(__name__)


def build(
    assets: Sequence[BundleAsset],
    primary_template: JsonObject,
    slot_map: Mapping[str, int],
    order_policy: OrderPolicy,
    *,
    placements: Mapping[str, Sequence[FieldPath]] | None = None,
    primary_kind: AssetKind = AssetKind.FILE,
    primary_name: str = "",
    primary_metadata: Mapping[str, str] | None = None,
) -> BuildResult:
    """
    번들 생성.

    Args:
        assets: sibling asset 목록 (순서 = index 할당 순서)
        primary_template: primary 문서 template (수정하지 않음)
        slot_map: slot 이름 → 참조할 output index
        order_policy: primary 문서 위치
        placements: slot → placeholder를 기록할 필드 경로 목록
            (없으면 최상위 필드 (slot,))
        primary_kind: primary 아이템 kind
        primary_name: primary 아이템 표시 이름
        primary_metadata: primary 아이템 MAP 메타데이터

    Returns:
        BuildResult (items 길이 = len(assets) + 1)

    Raises:
        DanglingReferenceError: 참조 index가 번들 범위 밖이거나 자기 자신일 때
        SchemaError: slot의 placement 목록이 비어 있을 때
    """
    item_count = len(assets) + 1
    primary_index = 0 if order_policy is OrderPolicy.MANIFEST_FIRST else len(assets)
    placements = placements or {}

    # 1. 검증 (아이템 생성 전)
    for slot, index in slot_map.items():
        _check_reference(index, item_count, primary_index, slot=slot)
        if not placements.get(slot, [(slot,)]):
            raise SchemaError(ErrorCodes.UNPLACED_SLOT, slot=slot, index=index)
    for index in referenced_indices(primary_template):
        _check_reference(index, item_count, primary_index, slot=None)

    # 2. primary 문서 완성
    document = clone(primary_template)
    for slot, index in slot_map.items():
        for path in placements.get(slot, [(slot,)]):
            set_path(document, path, placeholder(index))

    if order_policy is OrderPolicy.MANIFEST_FIRST:
        document["files"] = _file_entries(document.get("files"), assets)

    # 3. 아이템 배치
    primary = BundleItem(
        kind=primary_kind,
        payload=dump_document(document),
        mime_type=JSON_MIME_TYPE,
        display_name=primary_name,
        metadata=dict(primary_metadata or {}),
    )
    siblings = [BundleItem.from_asset(asset) for asset in assets]

    if order_policy is OrderPolicy.MANIFEST_FIRST:
        items = [primary, *siblings]
    else:
        items = [*siblings, primary]

    logger.debug(
        f"Built {order_policy.value} bundle: {len(items)} items, primary at {primary_index}"
    )

    return BuildResult(
        items=items,
        document=document,
        order_policy=order_policy,
        slot_indices=dict(slot_map),
    )


def _check_reference(index: int, item_count: int, primary_index: int, slot: str | None) -> None:
    """참조 index 검증."""
    if index == primary_index:
        raise DanglingReferenceError(
            ErrorCodes.SELF_REFERENCE,
            slot=slot,
            index=index,
            item_count=item_count,
        )
    if index < 0 or index >= item_count:
        raise DanglingReferenceError(
            slot=slot,
            index=index,
            item_count=item_count,
        )


def _file_entries(existing: JsonValue, assets: Sequence[BundleAsset]) -> list[JsonValue]:
    """
    manifest-first files 목록: 각 파일의 {path, ..., index}.

    template에 같은 위치의 항목이 있으면 다른 키(type 등)는 유지.
    """
    template_entries = existing if isinstance(existing, list) else []
    entries: list[JsonValue] = []
    for position, asset in enumerate(assets):
        base = template_entries[position] if position < len(template_entries) else None
        entry: dict[str, JsonValue] = dict(base) if isinstance(base, dict) else {}
        entry.setdefault("path", asset.display_name)
        entry.pop("content", None)
        entry["index"] = 1 + position
        entries.append(entry)
    return entries


# =============================================================================
# Size / Cost Estimation
# =============================================================================

def estimate_bundle_size(
    items: Sequence[BundleItem],
    overhead: int = INSCRIPTION_OVERHEAD_BYTES,
) -> int:
    """
    번들 트랜잭션 크기 추정 (bytes).

    아이템마다 payload 크기 + envelope/MAP 메타데이터 overhead.
    """
    return sum(len(item.payload) + overhead for item in items)


def estimate_bundle_cost(item_count: int) -> int:
    """inscription 비용 (sat): output 하나당 SATS_PER_OUTPUT."""
    return item_count * SATS_PER_OUTPUT
