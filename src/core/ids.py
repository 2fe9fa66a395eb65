"""
ID 생성: request_id, bundle_id

- request_id: gateway 요청마다 새로 발급
- bundle_id: 동일 아이템 목록 → 동일 ID (결정론적)
"""

import hashlib
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from src.core.hashing import compute_payload_hash
from src.domain.schemas import BundleItem


def generate_request_id() -> str:
    """
    Request ID 생성.

    고유성 보장: UUID v4
    포맷: REQ-{timestamp}-{uuid[:8]}

    Returns:
        request_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"REQ-{timestamp}-{unique}"


def generate_bundle_id(items: Sequence[BundleItem], name: str) -> str:
    """
    Bundle ID 생성 (inscription 전 식별용).

    결정론적: 동일 items(순서 포함) → 동일 bundle_id
    포맷: BUNDLE-{name}-{hash[:12]}

    Args:
        items: 번들 아이템 목록
        name: primary 아이템 표시 이름 (theme/manifest 이름)

    Returns:
        bundle_id 문자열
    """
    h = hashlib.sha256()
    for item in items:
        h.update(item.kind.value.encode())
        h.update(b"\x00")
        h.update(item.mime_type.encode())
        h.update(b"\x00")
        h.update(compute_payload_hash(item.payload).encode())

    label = _sanitize_for_id(name) if items else "EMPTY"
    return f"BUNDLE-{label}-{h.hexdigest()[:12]}"


def _sanitize_for_id(value: str) -> str:
    """
    ID에 사용할 수 있도록 문자열 정리.

    - 공백/하이픈 → 밑줄
    - 특수문자/비ASCII 제거
    - 최대 20자
    """
    sanitized = ""
    for c in value:
        if c.isascii() and c.isalnum():
            sanitized += c
        elif c in " _-":
            sanitized += "_"

    while "__" in sanitized:
        sanitized = sanitized.replace("__", "_")

    sanitized = sanitized.strip("_")

    return sanitized[:20] if sanitized else "UNNAMED"
