"""
해시 계산: document_hash, payload_hash

- 정렬된 키로 직렬화 (키 순서와 무관하게 동일 해시)
- SHA-256
- ETag / 번들 digest 용도
"""

import hashlib
import json
from typing import Any


def compute_document_hash(document: dict[str, Any]) -> str:
    """
    JSON 문서 해시 (번역 결과 ETag용).

    Args:
        document: JSON object

    Returns:
        SHA-256 hex 문자열
    """
    serialized = json.dumps(document, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(serialized.encode()).hexdigest()


def compute_payload_hash(payload: bytes) -> str:
    """inscription payload 해시."""
    return hashlib.sha256(payload).hexdigest()


def make_etag(document: dict[str, Any]) -> str:
    """강한 ETag (따옴표 포함)."""
    return f'"{compute_document_hash(document)[:32]}"'
