"""
Core layer: 번들 프로토콜 핵심 모듈.

네트워크/프레임워크 의존 없음 → 순수 함수만

역할:
- locator 파싱, JSON 트리 visitor, placeholder resolve, 해시, 요청 로그
"""

from .documents import dump_document, iter_strings, map_strings, parse_document
from .hashing import compute_document_hash, compute_payload_hash, make_etag
from .ids import generate_bundle_id, generate_request_id
from .locator import format_locator, is_locator, normalize_origin, parse_locator, validate_txid
from .logging import complete_request_log, create_request_log, record_stage
from .resolver import has_references, referenced_indices, resolve, resolve_template, resolve_value

__all__ = [
    # locator
    "parse_locator",
    "format_locator",
    "is_locator",
    "normalize_origin",
    "validate_txid",
    # documents
    "map_strings",
    "iter_strings",
    "parse_document",
    "dump_document",
    # resolver
    "resolve",
    "resolve_value",
    "resolve_template",
    "referenced_indices",
    "has_references",
    # hashing
    "compute_document_hash",
    "compute_payload_hash",
    "make_etag",
    # ids
    "generate_request_id",
    "generate_bundle_id",
    # logging
    "create_request_log",
    "record_stage",
    "complete_request_log",
]
