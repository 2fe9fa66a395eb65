"""
test_ids.py - ID 생성 테스트

DoD:
- request_id: REQ-{timestamp}-{uuid8}, 매번 다름
- bundle_id: 동일 items → 동일 ID, 순서가 바뀌면 다른 ID
"""

import re

from src.core.ids import _sanitize_for_id, generate_bundle_id, generate_request_id
from src.domain.schemas import AssetKind, BundleItem


def _item(payload: bytes, name: str = "item") -> BundleItem:
    return BundleItem(
        kind=AssetKind.FILE,
        payload=payload,
        mime_type="text/plain",
        display_name=name,
    )


class TestGenerateRequestId:
    """generate_request_id 함수 테스트."""

    def test_format(self):
        assert re.match(r"^REQ-\d{14}-[0-9a-f]{8}$", generate_request_id())

    def test_unique(self):
        ids = {generate_request_id() for _ in range(50)}

        assert len(ids) == 50


class TestGenerateBundleId:
    """generate_bundle_id 함수 테스트."""

    def test_deterministic(self):
        items = [_item(b"a"), _item(b"b", "Midnight Neon")]

        assert generate_bundle_id(items, "t") == generate_bundle_id(list(items), "t")

    def test_order_matters(self):
        a, b = _item(b"a"), _item(b"b")

        assert generate_bundle_id([a, b], "t") != generate_bundle_id([b, a], "t")

    def test_uses_primary_name(self):
        bundle_id = generate_bundle_id([_item(b"a"), _item(b"b", "b.ts")], "Midnight Neon")

        assert bundle_id.startswith("BUNDLE-Midnight_Neon-")

    def test_empty(self):
        assert generate_bundle_id([], "t").startswith("BUNDLE-EMPTY-")


class TestSanitizeForId:
    """_sanitize_for_id 함수 테스트."""

    def test_spaces_and_symbols(self):
        assert _sanitize_for_id("glow - button!") == "glow_button"

    def test_non_ascii_removed(self):
        assert _sanitize_for_id("테마") == "UNNAMED"

    def test_truncated(self):
        assert len(_sanitize_for_id("x" * 40)) == 20
