"""
test_locator.py - ContentLocator 파싱/검증 테스트

DoD:
- "<64-hex>_<N>" 형식만 허용
- txid 대문자 → 소문자 정규화
- origin 경로: URL prefix, .json 제거, txid만 주면 _0
"""

import pytest

from src.core.locator import (
    format_locator,
    is_locator,
    normalize_origin,
    parse_locator,
    validate_txid,
)
from src.domain.errors import ErrorCodes, InvalidLocatorError
from src.domain.schemas import ContentLocator


# =============================================================================
# validate_txid 테스트
# =============================================================================

class TestValidateTxid:
    """validate_txid 함수 테스트."""

    def test_valid_txid(self, txid: str):
        assert validate_txid(txid) == txid

    def test_uppercase_normalized(self):
        """대문자 hex → 소문자."""
        assert validate_txid("AB" * 32) == "ab" * 32

    @pytest.mark.parametrize("value", ["", "abc", "g" * 64, "a" * 63, "a" * 65])
    def test_invalid_txid(self, value: str):
        with pytest.raises(InvalidLocatorError) as exc_info:
            validate_txid(value)

        assert exc_info.value.code == ErrorCodes.INVALID_TXID


# =============================================================================
# parse_locator / is_locator 테스트
# =============================================================================

class TestParseLocator:
    """parse_locator 함수 테스트."""

    def test_parses_txid_and_index(self, txid: str):
        locator = parse_locator(f"{txid}_3")

        assert locator == ContentLocator(txid=txid, index=3)
        assert str(locator) == f"{txid}_3"

    def test_negative_index_rejected(self, txid: str):
        with pytest.raises(InvalidLocatorError):
            parse_locator(f"{txid}_-1")

    def test_missing_index_rejected(self, txid: str):
        with pytest.raises(InvalidLocatorError):
            parse_locator(txid)

    def test_is_locator(self, txid: str):
        assert is_locator(f"{txid}_0") is True
        assert is_locator("components/button.tsx") is False
        assert is_locator(f"prefix {txid}_0") is False
        assert is_locator(42) is False

    def test_sibling(self, txid: str):
        locator = ContentLocator(txid=txid, index=0)

        assert locator.sibling(2) == ContentLocator(txid=txid, index=2)


# =============================================================================
# normalize_origin 테스트
# =============================================================================

class TestNormalizeOrigin:
    """요청 경로 origin 정규화 테스트."""

    def test_plain_locator(self, txid: str):
        assert normalize_origin(f"{txid}_1") == ContentLocator(txid=txid, index=1)

    def test_json_suffix_removed(self, txid: str):
        assert normalize_origin(f"{txid}_2.json") == ContentLocator(txid=txid, index=2)

    def test_bare_txid_defaults_to_zero(self, txid: str):
        assert normalize_origin(txid) == ContentLocator(txid=txid, index=0)

    def test_content_url_prefix_removed(self, txid: str):
        origin = f"https://ordfs.network/content/{txid}_4"

        assert normalize_origin(origin) == ContentLocator(txid=txid, index=4)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidLocatorError):
            normalize_origin("not-a-locator")


class TestFormatLocator:
    """format_locator 함수 테스트."""

    def test_format(self, txid: str):
        assert format_locator(txid.upper(), 5) == f"{txid}_5"

    def test_negative_index(self, txid: str):
        with pytest.raises(InvalidLocatorError):
            format_locator(txid, -1)
