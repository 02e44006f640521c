"""Tests for validation and numeric parsing helpers"""

import pytest

from wallet_scout.exceptions import InvalidAddressError
from wallet_scout.utils import (
    parse_count,
    parse_quantity,
    parse_token_id,
    require_address,
    shorten,
    validate_ethereum_address,
)

VITALIK = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


class TestAddressValidation:
    def test_lowercase_address_is_checksummed(self):
        assert validate_ethereum_address(VITALIK.lower()) == (True, VITALIK)

    def test_valid_checksum(self):
        assert validate_ethereum_address(f"  {VITALIK} ") == (True, VITALIK)

    @pytest.mark.parametrize("address", ["", None, "0x123", "d8da6bf26964af9d7eed9e03e53415d37aa96045", "0x" + "g" * 40])
    def test_invalid_format(self, address):
        assert validate_ethereum_address(address) == (False, None)

    def test_bad_checksum(self):
        flipped = "0xd8DA6BF26964aF9D7eEd9e03E53415D37aA96045"
        assert validate_ethereum_address(flipped) == (False, None)

    def test_single_case_address_needs_no_checksum(self):
        upper = "0x" + VITALIK[2:].upper()
        assert validate_ethereum_address(upper) == (True, VITALIK)

    def test_require_address_raises(self):
        with pytest.raises(InvalidAddressError):
            require_address("nope", "wallet")


class TestParseQuantity:
    @pytest.mark.parametrize("value,expected", [
        ("0x0", 0),
        ("0x", 0),
        ("0xde0b6b3a7640000", 10**18),
        ("42", 42),
        (7, 7),
        (None, 0),
        ("", 0),
    ])
    def test_parses(self, value, expected):
        assert parse_quantity(value) == expected

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_quantity("1.5e")

    def test_token_id(self):
        assert parse_token_id("0x0a") == 10
        assert parse_token_id("1234") == 1234


class TestParseCount:
    @pytest.mark.parametrize("value,expected", [
        ("1", 1),
        (" 12 ", 12),
        (3, 3),
        (2.0, 2),
        ("0x10", 16),
        ("5.0", 5),
        ("1e3", 1000),
    ])
    def test_valid_counts(self, value, expected):
        assert parse_count(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "1.5", 2.5, "NaN", "Infinity", True, "0xzz"])
    def test_unparseable(self, value):
        assert parse_count(value) is None


def test_shorten():
    assert shorten(VITALIK) == "0xd8dA6B…A96045"
    assert shorten(None) == "-"
    assert shorten("0x12") == "0x12"
