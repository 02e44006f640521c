"""Utility functions for address validation and numeric parsing"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from eth_utils import is_address, is_checksum_address, to_checksum_address
from loguru import logger

from .exceptions import InvalidAddressError

_HEX_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")


def validate_ethereum_address(address: str) -> Tuple[bool, Optional[str]]:
    """
    Validate Ethereum address format

    Returns:
        (is_valid, checksum_address or None)
    """
    if not address or not isinstance(address, str):
        return False, None

    address = address.strip()

    if not _HEX_ADDRESS.match(address):
        return False, None

    body = address[2:]
    # Mixed-case input must carry a valid EIP-55 checksum
    single_case = body == body.lower() or body == body.upper()
    if not (is_address(address) if single_case else is_checksum_address(address)):
        logger.debug(f"Address failed checksum validation: {address}")
        return False, None

    return True, to_checksum_address(address)


def require_address(address: str, label: str = "address") -> str:
    """Return the checksummed address or raise InvalidAddressError"""
    is_valid, checksum = validate_ethereum_address(address)
    if not is_valid:
        raise InvalidAddressError(f"Invalid {label}: {address!r}")
    return checksum


def parse_quantity(value: Any) -> int:
    """
    Parse a service-reported quantity (``0x``-prefixed hex or decimal string)

    ``None`` and empty strings are treated as zero.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Not a quantity: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return 0
    if text.lower().startswith("0x"):
        return int(text, 16) if len(text) > 2 else 0
    return int(text)


def parse_count(value: Any) -> Optional[int]:
    """
    Classify an NFT balance as a whole count

    Returns:
        The integer count, or None when the value is not a valid number
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    if text.lower().startswith("0x"):
        try:
            return int(text, 16)
        except ValueError:
            return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite() or number != number.to_integral_value():
        return None
    return int(number)


def parse_token_id(value: Any) -> int:
    """Token ids arrive as decimal strings (NFT API v3) or hex strings (older endpoints)"""
    return parse_quantity(value)


def shorten(address: Optional[str], size: int = 6) -> str:
    """0x1234…abcd style abbreviation for console output"""
    if not address:
        return "-"
    if len(address) <= size * 2 + 2:
        return address
    return f"{address[:size + 2]}…{address[-size:]}"
