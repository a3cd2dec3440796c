"""
Value Parsing Helpers

Strict conversion of user-supplied values into the Python types the
encoder works with. Shared by the hasher and the domain model so a domain
member and a message field of the same type accept exactly the same input.

    parse_int      int, ASCII decimal string, or 0x-hex string (optionally negative)
    parse_bytes    bytes, or even-length 0x-hex string
    parse_address  20 raw bytes, or 0x-hex string with a valid EIP-55 checksum
                   when mixed case

Every rejection raises ``SchemaError`` with the path of the offending value.
"""

import re
from typing import Any, Optional, Sequence

from eth_utils import (
    is_checksum_address,
    is_hex,
    is_hex_address,
    remove_0x_prefix,
    to_bytes,
    to_canonical_address,
)

from .exceptions import SchemaError

_DECIMAL_RE = re.compile(r"-?[0-9]+")
_HEX_INT_RE = re.compile(r"-?0[xX][0-9a-fA-F]+")

Path = Optional[Sequence[str]]


def parse_int(value: Any, path: Path = None) -> int:
    if isinstance(value, bool):
        raise SchemaError("expected integer, got bool", path)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if _DECIMAL_RE.fullmatch(value):
            return int(value, 10)
        if _HEX_INT_RE.fullmatch(value):
            return int(value, 16)
        raise SchemaError(f"invalid integer string {value!r}", path)
    raise SchemaError(f"expected integer, got {type(value).__name__}", path)


def parse_bytes(value: Any, path: Path = None) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        if not value.startswith(("0x", "0X")) or not is_hex(value) or len(value) % 2:
            raise SchemaError(f"invalid hex bytes {value!r}", path)
        return to_bytes(hexstr=value)
    raise SchemaError(f"expected bytes or hex string, got {type(value).__name__}", path)


def is_address_string(value: Any) -> bool:
    """
    ``0x``-prefixed 40-digit hex address. All-lowercase and all-uppercase
    digits carry no checksum; mixed case must be a valid EIP-55 checksum.
    """
    if not isinstance(value, str) or not value.startswith("0x") or not is_hex_address(value):
        return False
    digits = remove_0x_prefix(value)
    if digits == digits.lower() or digits == digits.upper():
        return True
    return is_checksum_address(value)


def parse_address(value: Any, path: Path = None) -> bytes:
    """Canonical 20-byte form of an address."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise SchemaError(f"address must be 20 bytes, got {len(value)}", path)
        return bytes(value)
    if is_address_string(value):
        return to_canonical_address(value)
    raise SchemaError(f"invalid address {value!r}", path)
