"""
Order Schema Models

Pydantic models produced by the order signing and oracle helpers.

    - OrderSignature: v/r/s ECDSA signature over an order digest.
    - OracleComparison: Local digest vs. the router's on-chain digest.
"""

from typing import Literal, Tuple

from eth_utils import big_endian_to_int, decode_hex, is_hex, remove_0x_prefix
from pydantic import Field

from ..schemas.bases import CanonicalModel


class OrderSignature(CanonicalModel):
    """
    EVM ECDSA signature (v, r, s) over an EIP-712 order digest.

    Attributes:
        v: ECDSA recovery ID (27 or 28).
        r: r component, 32 bytes as a 64-char hex string (0x prefix optional).
        s: s component, 32 bytes as a 64-char hex string (0x prefix optional).

    Example::

        sig = OrderSignature(v=27, r="0x" + "a" * 64, s="0x" + "b" * 64)
        sig.to_packed_hex()
    """

    v: int = Field(..., ge=27, le=28, description="ECDSA recovery ID (27 or 28)")
    r: str = Field(..., description="Signature r component (32 bytes, 64-char hex, 0x prefix optional)")
    s: str = Field(..., description="Signature s component (32 bytes, 64-char hex, 0x prefix optional)")

    def validate_format(self) -> bool:
        """
        Validate v/r/s components.

        Returns:
            True when all components pass.

        Raises:
            ValueError: Descriptive message on the first failed check.
        """
        if self.v not in (27, 28):
            raise ValueError(f"Invalid recovery ID: {self.v}. Must be 27 or 28")
        self._component_bytes("r")
        self._component_bytes("s")
        return True

    def _component_bytes(self, name: str) -> bytes:
        digits = remove_0x_prefix(getattr(self, name))
        if len(digits) != 64:
            raise ValueError(f"Invalid {name}: expected 64 hex chars, got {len(digits)}")
        if not is_hex(digits):
            raise ValueError(f"Invalid {name}: not valid hexadecimal")
        return decode_hex(digits)

    def to_vrs(self) -> Tuple[int, int, int]:
        """``(v, r, s)`` with r and s as integers, as ``Account.recover_message`` expects."""
        self.validate_format()
        return (
            self.v,
            big_endian_to_int(self._component_bytes("r")),
            big_endian_to_int(self._component_bytes("s")),
        )

    def to_packed_hex(self) -> str:
        """
        Encode v/r/s into a packed 65-byte hex string (``r || s || v``),
        the ``bytes`` signature format the router accepts.
        """
        self.validate_format()
        packed = self._component_bytes("r") + self._component_bytes("s") + bytes([self.v])
        return "0x" + packed.hex()


class OracleComparison(CanonicalModel):
    """
    Result of checking a locally computed order digest against the router.

    Attributes:
        function: Router view that produced ``onchain_hash``.
        local_hash: Digest computed by ``TypedDataHasher`` (0x-hex).
        onchain_hash: Digest returned by the router (0x-hex).
        matches: Whether the two digests are byte-identical.
    """

    function: Literal["getLimitOrderHash", "getMultiLimitOrderHash"]
    local_hash: str
    onchain_hash: str
    matches: bool
