from __future__ import annotations
import binascii
import re
from typing import Optional

from .errors import SchemaError

# Servers emit uppercase hex; we read either case and always write lowercase.
HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def h2b(text: object, record: Optional[str] = None, field: Optional[str] = None) -> bytes:
    """Decode a hex wire field. Odd lengths and stray characters are errors."""
    if not isinstance(text, str):
        raise SchemaError(f"expected hex string, got {type(text).__name__}", record, field)
    if len(text) % 2:
        raise SchemaError(f"odd-length hex string ({len(text)} chars)", record, field)
    if not HEX_RE.match(text):
        raise SchemaError(f"not hex: {text[:32]}...", record, field)
    return binascii.unhexlify(text)


def b2h(data: bytes) -> str:
    return data.hex()


def byte_length(bit_len: int) -> int:
    """Number of bytes needed to hold ``bit_len`` bits."""
    return (bit_len + 7) // 8
