from __future__ import annotations

import hashlib
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
for candidate in (
    ROOT / "libs" / "core" / "src",
    ROOT / "libs" / "adapters" / "cryptography" / "src",
    ROOT / "libs" / "adapters" / "hashlib" / "src",
    ROOT / "apps" / "cli" / "src",
):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from acvpkit import registry  # noqa: E402


class _BitHash:
    def __init__(self) -> None:
        self.name = "SHA2-256"
        self.digest_size = 256
        self._ctx = hashlib.sha256()

    def update(self, data: bytes) -> None:
        self._ctx.update(data)

    def finalize(self) -> bytes:
        return self._ctx.digest()

    def finalize_bits(self, last_byte: int, nbits: int) -> bytes:
        # Not a real bit-level SHA-2; just a stable function of the partial byte.
        self._ctx.update(bytes([last_byte, nbits]))
        return self._ctx.digest()


class BitOrientedProvider:
    """SHA-256 stand-in that accepts partial trailing bytes."""
    name = "bit-sha256"
    bit_oriented = True

    def algorithms(self) -> List[str]:
        return ["SHA2-256"]

    def supports(self, algorithm: str) -> bool:
        return algorithm == "SHA2-256"

    def new(self, algorithm: str) -> _BitHash:
        return _BitHash()


@pytest.fixture
def bit_provider() -> BitOrientedProvider:
    return BitOrientedProvider()


@pytest.fixture
def crypto_provider():
    import acvpkit_cryptography  # noqa: F401
    return registry.get("cryptography")()


@pytest.fixture
def hashlib_provider():
    import acvpkit_hashlib  # noqa: F401
    return registry.get("hashlib")()


def aft_case(tc_id: int, msg: bytes, md: Optional[bytes] = None, bit_len: Optional[int] = None) -> Dict[str, Any]:
    case: Dict[str, Any] = {"tcId": tc_id, "msg": msg.hex(), "len": 8 * len(msg) if bit_len is None else bit_len}
    if md is not None:
        case["md"] = md.hex()
    return case


def make_group(tg_id: int, test_type: str, tests: List[Dict[str, Any]], **extra: Any) -> Dict[str, Any]:
    group = {
        "tgId": tg_id,
        "function": "SHA2",
        "digestSize": "256",
        "mctVersion": "standard",
        "testType": test_type,
        "tests": tests,
    }
    group.update(extra)
    return group


def make_prompt(groups: List[Dict[str, Any]], is_sample: bool = False, algorithm: str = "SHA2-256") -> Dict[str, Any]:
    return {
        "vsId": 42,
        "algorithm": algorithm,
        "revision": "1.0",
        "isSample": is_sample,
        "testGroups": groups,
    }
