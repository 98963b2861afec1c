from __future__ import annotations
import hashlib
from typing import List

from acvpkit import registry
from acvpkit.errors import ProviderError

_NAMES = {
    "SHA-1": "sha1",
    "SHA2-224": "sha224",
    "SHA2-256": "sha256",
    "SHA2-384": "sha384",
    "SHA2-512": "sha512",
    "SHA2-512/224": "sha512_224",
    "SHA2-512/256": "sha512_256",
}


class _HashlibHash:
    def __init__(self, name: str, hashlib_name: str) -> None:
        self.name = name
        self._ctx = hashlib.new(hashlib_name)
        self.digest_size = self._ctx.digest_size * 8

    def update(self, data: bytes) -> None:
        self._ctx.update(data)

    def finalize(self) -> bytes:
        return self._ctx.digest()


@registry.register("hashlib")
class HashlibSHA:
    """Standard-library hashes. The truncated SHA-512 variants depend on the linked OpenSSL."""
    name = "hashlib"
    bit_oriented = False

    def algorithms(self) -> List[str]:
        return sorted(a for a in _NAMES if self.supports(a))

    def supports(self, algorithm: str) -> bool:
        return _NAMES.get(algorithm) in hashlib.algorithms_available

    def new(self, algorithm: str) -> _HashlibHash:
        if not self.supports(algorithm):
            raise ProviderError(f"{self.name} does not implement {algorithm!r}")
        return _HashlibHash(algorithm, _NAMES[algorithm])
