from __future__ import annotations
from typing import Dict, List, Type

from cryptography.hazmat.primitives import hashes

from acvpkit import registry
from acvpkit.errors import ProviderError

# ACVP algorithm names -> cryptography hash classes
_ALGORITHMS: Dict[str, Type[hashes.HashAlgorithm]] = {
    "SHA-1": hashes.SHA1,
    "SHA2-224": hashes.SHA224,
    "SHA2-256": hashes.SHA256,
    "SHA2-384": hashes.SHA384,
    "SHA2-512": hashes.SHA512,
    "SHA2-512/224": hashes.SHA512_224,
    "SHA2-512/256": hashes.SHA512_256,
}


class _CryptographyHash:
    def __init__(self, name: str, algorithm: hashes.HashAlgorithm) -> None:
        self.name = name
        self.digest_size = algorithm.digest_size * 8
        self._ctx = hashes.Hash(algorithm)

    def update(self, data: bytes) -> None:
        self._ctx.update(data)

    def finalize(self) -> bytes:
        return self._ctx.finalize()


@registry.register("cryptography")
class CryptographySHA:
    """SHA-1/SHA-2 via ``cryptography.hazmat.primitives.hashes`` (OpenSSL).

    Byte-oriented only: OpenSSL exposes no way to absorb a partial byte.
    """
    name = "cryptography"
    bit_oriented = False

    def algorithms(self) -> List[str]:
        return sorted(_ALGORITHMS)

    def supports(self, algorithm: str) -> bool:
        return algorithm in _ALGORITHMS

    def new(self, algorithm: str) -> _CryptographyHash:
        try:
            cls = _ALGORITHMS[algorithm]
        except KeyError:
            raise ProviderError(f"{self.name} does not implement {algorithm!r}") from None
        return _CryptographyHash(algorithm, cls())
