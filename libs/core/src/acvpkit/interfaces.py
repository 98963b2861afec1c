from __future__ import annotations
from typing import List, Protocol

"""Hash provider interfaces used by adapters.

Adapters implement these Protocols and register themselves into the global
registry. Executors interact only with these interfaces, never with vendor
libraries directly.
"""

class HashCapability(Protocol):
    """One incremental hash computation."""
    name: str
    digest_size: int  # bits
    def update(self, data: bytes) -> None: ...
    def finalize(self) -> bytes: ...

class BitHashCapability(HashCapability, Protocol):
    """Capability that can absorb a trailing partial byte."""
    def finalize_bits(self, last_byte: int, nbits: int) -> bytes: ...

class HashProvider(Protocol):
    """Factory of hash capabilities for a family of algorithm names."""
    name: str
    bit_oriented: bool
    def algorithms(self) -> List[str]: ...
    def supports(self, algorithm: str) -> bool: ...
    def new(self, algorithm: str) -> HashCapability: ...
