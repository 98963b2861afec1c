from __future__ import annotations
from typing import Iterable, Optional, cast

from .errors import ProviderError, SchemaError, UnsupportedLength
from .hexcodec import byte_length
from .interfaces import BitHashCapability, HashProvider


class HashFunction:
    """A provider bound to one algorithm, hashing bit-length-tagged buffers.

    Instances are stateless between calls: every call opens a fresh
    capability, so one ``HashFunction`` can be shared by worker threads.
    """

    def __init__(self, provider: HashProvider, algorithm: str) -> None:
        if not provider.supports(algorithm):
            raise ProviderError(f"provider {provider.name!r} does not support {algorithm!r}")
        self.provider = provider
        self.algorithm = algorithm
        self.digest_size = provider.new(algorithm).digest_size

    def __call__(self, data: bytes, bit_len: Optional[int] = None) -> bytes:
        """Hash ``bit_len`` bits of ``data`` (all of it when omitted)."""
        if bit_len is None:
            bit_len = 8 * len(data)
        if byte_length(bit_len) > len(data):
            raise SchemaError(f"{bit_len} bits requested from a {len(data)}-byte buffer")
        return self.stream([data[:byte_length(bit_len)]], bit_len)

    def stream(self, chunks: Iterable[bytes], bit_len: int) -> bytes:
        """Hash the concatenation of ``chunks``, which must hold exactly ``byte_length(bit_len)`` bytes."""
        tail_bits = bit_len % 8
        if tail_bits and not getattr(self.provider, "bit_oriented", False):
            raise UnsupportedLength(
                f"{self.provider.name} cannot hash {bit_len}-bit {self.algorithm} messages (not byte aligned)"
            )
        ctx = self.provider.new(self.algorithm)
        pending = b""
        for chunk in chunks:
            if not chunk:
                continue
            if pending:
                ctx.update(pending)
            pending = chunk
        if not tail_bits:
            if pending:
                ctx.update(pending)
            return ctx.finalize()
        if not pending:
            raise SchemaError(f"no data for a {bit_len}-bit message")
        ctx.update(pending[:-1])
        return cast(BitHashCapability, ctx).finalize_bits(pending[-1], tail_bits)


def resolve_hash(provider: HashProvider, algorithm: str, digest_size: str) -> HashFunction:
    """Bind ``algorithm`` and check the group's declared ``digestSize`` against it."""
    fn = HashFunction(provider, algorithm)
    try:
        declared = int(digest_size)
    except (TypeError, ValueError):
        raise SchemaError(f"not a bit count: {digest_size!r}", "TestGroup", "digestSize") from None
    if declared != fn.digest_size:
        raise SchemaError(
            f"declares {declared} bits but {algorithm} produces {fn.digest_size}",
            "TestGroup",
            "digestSize",
        )
    return fn
