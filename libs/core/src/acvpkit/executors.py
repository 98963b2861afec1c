from __future__ import annotations

"""Procedures behind each SHA-2 test type.

AFT hashes the message once. MCT runs the Monte Carlo chain from
draft-celi-acvp-sha (100 outer iterations of 1000 inner rounds). LDT
expands a short seed into a very large message and streams it through the
hash. Executors raise ``AcvpError`` subclasses; the dispatcher turns those
into per-case failures.
"""

from dataclasses import dataclass
from itertools import zip_longest
from typing import Iterator, List, Optional, Tuple

from .config import DEFAULT_LDT_CHUNK
from .errors import ExpansionError, Mismatch, SchemaError, UnsupportedLength
from .hashing import HashFunction
from .hexcodec import byte_length
from .sha2 import Aft, ExpansionTechnique, LargeMsg, Ldt, Mct, MctResult, MctVersion

# Protocol constants, not configurable.
MCT_OUTER_ITERATIONS = 100
MCT_INNER_ROUNDS = 1000


@dataclass(frozen=True)
class ExecutionContext:
    hash_fn: HashFunction
    mct_version: MctVersion
    sample: bool
    ldt_chunk: int = DEFAULT_LDT_CHUNK


@dataclass(frozen=True)
class CaseResponse:
    """Computed answer for one case: ``md`` for AFT/LDT, ``results_array`` for MCT."""
    tc_id: int
    md: Optional[bytes] = None
    results_array: Optional[Tuple[MctResult, ...]] = None


def _check_digest(expected: Optional[bytes], actual: bytes, record: str) -> None:
    if expected is None:
        raise SchemaError("expected digest required in sample mode", record, "md")
    if expected != actual:
        raise Mismatch(expected, actual)


# ---------------- AFT ----------------

def execute_aft(case: Aft, ctx: ExecutionContext) -> CaseResponse:
    digest = ctx.hash_fn(case.msg, case.len)
    if ctx.sample:
        _check_digest(case.md, digest, "Aft")
    return CaseResponse(tc_id=case.tc_id, md=digest)


# ---------------- MCT ----------------

def monte_carlo(hash_fn: HashFunction, seed: bytes, version: MctVersion) -> List[MctResult]:
    """Run the Monte Carlo chain from ``seed`` and return one result per outer iteration.

    Standard hashes ``A || B || C``. Alternate first fits that concatenation
    to the initial seed length: truncated when longer, zero-padded when shorter.
    """
    seed_len = len(seed)
    alternate = version is MctVersion.ALTERNATE
    results: List[MctResult] = []
    for _ in range(MCT_OUTER_ITERATIONS):
        a = b = c = seed
        for _ in range(MCT_INNER_ROUNDS):
            msg = a + b + c
            if alternate:
                msg = msg[:seed_len] if len(msg) >= seed_len else msg.ljust(seed_len, b"\x00")
            a, b, c = b, c, hash_fn(msg)
        seed = c
        results.append(MctResult(md=c, out_len=8 * len(c)))
    return results


def execute_mct(case: Mct, ctx: ExecutionContext) -> CaseResponse:
    if case.len % 8:
        raise UnsupportedLength(f"Monte Carlo seed of {case.len} bits is not byte aligned")
    produced = monte_carlo(ctx.hash_fn, case.msg[:case.len // 8], ctx.mct_version)
    if ctx.sample:
        if case.results_array is None:
            raise SchemaError("expected results required in sample mode", "Mct", "resultsArray")
        for index, (want, got) in enumerate(zip_longest(case.results_array, produced)):
            if want is None or got is None or want.md != got.md:
                raise Mismatch(
                    None if want is None else want.md,
                    None if got is None else got.md,
                    iteration=index,
                )
    return CaseResponse(tc_id=case.tc_id, results_array=tuple(produced))


# ---------------- LDT ----------------

def expand(large_msg: LargeMsg, chunk_size: int = DEFAULT_LDT_CHUNK) -> Iterator[bytes]:
    """Validate the length arithmetic and return a chunk iterator over the full message.

    The chunks concatenate to ``byte_length(full_length)`` bytes; a partial
    final byte is left for the hash to trim.
    """
    if large_msg.expansion_technique is not ExpansionTechnique.REPEATING:
        raise ExpansionError(f"unsupported expansion technique {large_msg.expansion_technique!r}")
    content = large_msg.content
    content_bits = large_msg.content_length
    full_bits = large_msg.full_length
    if (content or content_bits) and not (8 * (len(content) - 1) < content_bits <= 8 * len(content)):
        raise ExpansionError(
            f"contentLength {content_bits} does not describe a {len(content)}-byte content"
        )
    if full_bits == 0:
        return iter(())
    if not content_bits:
        raise ExpansionError(f"cannot expand empty content to {full_bits} bits")
    if content_bits % 8 and full_bits > content_bits:
        raise ExpansionError(
            f"contentLength {content_bits} is not byte aligned and cannot be repeated"
        )
    unit = content[:byte_length(content_bits)]
    return _repeat(unit, byte_length(full_bits), chunk_size)


def _repeat(unit: bytes, total: int, chunk_size: int) -> Iterator[bytes]:
    # Block length is a multiple of the unit so truncating the last block keeps the pattern.
    block = unit * max(1, chunk_size // len(unit))
    remaining = total
    while remaining > 0:
        piece = block if remaining >= len(block) else block[:remaining]
        yield piece
        remaining -= len(piece)


def expand_bytes(large_msg: LargeMsg) -> bytes:
    """Materialise the whole expanded message. Only sensible for small ``full_length``."""
    return b"".join(expand(large_msg))


def execute_ldt(case: Ldt, ctx: ExecutionContext) -> CaseResponse:
    chunks = expand(case.large_msg, ctx.ldt_chunk)
    digest = ctx.hash_fn.stream(chunks, case.large_msg.full_length)
    if ctx.sample:
        _check_digest(case.md, digest, "Ldt")
    return CaseResponse(tc_id=case.tc_id, md=digest)
