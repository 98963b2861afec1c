from .config import HarnessConfig
from .errors import AcvpError, ExpansionError, Mismatch, ProviderError, SchemaError, UnsupportedLength
from .registry import registry, get_provider, load_adapters
from .vectors import Vectors, InvalidGroup, merge_expected, unwrap, wrap
from .sha2 import (
    Aft,
    ExpansionTechnique,
    InvalidCase,
    LargeMsg,
    Ldt,
    Mct,
    MctResult,
    MctVersion,
    TestGroup,
    TestType,
    Tests,
    dump_sha2_vectors,
    parse_sha2_vectors,
)
from .dispatch import run_prompt, run_vectors
from .report import RunReport

__all__ = [
    "HarnessConfig",
    "AcvpError",
    "ExpansionError",
    "Mismatch",
    "ProviderError",
    "SchemaError",
    "UnsupportedLength",
    "registry",
    "get_provider",
    "load_adapters",
    "Vectors",
    "InvalidGroup",
    "merge_expected",
    "unwrap",
    "wrap",
    "Aft",
    "ExpansionTechnique",
    "InvalidCase",
    "LargeMsg",
    "Ldt",
    "Mct",
    "MctResult",
    "MctVersion",
    "TestGroup",
    "TestType",
    "Tests",
    "dump_sha2_vectors",
    "parse_sha2_vectors",
    "run_prompt",
    "run_vectors",
    "RunReport",
]
