"""SHA-2 test groups and cases.

See draft-celi-acvp-sha for the wire format. Every record here is a frozen
value; parsing either returns a fully-typed record or raises ``SchemaError``
naming the offending record and field.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import SchemaError
from .hexcodec import byte_length
from .vectors import Field, Vectors, dump_vectors, parse_vectors, peek_id, read_fields, require_list, write_fields


class MctVersion(str, Enum):
    """Monte Carlo procedure variant (wire literal is lowercase)."""
    STANDARD = "standard"
    ALTERNATE = "alternate"


class ExpansionTechnique(str, Enum):
    """How a large-data seed is expanded into the full message."""
    REPEATING = "repeating"


class TestType(str, Enum):
    AFT = "AFT"
    MCT = "MCT"
    LDT = "LDT"

    __test__ = False  # keep pytest from collecting this as a test class


@dataclass(frozen=True)
class Aft:
    tc_id: int
    msg: bytes
    len: int  # bits of msg
    md: Optional[bytes] = None


@dataclass(frozen=True)
class MctResult:
    md: bytes
    out_len: int


@dataclass(frozen=True)
class Mct:
    tc_id: int
    msg: bytes  # seed
    len: int
    results_array: Optional[Tuple[MctResult, ...]] = None


@dataclass(frozen=True)
class LargeMsg:
    content: bytes
    content_length: int
    full_length: int
    expansion_technique: ExpansionTechnique


@dataclass(frozen=True)
class Ldt:
    tc_id: int
    len: int  # always zero; the real length lives in large_msg
    large_msg: LargeMsg
    md: Optional[bytes] = None


@dataclass(frozen=True)
class InvalidCase:
    """Placeholder for a case that could not be parsed (lenient mode)."""
    tc_id: Optional[int]
    error: SchemaError


Case = Union[Aft, Mct, Ldt]


@dataclass(frozen=True)
class Tests:
    """Tagged union of case lists: one test type per group."""
    test_type: TestType
    cases: Tuple[Any, ...]

    __test__ = False


@dataclass(frozen=True)
class TestGroup:
    tg_id: int
    function: str
    digest_size: str
    mct_version: MctVersion
    tests: Tests

    __test__ = False


# ---------------- wire field tables ----------------

_GROUP_FIELDS = (
    Field("tg_id", "tgId", "int"),
    Field("function", "function", "str"),
    Field("digest_size", "digestSize", "str"),
)
_AFT_FIELDS = (
    Field("tc_id", "tcId", "int"),
    Field("msg", "msg", "hex"),
    Field("len", "len", "int"),
    Field("md", "md", "hex", required=False),
)
_MCT_FIELDS = (
    Field("tc_id", "tcId", "int"),
    Field("msg", "msg", "hex"),
    Field("len", "len", "int"),
)
_MCT_RESULT_FIELDS = (
    Field("md", "md", "hex"),
    Field("out_len", "outLen", "int"),
)
_LDT_FIELDS = (
    Field("tc_id", "tcId", "int"),
    Field("len", "len", "int"),
    Field("md", "md", "hex", required=False),
)
_LARGE_MSG_FIELDS = (
    Field("content", "content", "hex"),
    Field("content_length", "contentLength", "int"),
    Field("full_length", "fullLength", "int"),
)


def _enum(enum_cls: Any, value: Any, record: str, key: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise SchemaError(f"unknown tag {value!r} (expected one of {allowed})", record, key) from None


def _check_msg_len(msg: bytes, bit_len: int, record: str) -> None:
    if byte_length(bit_len) > len(msg):
        raise SchemaError(f"{bit_len} bits declared but msg holds {len(msg)} bytes", record, "len")


def parse_aft(obj: Any) -> Aft:
    case = Aft(**read_fields(obj, "Aft", _AFT_FIELDS))
    _check_msg_len(case.msg, case.len, "Aft")
    return case


def parse_mct_result(obj: Any) -> MctResult:
    return MctResult(**read_fields(obj, "MctResult", _MCT_RESULT_FIELDS))


def parse_mct(obj: Any) -> Mct:
    kwargs = read_fields(obj, "Mct", _MCT_FIELDS)
    raw_results = obj.get("resultsArray")
    if raw_results is not None:
        if not isinstance(raw_results, list):
            raise SchemaError("expected array", "Mct", "resultsArray")
        kwargs["results_array"] = tuple(parse_mct_result(r) for r in raw_results)
    case = Mct(**kwargs)
    _check_msg_len(case.msg, case.len, "Mct")
    return case


def parse_large_msg(obj: Any) -> LargeMsg:
    kwargs = read_fields(obj, "LargeMsg", _LARGE_MSG_FIELDS)
    if "expansionTechnique" not in obj:
        raise SchemaError("missing required field", "LargeMsg", "expansionTechnique")
    kwargs["expansion_technique"] = _enum(
        ExpansionTechnique, obj["expansionTechnique"], "LargeMsg", "expansionTechnique"
    )
    return LargeMsg(**kwargs)


def parse_ldt(obj: Any) -> Ldt:
    kwargs = read_fields(obj, "Ldt", _LDT_FIELDS)
    if "largeMsg" not in obj:
        raise SchemaError("missing required field", "Ldt", "largeMsg")
    kwargs["large_msg"] = parse_large_msg(obj["largeMsg"])
    return Ldt(**kwargs)


_CASE_PARSERS = {
    TestType.AFT: parse_aft,
    TestType.MCT: parse_mct,
    TestType.LDT: parse_ldt,
}


def parse_group(obj: Any, lenient: bool = False) -> TestGroup:
    kwargs = read_fields(obj, "TestGroup", _GROUP_FIELDS)
    if "mctVersion" not in obj:
        raise SchemaError("missing required field", "TestGroup", "mctVersion")
    kwargs["mct_version"] = _enum(MctVersion, obj["mctVersion"], "TestGroup", "mctVersion")
    if "testType" not in obj:
        raise SchemaError("missing required field", "TestGroup", "testType")
    test_type = _enum(TestType, obj["testType"], "TestGroup", "testType")
    parse_case = _CASE_PARSERS[test_type]
    cases: List[Any] = []
    for raw in require_list(obj, "tests", "TestGroup"):
        try:
            cases.append(parse_case(raw))
        except SchemaError as exc:
            if not lenient:
                raise
            cases.append(InvalidCase(tc_id=peek_id(raw, "tcId"), error=exc))
    return TestGroup(tests=Tests(test_type, tuple(cases)), **kwargs)


def parse_sha2_vectors(doc: Any, lenient: bool = False) -> Vectors[TestGroup]:
    return parse_vectors(doc, parse_group, lenient)


# ---------------- serialization ----------------

def dump_aft(case: Aft) -> Dict[str, Any]:
    return write_fields(case, _AFT_FIELDS)


def dump_mct(case: Mct) -> Dict[str, Any]:
    out = write_fields(case, _MCT_FIELDS)
    if case.results_array is not None:
        out["resultsArray"] = [write_fields(r, _MCT_RESULT_FIELDS) for r in case.results_array]
    return out


def dump_ldt(case: Ldt) -> Dict[str, Any]:
    out = write_fields(case, _LDT_FIELDS)
    large = write_fields(case.large_msg, _LARGE_MSG_FIELDS)
    large["expansionTechnique"] = case.large_msg.expansion_technique.value
    out["largeMsg"] = large
    return out


_CASE_DUMPERS = {
    TestType.AFT: dump_aft,
    TestType.MCT: dump_mct,
    TestType.LDT: dump_ldt,
}


def dump_group(group: TestGroup) -> Dict[str, Any]:
    out = write_fields(group, _GROUP_FIELDS)
    out["mctVersion"] = group.mct_version.value
    out["testType"] = group.tests.test_type.value
    dump_case = _CASE_DUMPERS[group.tests.test_type]
    tests = []
    for case in group.tests.cases:
        if isinstance(case, InvalidCase):
            raise SchemaError(f"cannot serialize unparsed case {case.tc_id}", "TestGroup", "tests")
        tests.append(dump_case(case))
    out["tests"] = tests
    return out


def dump_sha2_vectors(vectors: Vectors[TestGroup]) -> Dict[str, Any]:
    return dump_vectors(vectors, dump_group)
