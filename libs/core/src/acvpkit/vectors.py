from __future__ import annotations

"""Outer prompt record shared by every algorithm family.

A prompt is the combination of the vector-set header and a list of
algorithm-specific test groups. Wire keys are mapped field by field through
``Field`` tables rather than by automatic case conversion, so the JSON shape
stays exactly what the validation server expects.
"""

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .errors import SchemaError
from .hexcodec import b2h, h2b

G = TypeVar("G")

DEFAULT_ACV_VERSION = "1.0"


@dataclass(frozen=True)
class Field:
    attr: str
    key: str
    kind: str  # "int" | "str" | "bool" | "hex"
    required: bool = True


def _check_kind(value: Any, kind: str, record: str, key: str) -> Any:
    if kind == "hex":
        return h2b(value, record, key)
    if kind == "bool":
        ok = isinstance(value, bool)
    elif kind == "int":
        ok = isinstance(value, int) and not isinstance(value, bool) and value >= 0
    else:
        ok = isinstance(value, str)
    if not ok:
        raise SchemaError(f"expected {kind}, got {value!r}", record, key)
    return value


def read_fields(obj: Any, record: str, fields: Sequence[Field]) -> Dict[str, Any]:
    """Decode ``fields`` of a JSON object into keyword arguments. Unknown keys are ignored."""
    if not isinstance(obj, Mapping):
        raise SchemaError(f"expected object, got {type(obj).__name__}", record)
    out: Dict[str, Any] = {}
    for f in fields:
        if f.key not in obj or obj[f.key] is None:
            if f.required:
                raise SchemaError("missing required field", record, f.key)
            out[f.attr] = None
            continue
        out[f.attr] = _check_kind(obj[f.key], f.kind, record, f.key)
    return out


def write_fields(value: Any, fields: Sequence[Field]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields:
        v = getattr(value, f.attr)
        if v is None:
            continue
        out[f.key] = b2h(v) if f.kind == "hex" else v
    return out


def require_list(obj: Mapping[str, Any], key: str, record: str) -> List[Any]:
    if key not in obj:
        raise SchemaError("missing required field", record, key)
    value = obj[key]
    if not isinstance(value, list):
        raise SchemaError(f"expected array, got {type(value).__name__}", record, key)
    return value


def peek_id(obj: Any, key: str) -> Optional[int]:
    """Best-effort identifier lookup used to label records that failed to parse."""
    if isinstance(obj, Mapping):
        value = obj.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


@dataclass(frozen=True)
class InvalidGroup:
    """Placeholder for a test group that could not be parsed (lenient mode)."""
    tg_id: Optional[int]
    error: SchemaError


_VECTORS_FIELDS = (
    Field("vs_id", "vsId", "int"),
    Field("algorithm", "algorithm", "str"),
    Field("revision", "revision", "str"),
    Field("is_sample", "isSample", "bool"),
)


@dataclass(frozen=True)
class Vectors(Generic[G]):
    """A prompt sent from the validation server."""
    vs_id: int
    algorithm: str
    revision: str
    is_sample: bool
    test_groups: Tuple[G, ...]


def parse_vectors(
    doc: Any,
    parse_group: Callable[[Any, bool], G],
    lenient: bool = False,
) -> Vectors[G]:
    """Decode a prompt body.

    Header errors always raise. With ``lenient`` set, a group that fails to
    parse is kept as an ``InvalidGroup`` so its siblings still run.
    """
    header = read_fields(doc, "Vectors", _VECTORS_FIELDS)
    groups: List[Any] = []
    for raw in require_list(doc, "testGroups", "Vectors"):
        try:
            groups.append(parse_group(raw, lenient))
        except SchemaError as exc:
            if not lenient:
                raise
            groups.append(InvalidGroup(tg_id=peek_id(raw, "tgId"), error=exc))
    return Vectors(test_groups=tuple(groups), **header)


def dump_vectors(vectors: Vectors[G], dump_group: Callable[[G], Dict[str, Any]]) -> Dict[str, Any]:
    out = write_fields(vectors, _VECTORS_FIELDS)
    groups = []
    for group in vectors.test_groups:
        if isinstance(group, InvalidGroup):
            raise SchemaError(f"cannot serialize unparsed group {group.tg_id}", "Vectors", "testGroups")
        groups.append(dump_group(group))
    out["testGroups"] = groups
    return out


# ---------------- ACVP framing ----------------

def unwrap(doc: Any) -> Tuple[Optional[str], Dict[str, Any]]:
    """Split ``[{"acvVersion": ...}, {...}]`` framing from a prompt body.

    A bare object is returned unchanged with no version.
    """
    if isinstance(doc, Mapping):
        return None, dict(doc)
    if isinstance(doc, list) and len(doc) == 2 and isinstance(doc[0], Mapping) and isinstance(doc[1], Mapping):
        version = doc[0].get("acvVersion")
        if not isinstance(version, str):
            raise SchemaError("missing required field", "Envelope", "acvVersion")
        return version, dict(doc[1])
    raise SchemaError("expected an object or an [acvVersion, body] array", "Envelope")


def wrap(body: Dict[str, Any], acv_version: Optional[str]) -> Any:
    if acv_version is None:
        return body
    return [{"acvVersion": acv_version}, body]


def merge_expected(prompt: Mapping[str, Any], expected: Mapping[str, Any]) -> Dict[str, Any]:
    """Fold an ``expectedResults`` document into a prompt, yielding sample vectors.

    Groups are matched by ``tgId`` and cases by ``tcId``; answer fields
    (``md``, ``resultsArray``) are copied over. Cases without an answer are
    left untouched.
    """
    _, prompt_body = unwrap(prompt)
    _, expected_body = unwrap(expected)
    if prompt_body.get("vsId") != expected_body.get("vsId"):
        raise SchemaError(
            f"vsId {expected_body.get('vsId')!r} does not match prompt {prompt_body.get('vsId')!r}",
            "ExpectedResults",
            "vsId",
        )
    merged = copy.deepcopy(prompt_body)
    answers: Dict[Tuple[Any, Any], Mapping[str, Any]] = {}
    for group in require_list(expected_body, "testGroups", "ExpectedResults"):
        for case in group.get("tests", []) if isinstance(group, Mapping) else []:
            if isinstance(case, Mapping):
                answers[(group.get("tgId"), case.get("tcId"))] = case
    for group in merged.get("testGroups", []):
        if not isinstance(group, dict):
            continue
        for case in group.get("tests", []):
            if not isinstance(case, dict):
                continue
            answer = answers.get((group.get("tgId"), case.get("tcId")))
            if answer is None:
                continue
            for key in ("md", "resultsArray"):
                if key in answer:
                    case[key] = copy.deepcopy(answer[key])
    merged["isSample"] = True
    return merged
