from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .executors import CaseResponse
from .hexcodec import b2h

"""Per-case outcomes and the run report built from them.

The report carries both the response document sent back to the server and
the pass/fail summary (counts, failure list, JUnit export).
"""

@dataclass
class CaseOutcome:
    tc_id: Optional[int]
    response: Optional[CaseResponse] = None
    error: Optional[Exception] = None

    @property
    def passed(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> str:
        if self.error is None:
            return "Pass"
        return getattr(self.error, "kind", type(self.error).__name__)

    def to_response(self) -> Optional[Dict[str, Any]]:
        if self.response is None:
            return None
        out: Dict[str, Any] = {"tcId": self.response.tc_id}
        if self.response.md is not None:
            out["md"] = b2h(self.response.md)
        if self.response.results_array is not None:
            out["resultsArray"] = [
                {"md": b2h(r.md), "outLen": r.out_len} for r in self.response.results_array
            ]
        return out


@dataclass
class GroupResult:
    tg_id: Optional[int]
    test_type: Optional[str]
    outcomes: List[CaseOutcome] = field(default_factory=list)


@dataclass
class Failure:
    vs_id: int
    tg_id: Optional[int]
    tc_id: Optional[int]
    kind: str
    detail: str
    iteration: Optional[int] = None


@dataclass
class RunReport:
    vs_id: int
    algorithm: str
    revision: str
    is_sample: bool
    groups: List[GroupResult] = field(default_factory=list)

    def outcomes(self) -> List[CaseOutcome]:
        return [o for g in self.groups for o in g.outcomes]

    @property
    def total(self) -> int:
        return len(self.outcomes())

    @property
    def passed(self) -> int:
        return sum(1 for o in self.outcomes() if o.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    def failures(self) -> List[Failure]:
        out: List[Failure] = []
        for g in self.groups:
            for o in g.outcomes:
                if o.error is None:
                    continue
                out.append(Failure(
                    vs_id=self.vs_id, tg_id=g.tg_id, tc_id=o.tc_id, kind=o.kind,
                    detail=str(o.error), iteration=getattr(o.error, "iteration", None),
                ))
        return out

    def response_document(self) -> Dict[str, Any]:
        """Response body in prompt order; failed cases without a computed answer are omitted."""
        groups = []
        for g in self.groups:
            tests = [r for r in (o.to_response() for o in g.outcomes) if r is not None]
            entry: Dict[str, Any] = {"tgId": g.tg_id, "tests": tests}
            if g.test_type is not None:
                entry["testType"] = g.test_type
            groups.append(entry)
        return {
            "vsId": self.vs_id,
            "algorithm": self.algorithm,
            "revision": self.revision,
            "isSample": self.is_sample,
            "testGroups": groups,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vsId": self.vs_id,
            "algorithm": self.algorithm,
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "failures": [
                {
                    "vsId": f.vs_id, "tgId": f.tg_id, "tcId": f.tc_id,
                    "kind": f.kind, "detail": f.detail, "iteration": f.iteration,
                }
                for f in self.failures()
            ],
        }

    def summary_lines(self) -> List[str]:
        lines = [f"[RESULT] vsId={self.vs_id} {self.algorithm}: {self.passed}/{self.total} passed; {self.failed} failed."]
        for f in self.failures():
            lines.append(f"  - FAIL tgId={f.tg_id} tcId={f.tc_id} {f.kind} :: {f.detail}")
        return lines

    def write_junit(self, out_path: Path) -> None:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as f:
            f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
            f.write(f'<testsuite name="{_xml(self.algorithm)}" tests="{self.total}" failures="{self.failed}">\n')
            for g in self.groups:
                for o in g.outcomes:
                    f.write(f'  <testcase classname="vs{self.vs_id}.tg{g.tg_id}" name="tc{o.tc_id}">')
                    if o.error is not None:
                        f.write(f'<failure type="{o.kind}" message="{_xml(str(o.error))}"/>')
                    f.write('</testcase>\n')
            f.write('</testsuite>\n')


def _xml(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")
