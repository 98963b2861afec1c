from __future__ import annotations
import logging
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import HarnessConfig
from .errors import AcvpError
from .executors import CaseResponse, ExecutionContext, execute_aft, execute_ldt, execute_mct
from .hashing import resolve_hash
from .interfaces import HashProvider
from .registry import get_provider
from .report import CaseOutcome, GroupResult, RunReport
from .sha2 import InvalidCase, TestGroup, TestType, parse_sha2_vectors
from .vectors import InvalidGroup, Vectors, unwrap

log = logging.getLogger(__name__)

Executor = Callable[[Any, ExecutionContext], CaseResponse]

_EXECUTORS: Dict[TestType, Executor] = {
    TestType.AFT: execute_aft,
    TestType.MCT: execute_mct,
    TestType.LDT: execute_ldt,
}


def executor_for(test_type: TestType) -> Executor:
    """Map a group's test type to the procedure that runs its cases."""
    return _EXECUTORS[test_type]


def run_case(case: Any, ctx: ExecutionContext, execute: Executor) -> CaseOutcome:
    """Run one case; any error it raises stays inside the returned outcome."""
    if isinstance(case, InvalidCase):
        return CaseOutcome(tc_id=case.tc_id, error=case.error)
    try:
        return CaseOutcome(tc_id=case.tc_id, response=execute(case, ctx))
    except AcvpError as exc:
        log.warning("tcId=%s failed: %s: %s", case.tc_id, exc.kind, exc)
        return CaseOutcome(tc_id=case.tc_id, error=exc)
    except Exception as exc:
        log.exception("tcId=%s raised unexpectedly", case.tc_id)
        return CaseOutcome(tc_id=case.tc_id, error=exc)


def _failed_group(result: GroupResult, group: TestGroup, exc: Exception) -> GroupResult:
    cases = group.tests.cases or (None,)
    result.outcomes = [CaseOutcome(tc_id=getattr(c, "tc_id", None), error=exc) for c in cases]
    return result


def _collect(futures: List[Tuple[Optional[int], "Future[CaseOutcome]"]]) -> List[CaseOutcome]:
    outcomes = []
    for tc_id, fut in futures:
        try:
            outcomes.append(fut.result())
        except CancelledError:
            log.debug("tcId=%s cancelled; omitting its response", tc_id)
    return outcomes


def run_vectors(
    vectors: Vectors[TestGroup],
    provider: HashProvider,
    config: Optional[HarnessConfig] = None,
) -> RunReport:
    """Execute every group of a parsed prompt and collect a report.

    Cases from all groups share one thread pool; outcomes are gathered by
    position so the report mirrors the prompt's group and case order.
    """
    config = config or HarnessConfig()
    report = RunReport(
        vs_id=vectors.vs_id,
        algorithm=vectors.algorithm,
        revision=vectors.revision,
        is_sample=vectors.is_sample,
    )
    pending: List[Tuple[GroupResult, List[Tuple[Optional[int], "Future[CaseOutcome]"]]]] = []
    with ThreadPoolExecutor(max_workers=config.jobs) as pool:
        for group in vectors.test_groups:
            if isinstance(group, InvalidGroup):
                log.warning("tgId=%s rejected: %s", group.tg_id, group.error)
                result = GroupResult(group.tg_id, None, [CaseOutcome(tc_id=None, error=group.error)])
                pending.append((result, []))
                continue
            result = GroupResult(group.tg_id, group.tests.test_type.value)
            try:
                hash_fn = resolve_hash(provider, vectors.algorithm, group.digest_size)
            except AcvpError as exc:
                log.warning("tgId=%s cannot run: %s", group.tg_id, exc)
                pending.append((_failed_group(result, group, exc), []))
                continue
            except Exception as exc:
                log.exception("tgId=%s: provider setup raised unexpectedly", group.tg_id)
                pending.append((_failed_group(result, group, exc), []))
                continue
            ctx = ExecutionContext(
                hash_fn=hash_fn,
                mct_version=group.mct_version,
                sample=vectors.is_sample,
                ldt_chunk=config.ldt_chunk,
            )
            execute = executor_for(group.tests.test_type)
            log.debug("tgId=%s: %d %s case(s)", group.tg_id, len(group.tests.cases), group.tests.test_type.value)
            futures = [(c.tc_id, pool.submit(run_case, c, ctx, execute)) for c in group.tests.cases]
            pending.append((result, futures))
        for result, futures in pending:
            result.outcomes.extend(_collect(futures))
            report.groups.append(result)
    return report


def run_prompt(doc: Any, config: Optional[HarnessConfig] = None) -> Tuple[Optional[str], RunReport]:
    """Parse a (possibly framed) prompt and run it with the configured provider.

    Header errors raise ``SchemaError``; group and case errors are reported.
    Returns the ``acvVersion`` of the envelope (if any) alongside the report.
    """
    config = config or HarnessConfig.from_env()
    acv_version, body = unwrap(doc)
    vectors = parse_sha2_vectors(body, lenient=True)
    provider = get_provider(config.provider)
    return acv_version, run_vectors(vectors, provider, config)
