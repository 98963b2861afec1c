from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Optional, Tuple

from acvpkit import HarnessConfig, RunReport, SchemaError, merge_expected, run_prompt, wrap

log = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SchemaError(f"{path.name}: {exc}", "Envelope") from exc


def export_json(data: Any, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    log.info("wrote %s", out_path)


def execute_prompt_file(
    prompt_path: Path,
    config: HarnessConfig,
    expected_path: Optional[Path] = None,
) -> Tuple[Optional[str], RunReport]:
    """Load a prompt (optionally merged with expected results) and run it."""
    doc = read_json(prompt_path)
    if expected_path is not None:
        doc = merge_expected(doc, read_json(expected_path))
    log.debug("running %s with provider=%s jobs=%d", prompt_path, config.provider, config.jobs)
    return run_prompt(doc, config)


def response_envelope(acv_version: Optional[str], report: RunReport) -> Any:
    return wrap(report.response_document(), acv_version)
