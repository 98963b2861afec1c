from __future__ import annotations
import json
from pathlib import Path
from typing import Optional

import typer

from acvpkit import AcvpError, HarnessConfig, load_adapters, registry
from .runners.common import configure_logging, execute_prompt_file, export_json, response_envelope

app = typer.Typer(add_completion=False, help="ACVP SHA-2 test-vector harness")


def _config(provider: Optional[str], jobs: Optional[int], verbose: bool) -> HarnessConfig:
    try:
        config = HarnessConfig.from_env().override(provider=provider, jobs=jobs)
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2)
    configure_logging("DEBUG" if verbose else config.log_level)
    return config


@app.command("list-providers")
def list_providers():
    """List registered hash providers and the algorithms each one supports."""
    load_adapters()
    for name, cls in registry.list().items():
        typer.echo(f"- {name}: {', '.join(cls().algorithms())}")


@app.command()
def run(
    prompt: Path = typer.Argument(..., exists=True, dir_okay=False, help="Prompt JSON from the server."),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the response JSON here (stdout otherwise)."),
    provider: Optional[str] = typer.Option(None, "--provider", help="Hash provider (env: ACVPKIT_HASH_PROVIDER)."),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Worker threads (env: ACVPKIT_JOBS)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Compute the response document for a prompt."""
    config = _config(provider, jobs, verbose)
    try:
        acv_version, report = execute_prompt_file(prompt, config)
    except AcvpError as exc:
        typer.echo(f"{exc.kind}: {exc}", err=True)
        raise typer.Exit(code=2)
    envelope = response_envelope(acv_version, report)
    if out is None:
        typer.echo(json.dumps(envelope, indent=2))
    else:
        export_json(envelope, out)
    if report.failed:
        for line in report.summary_lines():
            typer.echo(line, err=True)
        raise typer.Exit(code=1)


@app.command()
def validate(
    prompt: Path = typer.Argument(..., exists=True, dir_okay=False, help="Sample prompt (or prompt with --expected)."),
    expected: Optional[Path] = typer.Option(None, "--expected", exists=True, dir_okay=False,
                                            help="expectedResults.json to merge into the prompt."),
    junit: Optional[Path] = typer.Option(None, "--junit", help="Write a JUnit XML report."),
    report_path: Optional[Path] = typer.Option(None, "--report", help="Write a JSON failure report."),
    provider: Optional[str] = typer.Option(None, "--provider"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Check computed digests against the expected answers."""
    config = _config(provider, jobs, verbose)
    try:
        _, report = execute_prompt_file(prompt, config, expected)
    except AcvpError as exc:
        typer.echo(f"{exc.kind}: {exc}", err=True)
        raise typer.Exit(code=2)
    if not report.is_sample:
        typer.echo("Warning: prompt is not a sample; nothing is compared.", err=True)
    for line in report.summary_lines():
        typer.echo(line)
    if junit is not None:
        report.write_junit(junit)
        typer.echo(f"[✓] Wrote JUnit: {junit.resolve()}")
    if report_path is not None:
        export_json(report.to_dict(), report_path)
    if report.failed:
        raise typer.Exit(code=1)


def app_main():
    app()

if __name__ == "__main__":
    app_main()
