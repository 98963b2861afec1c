from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from acvpkit_cli import main as cli_main

from conftest import aft_case, make_group, make_prompt

ABC_MD = hashlib.sha256(b"abc").hexdigest()


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ACVPKIT_JOBS", "2")
    monkeypatch.delenv("ACVPKIT_HASH_PROVIDER", raising=False)


def _write(path: Path, doc) -> Path:
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_list_providers(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli_main.app, ["list-providers"])
    assert result.exit_code == 0
    assert "- cryptography:" in result.output
    assert "SHA2-256" in result.output


def test_run_writes_framed_response(tmp_path: Path, cli_runner: CliRunner) -> None:
    prompt = _write(tmp_path / "prompt.json", [{"acvVersion": "1.0"}, make_prompt([make_group(1, "AFT", [aft_case(1, b"abc")])])])
    out = tmp_path / "out" / "response.json"
    result = cli_runner.invoke(cli_main.app, ["run", str(prompt), "--out", str(out), "--provider", "hashlib"])
    assert result.exit_code == 0, result.output
    version, body = json.loads(out.read_text())
    assert version == {"acvVersion": "1.0"}
    assert body["vsId"] == 42
    assert body["testGroups"][0]["tests"] == [{"tcId": 1, "md": ABC_MD}]


def test_run_prints_to_stdout(tmp_path: Path, cli_runner: CliRunner) -> None:
    prompt = _write(tmp_path / "prompt.json", make_prompt([make_group(1, "AFT", [aft_case(1, b"abc")])]))
    result = cli_runner.invoke(cli_main.app, ["run", str(prompt)])
    assert result.exit_code == 0, result.output
    assert ABC_MD in result.output


def test_run_header_error_exits_2(tmp_path: Path, cli_runner: CliRunner) -> None:
    doc = make_prompt([])
    del doc["vsId"]
    prompt = _write(tmp_path / "prompt.json", doc)
    result = cli_runner.invoke(cli_main.app, ["run", str(prompt)])
    assert result.exit_code == 2


def test_validate_merges_expected_and_reports(tmp_path: Path, cli_runner: CliRunner) -> None:
    prompt = _write(tmp_path / "prompt.json", make_prompt([make_group(1, "AFT", [aft_case(1, b"abc"), aft_case(2, b"abd")])]))
    expected = _write(tmp_path / "expected.json", {
        "vsId": 42,
        "testGroups": [{"tgId": 1, "tests": [{"tcId": 1, "md": ABC_MD}, {"tcId": 2, "md": ABC_MD}]}],
    })
    junit = tmp_path / "results" / "vectors.junit.xml"
    report = tmp_path / "results" / "report.json"
    result = cli_runner.invoke(cli_main.app, [
        "validate", str(prompt), "--expected", str(expected), "--junit", str(junit), "--report", str(report),
    ])
    assert result.exit_code == 1
    assert "1/2 passed; 1 failed." in result.output
    assert "tcId=2 Mismatch" in result.output
    assert junit.exists()
    data = json.loads(report.read_text())
    assert data["failures"][0]["tcId"] == 2


def test_validate_passing_sample(tmp_path: Path, cli_runner: CliRunner) -> None:
    prompt = _write(tmp_path / "prompt.json", make_prompt(
        [make_group(1, "AFT", [aft_case(1, b"abc", md=bytes.fromhex(ABC_MD))])], is_sample=True,
    ))
    result = cli_runner.invoke(cli_main.app, ["validate", str(prompt), "--provider", "cryptography"])
    assert result.exit_code == 0, result.output
    assert "1/1 passed" in result.output


def test_invalid_jobs_exit_2(tmp_path: Path, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ACVPKIT_JOBS", "zero")
    prompt = _write(tmp_path / "prompt.json", make_prompt([]))
    result = cli_runner.invoke(cli_main.app, ["run", str(prompt)])
    assert result.exit_code == 2


@pytest.mark.parametrize("command", ["run", "validate"])
def test_malformed_json_exits_2(tmp_path: Path, cli_runner: CliRunner, command: str) -> None:
    prompt = tmp_path / "prompt.json"
    prompt.write_text("{not json", encoding="utf-8")
    result = cli_runner.invoke(cli_main.app, [command, str(prompt)])
    assert result.exit_code == 2
    assert "SchemaError" in result.output


def test_malformed_expected_results_exit_2(tmp_path: Path, cli_runner: CliRunner) -> None:
    prompt = _write(tmp_path / "prompt.json", make_prompt([make_group(1, "AFT", [aft_case(1, b"abc")])]))
    expected = tmp_path / "expected.json"
    expected.write_text('{"vsId": 42,', encoding="utf-8")
    result = cli_runner.invoke(cli_main.app, ["validate", str(prompt), "--expected", str(expected)])
    assert result.exit_code == 2
