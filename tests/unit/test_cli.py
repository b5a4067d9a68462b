"""Tests for CLI module."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from catalogdedupe.cli.main import EXIT_INPUT_ERROR, EXIT_INVARIANT_VIOLATION, cli
from catalogdedupe.engine import runner as engine_runner


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """JSONL catalog with one duplicate pair, a series pair and a bad row."""
    rows = [
        {"id": "g1", "title": "The Great Gatsby", "author": "F. Scott Fitzgerald"},
        {"id": "g2", "title": "Great Gatsby (Penguin)", "author": "Fitzgerald, F. Scott"},
        {"id": "m1", "title": "Mystery Series Book 1", "author": "Jane Doe"},
        {"id": "m2", "title": "Mystery Series Book 2", "author": "Jane Doe"},
        {"id": "x1", "title": ""},
    ]
    path = tmp_path / "catalog.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "catalogdedupe" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "detect" in result.output
    assert "normalize" in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# detect command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_detect_writes_report(runner: CliRunner, catalog_file: Path, tmp_path: Path) -> None:
    """Test detect writes the report and prints a summary line."""
    output = tmp_path / "report.json"

    result = runner.invoke(cli, ["detect", str(catalog_file), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "Found 1 duplicate clusters in 5 items" in result.output

    report = json.loads(output.read_text(encoding="utf-8"))
    assert [c["members"] for c in report["clusters"]] == [["g1", "g2"]]
    assert report["warnings"][0]["item_id"] == "x1"
    assert report["partial"] is False


@pytest.mark.unit
def test_detect_options_override_config(
    runner: CliRunner, catalog_file: Path, tmp_path: Path
) -> None:
    """Test command-line options win over the config file."""
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"bucketing_strategy": "phonetic", "review_threshold": 0.7}))
    output = tmp_path / "report.json"

    result = runner.invoke(
        cli,
        [
            "detect",
            str(catalog_file),
            "-o",
            str(output),
            "--config",
            str(config),
            "--strategy",
            "none",
            "--high-threshold",
            "0.95",
        ],
    )

    assert result.exit_code == 0, result.output
    effective = json.loads(output.read_text(encoding="utf-8"))["config"]
    assert effective["bucketing_strategy"] == "none"
    assert effective["review_threshold"] == 0.7
    assert effective["high_confidence_threshold"] == 0.95


@pytest.mark.unit
def test_detect_verbose_and_side_outputs(
    runner: CliRunner, catalog_file: Path, tmp_path: Path
) -> None:
    """Test verbose summary, clusters JSONL and audit log."""
    output = tmp_path / "report.json"
    clusters = tmp_path / "clusters.jsonl"
    log = tmp_path / "run.jsonl"

    result = runner.invoke(
        cli,
        [
            "detect",
            str(catalog_file),
            "-o",
            str(output),
            "--clusters-jsonl",
            str(clusters),
            "--log",
            str(log),
            "-v",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Items:" in result.output
    assert "skipped x1: missing_title" in result.output
    assert len(clusters.read_text(encoding="utf-8").splitlines()) == 1

    events = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    artifact = next(e for e in events if e["event"] == "artifact_written")
    assert artifact["data"]["path"] == str(output)
    assert artifact["data"]["sha256"].startswith("sha256:")
    assert artifact["data"]["record_count"] == 1


@pytest.mark.unit
def test_detect_workers_option(runner: CliRunner, catalog_file: Path, tmp_path: Path) -> None:
    """Test --workers rejects values below one."""
    result = runner.invoke(
        cli, ["detect", str(catalog_file), "-o", str(tmp_path / "r.json"), "--workers", "0"]
    )

    assert result.exit_code != 0


@pytest.mark.unit
def test_detect_missing_input(runner: CliRunner, tmp_path: Path) -> None:
    """Test a missing input file is rejected by click."""
    result = runner.invoke(
        cli, ["detect", str(tmp_path / "absent.jsonl"), "-o", str(tmp_path / "r.json")]
    )

    assert result.exit_code != 0


@pytest.mark.unit
def test_detect_unsupported_format(runner: CliRunner, tmp_path: Path) -> None:
    """Test unsupported catalog formats exit with an input error."""
    path = tmp_path / "catalog.xml"
    path.write_text("<items/>")

    result = runner.invoke(cli, ["detect", str(path), "-o", str(tmp_path / "r.json")])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "Unsupported catalog format" in result.output


@pytest.mark.unit
def test_detect_invalid_config(runner: CliRunner, catalog_file: Path, tmp_path: Path) -> None:
    """Test schema-invalid configuration exits with an input error."""
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"review_threshold": "high"}))

    result = runner.invoke(
        cli,
        ["detect", str(catalog_file), "-o", str(tmp_path / "r.json"), "--config", str(config)],
    )

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "Invalid configuration" in result.output


@pytest.mark.unit
def test_detect_inconsistent_thresholds(
    runner: CliRunner, catalog_file: Path, tmp_path: Path
) -> None:
    """Test review >= high is reported as an input error."""
    result = runner.invoke(
        cli,
        [
            "detect",
            str(catalog_file),
            "-o",
            str(tmp_path / "r.json"),
            "--review-threshold",
            "0.95",
        ],
    )

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "must be less than" in result.output


@pytest.mark.unit
def test_detect_invariant_violation_exit_code(
    runner: CliRunner,
    catalog_file: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test an aborted run exits with its own code and writes no report."""
    real_score_bucket = engine_runner.score_bucket
    monkeypatch.setattr(
        engine_runner,
        "score_bucket",
        lambda task, config: real_score_bucket(task, config) * 2,
    )
    output = tmp_path / "report.json"

    result = runner.invoke(cli, ["detect", str(catalog_file), "-o", str(output)])

    assert result.exit_code == EXIT_INVARIANT_VIOLATION
    assert "Internal error" in result.output
    assert not output.exists()


# ---------------------------------------------------------------------------
# normalize command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_normalize_command(runner: CliRunner, catalog_file: Path, tmp_path: Path) -> None:
    """Test normalize writes usable items and reports skipped ones."""
    output = tmp_path / "normalized.jsonl"

    result = runner.invoke(cli, ["normalize", str(catalog_file), "-o", str(output), "-v"])

    assert result.exit_code == 0, result.output
    assert "Wrote 4 normalized items" in result.output
    assert "skipped x1" in result.output
    assert "5 items read, 1 skipped" in result.output

    rows = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert rows[2]["series_token"] == {"kind": "book", "number": 1, "text": "book 1"}
    assert rows[2]["series_base"] == "mystery series"


@pytest.mark.unit
def test_normalize_bad_input(runner: CliRunner, tmp_path: Path) -> None:
    """Test malformed input exits with an input error."""
    path = tmp_path / "bad.jsonl"
    path.write_text("{oops\n")

    result = runner.invoke(cli, ["normalize", str(path), "-o", str(tmp_path / "n.jsonl")])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "invalid JSON" in result.output
