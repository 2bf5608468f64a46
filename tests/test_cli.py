"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from notex import cli
from notex.exceptions import WriterError
from notex.processing.orchestrator import PipelineResult


def test_parser_defaults() -> None:
    args = cli.build_parser().parse_args(["notes"])

    assert args.input == Path("notes")
    assert args.output == Path("./compressed")
    assert args.format == "markdown"
    assert args.parallel == 8
    assert args.retries == 3
    assert args.exclude == []
    assert not (args.dry_run or args.reorganize or args.cross_ref or args.verbose)


def test_parser_collects_repeated_excludes() -> None:
    args = cli.build_parser().parse_args(
        ["notes", "-x", "*.tmp", "--exclude", "drafts/*", "-f", "plain", "-p", "2", "--cross-ref"]
    )

    assert args.exclude == ["*.tmp", "drafts/*"]
    assert args.format == "plain"
    assert args.parallel == 2
    assert args.cross_ref


def test_parser_rejects_unknown_format() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["notes", "--format", "html"])


def test_run_prints_written_files(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    written = [tmp_path / "ideas/a.md", tmp_path / "ideas/b.md"]

    async def fake_main(args: object) -> PipelineResult:
        return PipelineResult(notes=1, segments=2, enhanced=2, written_files=written)

    monkeypatch.setattr(cli, "main", fake_main)

    assert cli.run([str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert f"  {written[0]}" in out
    assert "Wrote 2 files" in out


def test_run_dry_run_exits_zero_without_summary(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    async def fake_main(args: object) -> PipelineResult:
        return PipelineResult(notes=3, segments=5, dry_run=True)

    monkeypatch.setattr(cli, "main", fake_main)

    assert cli.run([str(tmp_path), "--dry-run"]) == 0
    assert "Wrote" not in capsys.readouterr().out


def test_run_returns_non_zero_on_pipeline_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    async def fake_main(args: object) -> PipelineResult:
        raise WriterError("disk full")

    monkeypatch.setattr(cli, "main", fake_main)

    assert cli.run([str(tmp_path)]) == 1


def test_run_returns_non_zero_for_missing_input(tmp_path: Path) -> None:
    assert cli.run([str(tmp_path / "missing"), "--url", "http://127.0.0.1:9/v1"]) == 1
