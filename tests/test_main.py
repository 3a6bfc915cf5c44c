"""
Tests for the command-line front end.
"""
from unittest.mock import MagicMock

import pytest

from slidecast import assemble
from slidecast import main as cli
from slidecast.assemble import JobResult
from slidecast.errors import AIRequestError, TimingOverrunError
from slidecast.models import TimingPlan


def _args(*extra):
    return cli.build_parser().parse_args(["--pdf", "deck.pdf", "--audio", "talk.m4a", *extra])


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = _args("--out", "talk.mp4")
        job = cli.job_from_args(args)
        assert job.mode == "equal"
        assert job.insights == []
        assert not job.keep_work

    def test_timing_sources_are_exclusive(self):
        with pytest.raises(SystemExit):
            _args("--timings", "t.csv", "--markers", "m.json")

    def test_insights_list(self):
        assert _args("--insights", "quiz, description").insights == ["quiz", "description"]

    def test_unknown_insight(self):
        with pytest.raises(SystemExit):
            _args("--insights", "poem")


class TestRun:
    """Tests for run() exit codes."""

    def test_out_required_without_dry_run(self):
        assert cli.run(_args()) == 1

    def test_ai_features_need_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert cli.run(_args("--out", "x.mp4", "--auto-markers")) == 1

    def test_planning_error_is_reported(self, monkeypatch):
        monkeypatch.setattr(cli, "run_job", MagicMock(side_effect=TimingOverrunError("too long")))
        assert cli.run(_args("--out", "x.mp4", "--timings", "t.csv")) == 1

    def test_malformed_markers_file_is_reported(self, monkeypatch, tmp_path):
        def fake_rasterize(pdf, output_dir, dpi=150):
            for i in (1, 2):
                (tmp_path / "work" / f"slide-{i}.png").write_bytes(b"\x89PNG")

        monkeypatch.setattr(assemble, "check_dependencies", MagicMock())
        monkeypatch.setattr(assemble, "get_audio_duration", MagicMock(return_value=10.0))
        monkeypatch.setattr(assemble, "rasterize_pdf", fake_rasterize)
        for name, data in (("deck.pdf", b"%PDF"), ("talk.m4a", b"audio"), ("m.json", b"{not json")):
            (tmp_path / name).write_bytes(data)

        args = cli.build_parser().parse_args([
            "--pdf", str(tmp_path / "deck.pdf"),
            "--audio", str(tmp_path / "talk.m4a"),
            "--markers", str(tmp_path / "m.json"),
            "--workdir", str(tmp_path / "work"),
            "--dry-run",
        ])
        assert cli.run(args) == 1
        assert not (tmp_path / "work").exists()

    def test_ai_request_error_is_reported(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setattr(cli, "run_job", MagicMock(side_effect=AIRequestError("summaries: RateLimitError")))
        assert cli.run(_args("--out", "x.mp4", "--auto-markers")) == 1

    def test_dry_run_prints_plan(self, monkeypatch):
        plan = TimingPlan(sequence=["/w/slide-1.png", "/w/slide-2.png"], durations=[4.0, 6.0])
        result = JobResult(total_seconds=10.0, slides=[], plan=plan)
        monkeypatch.setattr(cli, "run_job", MagicMock(return_value=result))

        assert cli.run(_args("--dry-run")) == 0
        table = cli.plan_table(result)
        assert table.row_count == 2

    def test_main_exits_with_code(self, monkeypatch):
        monkeypatch.setattr(cli, "run", lambda args: 0)
        with pytest.raises(SystemExit) as exc:
            cli.main(["--pdf", "a.pdf", "--audio", "b.m4a", "--dry-run"])
        assert exc.value.code == 0
