"""
Tests for the concat-demuxer playlist writer.
"""
import os

import pytest

from slidecast.concat import (
    escape_concat_path,
    read_concat_plan,
    render_concat_plan,
    write_concat_plan,
)
from slidecast.models import TimingPlan


class TestEscapeConcatPath:
    """Tests for path quoting."""

    def test_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert escape_concat_path("slide-1.png") == os.path.abspath("slide-1.png").replace("\\", "/")

    def test_single_quote(self):
        assert escape_concat_path("/deck/it's/slide-1.png") == "/deck/it'\\''s/slide-1.png"

    def test_backslashes_become_slashes(self):
        assert "\\" not in escape_concat_path("/deck\\sub\\slide-1.png")


class TestRenderConcatPlan:
    """Tests for the playlist text."""

    def test_exact_format(self):
        plan = TimingPlan(sequence=["/a/slide-1.png", "/a/slide-2.png"], durations=[2.5, 7.5])

        assert render_concat_plan(plan) == (
            "file '/a/slide-1.png'\n"
            "duration 2.500\n"
            "file '/a/slide-2.png'\n"
            "duration 7.500\n"
            "file '/a/slide-2.png'\n"
        )

    def test_millisecond_precision(self):
        plan = TimingPlan(sequence=["/a/s.png"], durations=[10.0 / 3])
        assert "duration 3.333\n" in render_concat_plan(plan)

    def test_last_image_repeated_without_duration(self):
        plan = TimingPlan(sequence=["/a/1.png", "/a/2.png", "/a/1.png"], durations=[1.0, 2.0, 3.0])
        lines = render_concat_plan(plan).splitlines()

        assert len(lines) == 7
        assert lines[-1] == "file '/a/1.png'"
        assert lines[-2] == "duration 3.000"

    def test_single_trailing_newline(self):
        text = render_concat_plan(TimingPlan(sequence=["/a/1.png"], durations=[1.0]))
        assert text.endswith("'\n") and not text.endswith("\n\n")

    def test_empty_plan(self):
        with pytest.raises(ValueError):
            render_concat_plan(TimingPlan())


class TestConcatRoundTrip:
    """Re-reading a playlist gives back the plan."""

    def test_round_trip(self):
        plan = TimingPlan(
            sequence=["/deck/slide-1.png", "/deck/it's here/slide-2.png", "/deck/slide-1.png"],
            durations=[1.25, 3.5, 5.25],
        )
        assert read_concat_plan(render_concat_plan(plan)) == plan.pairs()

    def test_write_concat_plan(self, tmp_path):
        plan = TimingPlan(sequence=[str(tmp_path / "slide-1.png")], durations=[4.0])
        path = write_concat_plan(plan, tmp_path)

        assert path == tmp_path / "concat.txt"
        assert read_concat_plan(path.read_text()) == [(str(tmp_path / "slide-1.png"), 4.0)]

    def test_unexpected_line(self):
        with pytest.raises(ValueError):
            read_concat_plan("ffconcat version 1.0\n")
