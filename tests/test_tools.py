"""
Tests for the external tool wrappers, with subprocess mocked.
"""
import subprocess
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from slidecast import compose, extract
from slidecast.errors import ToolError


def _completed(stdout="", returncode=0, stderr=""):
    return SimpleNamespace(stdout=stdout, returncode=returncode, stderr=stderr)


@pytest.fixture
def fake_run(monkeypatch):
    run = MagicMock(return_value=_completed())
    monkeypatch.setattr(extract.subprocess, "run", run)
    return run


class TestRunTool:
    """Tests for subprocess error mapping."""

    def test_missing_binary(self, fake_run):
        fake_run.side_effect = FileNotFoundError()
        with pytest.raises(ToolError, match="Command not found: pdftoppm"):
            extract.run_tool(["pdftoppm"], timeout=1)

    def test_non_zero_exit_carries_stderr(self, fake_run):
        fake_run.return_value = _completed(returncode=1, stderr="Invalid data found")
        with pytest.raises(ToolError, match="Invalid data found"):
            extract.run_tool(["ffmpeg", "-i", "x"], timeout=1)

    def test_timeout(self, fake_run):
        fake_run.side_effect = subprocess.TimeoutExpired(cmd="ffmpeg", timeout=1)
        with pytest.raises(ToolError, match="timed out"):
            extract.run_tool(["ffmpeg"], timeout=1)


class TestAudioDuration:
    """Tests for the ffprobe wrapper."""

    def test_parses_seconds(self, fake_run):
        fake_run.return_value = _completed(stdout="123.456000\n")
        assert extract.get_audio_duration("talk.m4a") == 123.456
        assert fake_run.call_args.args[0][0] == "ffprobe"

    @pytest.mark.parametrize("stdout", ["N/A", "0", "-3", "nan", ""])
    def test_invalid_duration(self, fake_run, stdout):
        fake_run.return_value = _completed(stdout=stdout)
        with pytest.raises(ToolError):
            extract.get_audio_duration("talk.m4a")


class TestRasterize:
    """Tests for the pdftoppm wrapper."""

    def test_command(self, fake_run, tmp_path):
        extract.rasterize_pdf("deck.pdf", str(tmp_path / "work"), dpi=150)

        cmd = fake_run.call_args.args[0]
        assert cmd == ["pdftoppm", "-png", "-r", "150", "deck.pdf", str(tmp_path / "work" / "slide")]
        assert (tmp_path / "work").is_dir()


class TestCheckDependencies:
    """Tests for the PATH check."""

    def test_all_present(self, monkeypatch):
        monkeypatch.setattr(extract.shutil, "which", lambda name: f"/usr/bin/{name}")
        extract.check_dependencies()

    def test_missing_listed(self, monkeypatch):
        monkeypatch.setattr(extract.shutil, "which", lambda name: None if name == "pdftoppm" else "/usr/bin/x")
        with pytest.raises(ToolError, match="pdftoppm"):
            extract.check_dependencies()


class TestCompose:
    """Tests for the ffmpeg invocations."""

    def test_encoder_per_platform(self):
        assert "libx264" in compose.encoder_args("linux")
        assert "h264_videotoolbox" in compose.encoder_args("darwin")

    def test_slideshow_command(self, fake_run, tmp_path):
        video = compose.build_slideshow(str(tmp_path / "concat.txt"), str(tmp_path), platform="linux")

        cmd = fake_run.call_args.args[0]
        assert video == str(tmp_path / "video.mp4")
        assert cmd[:7] == ["ffmpeg", "-y", "-f", "concat", "-safe", "0", "-i"]
        assert "-crf" in cmd and cmd[-1] == video

    def test_merge_command(self, fake_run, tmp_path):
        out = tmp_path / "nested" / "talk.mp4"
        compose.merge_audio("video.mp4", "talk.m4a", str(out))

        cmd = fake_run.call_args.args[0]
        assert cmd[cmd.index("-c:v") + 1] == "copy"
        assert "-shortest" in cmd
        assert out.parent.is_dir()
