"""Encode the slideshow from a concat playlist and mux in the narration."""

import sys
from pathlib import Path

from rich.console import Console

from .config import (
    AUDIO_CODEC,
    ENCODE_TIMEOUT,
    SCALE_FILTER,
    SLIDESHOW_FILENAME,
    VIDEOTOOLBOX_ARGS,
    X264_ARGS,
)
from .extract import run_tool

_console = Console()


def encoder_args(platform: str = sys.platform) -> list[str]:
    """Hardware H.264 on macOS, libx264 everywhere else."""
    return list(VIDEOTOOLBOX_ARGS if platform == "darwin" else X264_ARGS)


def build_slideshow(concat_path: str, workdir: str, platform: str = sys.platform) -> str:
    """Encode the playlist into a silent slideshow video; returns its path."""
    video_path = str(Path(workdir) / SLIDESHOW_FILENAME)
    cmd = (
        [
            "ffmpeg", "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", str(concat_path),
            "-vf", SCALE_FILTER,
            "-pix_fmt", "yuv420p",
        ]
        + encoder_args(platform)
        + [video_path]
    )
    print(f"[compose] Using encoder: {cmd[cmd.index('-c:v') + 1]} (platform: {platform})")
    with _console.status("[cyan]Encoding slideshow...[/]"):
        run_tool(cmd, timeout=ENCODE_TIMEOUT)
    return video_path


def merge_audio(video_path: str, audio_path: str, output_path: str) -> str:
    """Copy the slideshow video stream and add the narration as AAC."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    cmd = [
        "ffmpeg", "-y",
        "-i", str(video_path),
        "-i", str(audio_path),
        "-c:v", "copy",
        "-c:a", AUDIO_CODEC,
        "-shortest",
        str(output_path),
    ]
    with _console.status("[cyan]Merging audio...[/]"):
        run_tool(cmd, timeout=ENCODE_TIMEOUT)
    print(f"[compose] Output saved to {output_path}")
    return output_path
