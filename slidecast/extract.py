"""Audio probing and PDF rasterization through external tools."""

import math
import shutil
import subprocess
import sys
from pathlib import Path

from .config import (
    INSTALL_HINTS,
    PROBE_TIMEOUT,
    RASTER_DPI,
    RASTER_TIMEOUT,
    REQUIRED_TOOLS,
    SLIDE_PREFIX,
)
from .errors import ToolError


def run_tool(cmd: list[str], timeout: float) -> str:
    """Run ``cmd`` to completion and return its stdout, raising ToolError on failure."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError:
        raise ToolError(f"Command not found: {cmd[0]}. Please ensure it is installed and in PATH.")
    except subprocess.TimeoutExpired:
        raise ToolError(f"Command timed out after {timeout:.0f}s: {' '.join(cmd)}")
    if result.returncode != 0:
        raise ToolError(f"Command failed: {' '.join(cmd)}\n{result.stderr}".rstrip())
    return result.stdout.strip()


def check_dependencies(tools: list[str] = REQUIRED_TOOLS) -> None:
    missing = [t for t in tools if shutil.which(t) is None]
    if not missing:
        return
    hint = INSTALL_HINTS.get(sys.platform)
    message = f"Missing dependencies: {', '.join(missing)}."
    if hint:
        message += f" Install with: {hint}"
    raise ToolError(message)


def get_audio_duration(audio_path: str) -> float:
    """Return duration of a media file in seconds."""
    cmd = [
        "ffprobe",
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(audio_path),
    ]
    output = run_tool(cmd, timeout=PROBE_TIMEOUT)
    try:
        seconds = float(output)
    except ValueError:
        raise ToolError(f"Invalid audio duration: {output!r}")
    if not math.isfinite(seconds) or seconds <= 0:
        raise ToolError(f"Invalid audio duration: {output!r}")
    return seconds


def rasterize_pdf(pdf_path: str, output_dir: str, dpi: int = RASTER_DPI) -> Path:
    """
    Render every PDF page to ``<output_dir>/slide-<n>.png``.

    Returns the output directory.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    prefix = output_dir / SLIDE_PREFIX

    run_tool(["pdftoppm", "-png", "-r", str(dpi), str(pdf_path), str(prefix)], timeout=RASTER_TIMEOUT)
    print(f"[extract] Slides rendered to {output_dir}")
    return output_dir
