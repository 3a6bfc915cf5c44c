"""Read and write ffmpeg concat-demuxer playlists for a timing plan."""

import os
import re
from pathlib import Path

from .config import CONCAT_FILENAME, DURATION_DECIMALS
from .models import TimingPlan

_FILE_LINE = re.compile(r"^file '(.*)'$")
_DURATION_LINE = re.compile(r"^duration\s+(\S+)$")


def escape_concat_path(path: str | Path) -> str:
    """
    Absolute, forward-slashed path safe to put inside single quotes.

    A quote inside the path becomes ``'\\''``: close the quoted string, emit an
    escaped quote, reopen it.
    """
    normalized = os.path.abspath(path).replace("\\", "/")
    return normalized.replace("'", "'\\''")


def unescape_concat_path(quoted: str) -> str:
    return quoted.replace("'\\''", "'")


def render_concat_plan(plan: TimingPlan) -> str:
    """
    Render ``plan`` in the concat-demuxer format.

    The demuxer ignores the duration of the final entry, so the last image is
    listed once more without a duration; otherwise the last slide would get
    no screen time.
    """
    if not plan.sequence:
        raise ValueError("Cannot write a playlist for an empty plan")

    lines = []
    for image_path, duration in plan.pairs():
        lines.append(f"file '{escape_concat_path(image_path)}'")
        lines.append(f"duration {duration:.{DURATION_DECIMALS}f}")
    lines.append(f"file '{escape_concat_path(plan.sequence[-1])}'")
    return "\n".join(lines) + "\n"


def write_concat_plan(plan: TimingPlan, workdir: str | Path) -> Path:
    concat_path = Path(workdir) / CONCAT_FILENAME
    concat_path.write_text(render_concat_plan(plan), encoding="utf-8")
    return concat_path


def read_concat_plan(text: str) -> list[tuple[str, float]]:
    """Parse a playlist back into ``(path, duration)`` pairs.

    The trailing file line without a duration is dropped.
    """
    pairs: list[tuple[str, float]] = []
    pending: str | None = None
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        m = _FILE_LINE.match(line)
        if m:
            pending = unescape_concat_path(m.group(1))
            continue
        m = _DURATION_LINE.match(line)
        if m and pending is not None:
            pairs.append((pending, float(m.group(1))))
            pending = None
            continue
        raise ValueError(f"Unexpected playlist line: {line!r}")
    return pairs
