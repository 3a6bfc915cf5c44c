"""
Marker validation and repair.

Markers say "show slide N from second t". They come from manual entry,
imported files and model suggestions, so any of them may be out of range,
duplicated, unordered or crammed together. ``normalize_markers`` turns such a
list into a strictly increasing sequence that starts at 0 and leaves every
slide a non-empty interval before the end of the audio.
"""

import json
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .config import END_EPSILON, FIRST_MARKER_TOLERANCE, MIN_GAP_FLOOR
from .errors import (
    DegenerateDurationError,
    InvalidSlideCountError,
    MarkerFormatError,
    NoMarkersError,
    NonPositiveDurationError,
    UnknownSlideReferenceError,
)
from .models import Marker, Slide, TimingPlan
from .slides import build_slide_map
from .utils import parse_timestamp_to_seconds


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_markers(payload: Any) -> list[Marker]:
    """
    Build markers from an untrusted payload.

    Accepts a ``{"markers": [...]}`` object or a bare list of ``{"t", "slide"}``
    mappings. Entries whose time or slide is missing, non-numeric or
    non-finite are dropped.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("markers")
    if not isinstance(payload, (list, tuple)):
        raise NoMarkersError("Marker payload has no 'markers' list")

    markers: list[Marker] = []
    dropped = 0
    for order, item in enumerate(payload):
        if isinstance(item, Marker):
            t, slide = _to_number(item.t), _to_number(item.slide)
        elif isinstance(item, Mapping):
            t, slide = _to_number(item.get("t")), _to_number(item.get("slide"))
        else:
            t = slide = None
        if t is None or slide is None:
            dropped += 1
            continue
        markers.append(Marker(t=t, slide=slide, order=order))

    if dropped:
        print(f"[markers] Dropped {dropped} marker(s) with a missing or non-numeric time/slide")
    return markers


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def normalize_markers(markers: list[Marker], slide_count: int, total_seconds: float) -> list[Marker]:
    """
    Repair ``markers`` into a strictly increasing sequence starting at t=0.

    Returns new Marker objects; the input list is left untouched. Raises only
    when there is nothing to work with (no markers, no slides, no audio).
    """
    if slide_count < 1:
        raise InvalidSlideCountError(f"Slide count must be at least 1, got {slide_count}")
    if not math.isfinite(total_seconds) or total_seconds <= 0:
        raise DegenerateDurationError(f"Audio duration must be positive, got {total_seconds}")
    if not markers:
        raise NoMarkersError("No markers provided")

    usable = []
    for m in markers:
        t, slide = _to_number(m.t), _to_number(m.slide)
        if t is not None and slide is not None:
            usable.append((t, slide, m.order))
    if len(usable) < len(markers):
        print(f"[markers] Dropped {len(markers) - len(usable)} marker(s) with a non-finite time/slide")
    if not usable:
        raise NoMarkersError("No usable markers provided")

    upper = max(total_seconds - END_EPSILON, 0.0)
    repaired = [
        Marker(
            t=min(max(t, 0.0), upper),
            slide=min(max(_round_half_up(slide), 1), slide_count),
            order=order,
        )
        for t, slide, order in usable
    ]
    repaired.sort(key=lambda m: (m.t, m.order))

    if repaired[0].t > FIRST_MARKER_TOLERANCE:
        repaired.insert(0, Marker(t=0.0, slide=1, order=-1))
    else:
        repaired[0].t = 0.0

    count = len(repaired)
    min_gap = max(total_seconds / (2 * count), MIN_GAP_FLOOR)

    for i in range(1, count):
        if repaired[i].t <= repaired[i - 1].t:
            repaired[i].t = repaired[i - 1].t + min_gap

    if repaired[-1].t >= total_seconds:
        repaired[-1].t = total_seconds - min_gap
        for i in range(count - 2, -1, -1):
            repaired[i].t = min(repaired[i].t, repaired[i + 1].t - min_gap)

        if repaired[0].t < 0:
            print(
                f"[markers] {count} markers don't fit in {total_seconds:.3f}s, "
                "spacing them evenly instead"
            )
            for i, m in enumerate(repaired):
                m.t = total_seconds * i / count

    return repaired


def marker_durations(markers: list[Marker], total_seconds: float) -> list[float]:
    durations = []
    for i, current in enumerate(markers):
        next_t = markers[i + 1].t if i < len(markers) - 1 else total_seconds
        duration = next_t - current.t
        if not duration > 0:  # also catches NaN
            raise NonPositiveDurationError(
                f"Non-positive duration at marker {i + 1} (t={current.t:.3f}s, slide {current.slide})"
            )
        durations.append(duration)
    return durations


def plan_from_markers(slides: list[Slide], total_seconds: float, markers: list[Marker]) -> TimingPlan:
    """Normalize ``markers`` and resolve them against the available slides."""
    normalized = normalize_markers(markers, len(slides), total_seconds)
    slide_map = build_slide_map(slides)

    sequence = []
    for m in normalized:
        path = slide_map.get(m.slide)
        if path is None:
            raise UnknownSlideReferenceError(f"Marker slide {m.slide} has no corresponding image")
        sequence.append(path)

    return TimingPlan(sequence=sequence, durations=marker_durations(normalized, total_seconds))


# ── Marker files ─────────────────────────────────────────────────────────────


def _parse_marker_time(cell: str) -> float | str:
    try:
        return parse_timestamp_to_seconds(cell)
    except ValueError:
        return cell


def parse_markers_csv(text: str) -> list[dict]:
    """
    Parse ``t,slide`` rows into raw marker dicts.

    ``t`` may be seconds, ``MM:SS`` or ``HH:MM:SS``. Rows are not validated
    here; ``coerce_markers`` drops the unusable ones.
    """
    rows = []
    first_row = True
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        cells = [c.strip() for c in line.split(",")]
        t = _parse_marker_time(cells[0])
        if first_row:
            first_row = False
            if isinstance(t, str):
                continue  # header
        slide = cells[1] if len(cells) > 1 else None
        rows.append({"t": t, "slide": slide})
    return rows


def load_markers(path: str | Path) -> list[Marker]:
    """Read markers from a ``.json`` or ``.csv`` file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise MarkerFormatError(f"{path}: not a UTF-8 text file ({e.reason})") from e
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise MarkerFormatError(f"{path}: invalid JSON at line {e.lineno}: {e.msg}") from e
    else:
        payload = parse_markers_csv(text)
    return coerce_markers(payload)
