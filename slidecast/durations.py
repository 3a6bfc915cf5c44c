"""Per-slide durations from an equal split or an explicit timings table."""

import math

from .config import SUM_TOLERANCE
from .errors import (
    DegenerateDurationError,
    DuplicateTimingError,
    IndexOutOfRangeError,
    InsufficientRemainingTimeError,
    InvalidSlideCountError,
    InvalidTimingValueError,
    TimingFormatError,
    TimingOverrunError,
)
from .models import Slide, TimingEntry, TimingPlan


def equal_durations(total_seconds: float, count: int) -> list[float]:
    """
    Split ``total_seconds`` into ``count`` equal shares.

    The last share is computed as the remainder so the list sums to
    ``total_seconds`` exactly instead of accumulating float error.
    """
    if count < 1:
        raise InvalidSlideCountError(f"Slide count must be at least 1, got {count}")

    base = total_seconds / count
    durations = [base] * count
    last = total_seconds - base * (count - 1)
    if last <= 0:
        raise DegenerateDurationError(
            f"Computed non-positive duration for last slide ({last:.6f}s)"
        )
    durations[-1] = last
    return durations


def plan_equal(slides: list[Slide], total_seconds: float) -> TimingPlan:
    durations = equal_durations(total_seconds, len(slides))
    return TimingPlan(sequence=[s.image_path for s in slides], durations=durations)


# ── Explicit timings table ───────────────────────────────────────────────────


def _is_number(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def parse_timings_csv(text: str, slide_count: int) -> list[TimingEntry]:
    """
    Parse ``index,seconds`` rows.

    Blank lines and ``#`` comments are skipped, and the first data row is
    treated as a header when its index column is not numeric. An empty
    seconds cell leaves that slide unset.
    """
    entries: list[TimingEntry] = []
    seen: dict[int, int] = {}
    first_row = True

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        cells = [c.strip() for c in line.split(",")]
        if first_row:
            first_row = False
            if not _is_number(cells[0]):
                continue

        if len(cells) != 2:
            raise TimingFormatError(f"expected 'index,seconds', got {raw_line!r}", line=lineno)

        index_cell, seconds_cell = cells
        try:
            index_value = float(index_cell)
        except ValueError:
            raise TimingFormatError(f"slide index {index_cell!r} is not a number", line=lineno)
        if not index_value.is_integer():
            raise IndexOutOfRangeError(f"slide index {index_cell!r} is not an integer", line=lineno)
        index = int(index_value)
        if not 1 <= index <= slide_count:
            raise IndexOutOfRangeError(
                f"slide index {index} outside 1..{slide_count}", line=lineno
            )
        if index in seen:
            raise DuplicateTimingError(
                f"slide {index} already timed on line {seen[index]}", line=lineno
            )
        seen[index] = lineno

        seconds = None
        if seconds_cell:
            try:
                seconds = float(seconds_cell)
            except ValueError:
                raise InvalidTimingValueError(f"seconds {seconds_cell!r} is not a number", line=lineno)
            if not math.isfinite(seconds) or seconds <= 0:
                raise InvalidTimingValueError(
                    f"seconds for slide {index} must be finite and > 0, got {seconds_cell}",
                    line=lineno,
                )

        entries.append(TimingEntry(slide_index=index, seconds=seconds))

    return entries


def csv_durations(entries: list[TimingEntry], slide_count: int, total_seconds: float) -> list[float]:
    """Turn parsed timing entries into one duration per slide position."""
    if slide_count < 1:
        raise InvalidSlideCountError(f"Slide count must be at least 1, got {slide_count}")

    explicit: dict[int, float] = {
        e.slide_index: e.seconds for e in entries if e.seconds is not None
    }
    specified_total = sum(explicit.values())
    if specified_total > total_seconds + SUM_TOLERANCE:
        raise TimingOverrunError(
            f"explicit timings add up to {specified_total:.3f}s "
            f"but the audio is only {total_seconds:.3f}s"
        )

    unset = [i for i in range(1, slide_count + 1) if i not in explicit]
    share = 0.0
    if unset:
        remaining = total_seconds - specified_total
        share = remaining / len(unset)
        if share <= 0:
            raise InsufficientRemainingTimeError(
                f"{remaining:.3f}s left for {len(unset)} untimed slide(s)"
            )

    durations = [explicit.get(i, share) for i in range(1, slide_count + 1)]

    # Rounding slack (or the whole remainder when every slide is timed) goes to
    # the last slide so the plan covers the audio exactly.
    slack = total_seconds - sum(durations)
    if slack:
        durations[-1] += slack
    if durations[-1] <= 0:
        raise DegenerateDurationError(
            f"Computed non-positive duration for last slide ({durations[-1]:.6f}s)"
        )
    return durations


def plan_from_csv(slides: list[Slide], total_seconds: float, text: str) -> TimingPlan:
    """Plan from a timings table; row indices are positions in ``slides``."""
    entries = parse_timings_csv(text, len(slides))
    durations = csv_durations(entries, len(slides), total_seconds)
    return TimingPlan(sequence=[s.image_path for s in slides], durations=durations)
