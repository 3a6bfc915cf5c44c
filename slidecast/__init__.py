"""slidecast: time slides against a narration track and assemble an MP4."""

from .concat import read_concat_plan, render_concat_plan, write_concat_plan
from .durations import csv_durations, equal_durations, parse_timings_csv, plan_equal, plan_from_csv
from .markers import coerce_markers, load_markers, normalize_markers, plan_from_markers
from .models import Marker, Slide, TimingEntry, TimingPlan
from .slides import build_slide_map, list_slides

__all__ = [
    # Slides
    "list_slides",
    "build_slide_map",
    # Durations
    "equal_durations",
    "parse_timings_csv",
    "csv_durations",
    "plan_equal",
    "plan_from_csv",
    # Markers
    "coerce_markers",
    "normalize_markers",
    "plan_from_markers",
    "load_markers",
    # Playlist
    "render_concat_plan",
    "write_concat_plan",
    "read_concat_plan",
    # Models
    "Slide",
    "Marker",
    "TimingEntry",
    "TimingPlan",
]
