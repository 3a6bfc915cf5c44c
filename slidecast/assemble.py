"""Run a whole job: rasterize, plan slide timing, encode, mux."""

import shutil
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console

from .cache import ResultCache
from .compose import build_slideshow, merge_audio
from .concat import write_concat_plan
from .durations import plan_equal, plan_from_csv
from .errors import SlidecastError, TimingFormatError
from .extract import check_dependencies, get_audio_duration, rasterize_pdf
from .markers import coerce_markers, load_markers, plan_from_markers
from .models import Marker, Slide, SlideSummary, TimingPlan
from .slides import list_slides

_console = Console()


@dataclass
class Job:
    pdf: str
    audio: str
    output: str
    timings: Optional[str] = None        # path to an index,seconds CSV
    markers: Optional[str] = None        # path to a marker JSON/CSV file
    auto_markers: bool = False
    workdir: Optional[str] = None
    keep_work: bool = False
    dry_run: bool = False
    insights: list[str] = field(default_factory=list)
    whisper_model: str = "small"
    language: Optional[str] = None
    refresh_cache: bool = False

    @property
    def mode(self) -> str:
        if self.timings:
            return "timings"
        if self.markers:
            return "markers"
        if self.auto_markers:
            return "auto-markers"
        return "equal"


@dataclass
class JobResult:
    total_seconds: float
    slides: list[Slide]
    plan: TimingPlan
    output_path: Optional[str] = None   # None for dry runs


def default_workdir() -> Path:
    return Path("work") / f"slidecast-{datetime.now():%Y%m%d-%H%M%S-%f}"


@contextmanager
def working_directory(path: str | Path | None = None, keep: bool = False) -> Iterator[Path]:
    """
    Create a job directory and remove it on every exit path unless ``keep``.

    An explicit ``path`` must be new or empty, so images from another job can
    never be picked up.
    """
    workdir = Path(path) if path else default_workdir()
    if workdir.exists() and any(workdir.iterdir()):
        raise SlidecastError(f"Working directory is not empty: {workdir}")
    workdir.mkdir(parents=True, exist_ok=True)
    try:
        yield workdir
    finally:
        if keep:
            print(f"[assemble] Keeping working files in {workdir}")
        else:
            shutil.rmtree(workdir, ignore_errors=True)


def read_timings_file(path: str | Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise TimingFormatError(f"{path}: not a UTF-8 text file ({e.reason})") from e


def plan_timing(
    slides: list[Slide],
    total_seconds: float,
    timings_csv: str | None = None,
    markers: list[Marker] | None = None,
) -> TimingPlan:
    """Pick the planning strategy: explicit timings, markers, or an equal split."""
    if timings_csv is not None and markers is not None:
        raise SlidecastError("Use either explicit timings or markers, not both")
    if timings_csv is not None:
        return plan_from_csv(slides, total_seconds, timings_csv)
    if markers is not None:
        return plan_from_markers(slides, total_seconds, markers)
    return plan_equal(slides, total_seconds)


def _auto_markers(job: Job, slides: list[Slide], total_seconds: float, cache: ResultCache) -> tuple[list[Marker], list[SlideSummary]]:
    from .automarkers import suggest_markers
    from .summarize import cached_summaries
    from .transcribe import cached_transcript

    summaries = cached_summaries(job.pdf, slides, cache, refresh=job.refresh_cache)
    segments = cached_transcript(
        job.audio, cache, refresh=job.refresh_cache,
        model_size=job.whisper_model, language=job.language,
    )
    payload = suggest_markers(summaries, segments, total_seconds)
    return coerce_markers(payload), summaries


def run_job(job: Job, cache: ResultCache | None = None) -> JobResult:
    """Run ``job`` end to end and return the plan that was used."""
    for label, path in (("PDF", job.pdf), ("Audio", job.audio), ("Timings", job.timings), ("Markers", job.markers)):
        if path and not Path(path).exists():
            raise SlidecastError(f"{label} not found: {path}")
    if sum(bool(x) for x in (job.timings, job.markers, job.auto_markers)) > 1:
        raise SlidecastError("--timings, --markers and --auto-markers are mutually exclusive")

    check_dependencies()
    cache = cache or ResultCache()

    with working_directory(job.workdir, keep=job.keep_work) as workdir:
        # ── Stage 1: Probe audio ──────────────────────────────────────────────
        with _console.status("[cyan][1/4] Probing audio duration...[/]"):
            total_seconds = get_audio_duration(job.audio)
        _console.print(f"[green]✓[/] [bold][1/4][/] Audio duration: {total_seconds:.3f}s ({total_seconds / 60:.1f} min)")

        # ── Stage 2: Rasterize slides ─────────────────────────────────────────
        with _console.status("[cyan][2/4] Converting PDF to PNG...[/]"):
            rasterize_pdf(job.pdf, str(workdir))
            slides = list_slides(workdir)
        _console.print(f"[green]✓[/] [bold][2/4][/] Converted {len(slides)} slides")

        # ── Stage 3: Plan timing ──────────────────────────────────────────────
        summaries = None
        markers = None
        timings_csv = None
        if job.timings:
            timings_csv = read_timings_file(job.timings)
        elif job.markers:
            markers = load_markers(job.markers)
        elif job.auto_markers:
            markers, summaries = _auto_markers(job, slides, total_seconds, cache)

        plan = plan_timing(slides, total_seconds, timings_csv=timings_csv, markers=markers)
        _console.print(f"[green]✓[/] [bold][3/4][/] Planned {len(plan)} segments ({job.mode})")

        if job.dry_run:
            return JobResult(total_seconds=total_seconds, slides=slides, plan=plan)

        # ── Stage 4: Encode and mux ───────────────────────────────────────────
        _console.print("[cyan][4/4] Building video (this may take a while for long audio)...[/]")
        concat_path = write_concat_plan(plan, workdir)
        video_path = build_slideshow(str(concat_path), str(workdir))
        merge_audio(video_path, job.audio, job.output)
        size_mb = Path(job.output).stat().st_size / 1024 / 1024
        _console.print(f"[green]✓[/] [bold][4/4][/] Video written ({size_mb:.1f}MB)")

        if job.insights:
            from .insights import generate_insights, write_insights
            from .summarize import cached_summaries

            if summaries is None:
                summaries = cached_summaries(job.pdf, slides, cache, refresh=job.refresh_cache)
            insights = generate_insights(job.insights, summaries, Path(job.pdf).stem, total_seconds)
            write_insights(insights, job.output)

    return JobResult(total_seconds=total_seconds, slides=slides, plan=plan, output_path=job.output)
