"""CLI entrypoint: PDF + narration audio to MP4."""

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .assemble import Job, JobResult, run_job
from .config import DEFAULT_WHISPER_MODEL, INSIGHT_KINDS, WHISPER_MODELS, api_key
from .errors import SlidecastError
from .utils import format_seconds_to_timestamp

_console = Console()


def _parse_insights(value: str) -> list[str]:
    kinds = [k.strip() for k in value.split(",") if k.strip()]
    unknown = [k for k in kinds if k not in INSIGHT_KINDS]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown insight kind(s): {', '.join(unknown)} (choose from {', '.join(INSIGHT_KINDS)})"
        )
    return kinds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slidecast",
        description="slidecast: turn a PDF slide deck and a narration track into an MP4",
    )
    parser.add_argument("--pdf", required=True, help="Input PDF file")
    parser.add_argument("--audio", required=True, help="Input audio file (m4a, mp3, wav, ...)")
    parser.add_argument("--out", help="Output MP4 path (required unless --dry-run)")

    timing = parser.add_mutually_exclusive_group()
    timing.add_argument("--timings", help="Per-slide timings CSV (index,seconds)")
    timing.add_argument("--markers", help="Slide markers as JSON ({\"markers\": [...]}) or CSV (t,slide)")
    timing.add_argument(
        "--auto-markers",
        action="store_true",
        help="Let Claude place slide markers from slide summaries and a transcript",
    )

    parser.add_argument("--workdir", help="Working directory (must be new or empty; default: work/slidecast-<timestamp>)")
    parser.add_argument("--keep-work", action="store_true", help="Keep working files")
    parser.add_argument("--dry-run", action="store_true", help="Print the timing plan and exit without encoding")
    parser.add_argument(
        "--insights",
        type=_parse_insights,
        default=[],
        help=f"Also write AI-generated text next to the video: comma-separated {', '.join(INSIGHT_KINDS)}",
    )
    parser.add_argument(
        "--whisper-model",
        default=DEFAULT_WHISPER_MODEL,
        choices=WHISPER_MODELS,
        help=f"Whisper model size for --auto-markers (default: {DEFAULT_WHISPER_MODEL})",
    )
    parser.add_argument("--language", help="Force transcript language (e.g. 'en'). Auto-detect if omitted.")
    parser.add_argument("--refresh-cache", action="store_true", help="Ignore cached summaries/transcripts")
    return parser


def job_from_args(args: argparse.Namespace) -> Job:
    return Job(
        pdf=args.pdf,
        audio=args.audio,
        output=args.out or "",
        timings=args.timings,
        markers=args.markers,
        auto_markers=args.auto_markers,
        workdir=args.workdir,
        keep_work=args.keep_work,
        dry_run=args.dry_run,
        insights=args.insights,
        whisper_model=args.whisper_model,
        language=args.language,
        refresh_cache=args.refresh_cache,
    )


def plan_table(result: JobResult) -> Table:
    table = Table(title=f"Timing plan ({result.total_seconds:.3f}s)")
    table.add_column("#", justify="right")
    table.add_column("Slide")
    table.add_column("Start", justify="right")
    table.add_column("Duration", justify="right")
    start = 0.0
    for i, (image_path, duration) in enumerate(result.plan.pairs(), start=1):
        table.add_row(str(i), Path(image_path).name, format_seconds_to_timestamp(start), f"{duration:.3f}s")
        start += duration
    return table


def run(args: argparse.Namespace) -> int:
    if not args.out and not args.dry_run:
        _console.print("[red]Error:[/] --out is required")
        return 1
    if (args.auto_markers or args.insights) and not api_key():
        _console.print("[red]Error:[/] ANTHROPIC_API_KEY environment variable not set")
        return 1

    job = job_from_args(args)
    _console.print(Panel.fit(
        f"[bold]PDF:[/]    {job.pdf}\n"
        f"[bold]Audio:[/]  {job.audio}\n"
        f"[bold]Output:[/] {job.output or '(dry run)'}\n"
        f"[bold]Timing:[/] {job.mode}",
        title="[bold cyan]slidecast[/]",
    ))

    try:
        result = run_job(job)
    except SlidecastError as e:
        _console.print(f"[red]Error:[/] {e}")
        return 1

    if job.dry_run:
        _console.print(plan_table(result))
        return 0

    _console.print(f"\n[bold green]✓ Done![/] Output: {result.output_path}")
    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
