"""Summarize each slide image with Claude, in parallel."""

import base64
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import anthropic
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, MofNCompleteColumn

from .cache import ResultCache
from .claude import ask, get_client
from .config import AI_MAX_RETRIES, AI_TIMEOUT, PROMPTS_DIR, SUMMARY_MAX_TOKENS, SUMMARY_WORKERS
from .models import Slide, SlideSummary

_PROMPT_PATH = PROMPTS_DIR / "summarize.txt"
_PROMPT = _PROMPT_PATH.read_text()


def _slide_content(image_path: str) -> list[dict]:
    data = base64.standard_b64encode(Path(image_path).read_bytes()).decode("ascii")
    return [
        {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": data}},
        {"type": "text", "text": _PROMPT},
    ]


def summarize_slides(
    slides: list[Slide],
    client: anthropic.Anthropic | None = None,
    max_workers: int = SUMMARY_WORKERS,
    timeout: float = AI_TIMEOUT,
    retries: int = AI_MAX_RETRIES,
) -> list[SlideSummary]:
    """
    Summarize every slide. Requests run on a bounded thread pool; each call
    has its own timeout and retries with backoff. Results are ordered by slide.
    """
    client = client or get_client(timeout=timeout)
    summaries: list[SlideSummary] = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
    ) as progress:
        task = progress.add_task("[cyan]Summarizing slides...", total=len(slides))

        def summarize_one(slide: Slide) -> SlideSummary:
            text = ask(
                client,
                _slide_content(slide.image_path),
                max_tokens=SUMMARY_MAX_TOKENS,
                retries=retries,
                label=f"summarize {slide.index}",
            )
            progress.advance(task)
            return SlideSummary(slide=slide.index, summary=text)

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(summarize_one, s) for s in slides]
            for f in as_completed(futures):
                summaries.append(f.result())  # re-raise any exceptions

    summaries.sort(key=lambda s: s.slide)
    print(f"[summarize] Summarized {len(summaries)} slides")
    return summaries


def cached_summaries(
    pdf_path: str,
    slides: list[Slide],
    cache: ResultCache,
    refresh: bool = False,
    **kwargs,
) -> list[SlideSummary]:
    """Summaries for ``pdf_path``, reusing a cached result for the same file."""
    key = cache.key_for(pdf_path)
    if refresh:
        cache.invalidate("summaries", key)
    else:
        cached = cache.get("summaries", key)
        if cached is not None:
            print(f"[summarize] Loaded {len(cached)} summaries from cache")
            return [SlideSummary(**s) for s in cached]

    summaries = summarize_slides(slides, **kwargs)
    cache.put("summaries", key, [vars(s) for s in summaries])
    return summaries


def format_summaries(summaries: list[SlideSummary]) -> str:
    return "\n".join(f"Slide {s.slide}: {s.summary}" for s in summaries)
