"""Generate a video description, key points and a quiz from slide summaries."""

from pathlib import Path

import anthropic

from .claude import ask, get_client
from .config import INSIGHT_KINDS, INSIGHTS_MAX_TOKENS, PROMPTS_DIR
from .models import SlideSummary
from .summarize import format_summaries

_TEMPLATES = {kind: (PROMPTS_DIR / f"insight_{kind}.txt").read_text() for kind in INSIGHT_KINDS}

_TITLES = {
    "description": "Video description",
    "keypoints": "Key points",
    "quiz": "Comprehension quiz",
}


def build_prompt(kind: str, summaries: list[SlideSummary], deck_name: str, duration: float) -> str:
    if kind not in _TEMPLATES:
        raise ValueError(f"Unknown insight kind: {kind}")
    return (
        _TEMPLATES[kind]
        .replace("{deck_name}", deck_name)
        .replace("{slide_count}", str(len(summaries)))
        .replace("{minutes}", str(round(duration / 60)))
        .replace("{slides}", format_summaries(summaries))
    )


def generate_insights(
    kinds: list[str],
    summaries: list[SlideSummary],
    deck_name: str,
    duration: float,
    client: anthropic.Anthropic | None = None,
) -> dict[str, str]:
    client = client or get_client()
    results = {}
    for kind in kinds:
        print(f"[insights] Generating {kind}...")
        prompt = build_prompt(kind, summaries, deck_name, duration)
        results[kind] = ask(client, prompt, max_tokens=INSIGHTS_MAX_TOKENS, label=f"insights {kind}")
    return results


def write_insights(insights: dict[str, str], output_path: str) -> Path:
    """Write insights as markdown next to the video (``<stem>.insights.md``)."""
    out = Path(output_path)
    path = out.with_name(f"{out.stem}.insights.md")
    sections = [f"## {_TITLES.get(kind, kind)}\n\n{text.strip()}\n" for kind, text in insights.items()]
    path.write_text("\n".join(sections), encoding="utf-8")
    print(f"[insights] Saved to {path}")
    return path
