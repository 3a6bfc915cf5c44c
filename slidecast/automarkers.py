"""Ask Claude where each slide starts in the narration."""

import anthropic

from .claude import ask, extract_json, get_client
from .config import MARKERS_MAX_TOKENS, PROMPTS_DIR
from .errors import AIResponseError
from .models import SlideSummary, TranscriptSegment
from .summarize import format_summaries
from .transcribe import segments_to_text

_PROMPT_PATH = PROMPTS_DIR / "auto_markers.txt"
_PROMPT_TEMPLATE = _PROMPT_PATH.read_text()


def build_prompt(summaries: list[SlideSummary], segments: list[TranscriptSegment], total_seconds: float) -> str:
    return (
        _PROMPT_TEMPLATE
        .replace("{slide_count}", str(len(summaries)))
        .replace("{duration}", f"{total_seconds:.1f}")
        .replace("{slides}", format_summaries(summaries))
        .replace("{transcript}", segments_to_text(segments))
    )


def suggest_markers(
    summaries: list[SlideSummary],
    segments: list[TranscriptSegment],
    total_seconds: float,
    client: anthropic.Anthropic | None = None,
) -> dict:
    """
    Return the model's ``{"markers": [...]}`` payload as-is.

    The payload is untrusted: callers must run it through
    ``coerce_markers`` and ``normalize_markers`` like any imported file.
    """
    if not summaries:
        raise AIResponseError("No slide summaries to match against")
    if not segments:
        raise AIResponseError("Transcript is empty")

    client = client or get_client()
    print(f"[automarkers] Matching {len(summaries)} slides against {len(segments)} transcript segments...")
    raw = ask(client, build_prompt(summaries, segments, total_seconds), max_tokens=MARKERS_MAX_TOKENS, label="automarkers")

    payload = extract_json(raw, opening="{")
    if isinstance(payload, list):
        payload = {"markers": payload}
    if not isinstance(payload, dict) or not isinstance(payload.get("markers"), list):
        raise AIResponseError("Model reply has no 'markers' list")

    print(f"[automarkers] Model suggested {len(payload['markers'])} markers")
    return payload
