"""Timestamped narration transcripts (faster-whisper), cached per audio file."""

from pathlib import Path

from faster_whisper import WhisperModel

from .cache import ResultCache
from .config import DEFAULT_WHISPER_MODEL
from .models import TranscriptSegment


def _pick_device() -> str:
    try:
        import torch
    except ImportError:
        return "cpu"
    return "cuda" if torch.cuda.is_available() else "cpu"


def transcribe(
    audio_path: str,
    model_size: str = DEFAULT_WHISPER_MODEL,
    language: str | None = None,
    device: str = "auto",
) -> list[TranscriptSegment]:
    """Narration segments for the auto-marker prompt; ``language=None`` auto-detects."""
    if device == "auto":
        device = _pick_device()

    print(f"[transcribe] Whisper '{model_size}' ({device}) on {Path(audio_path).name}")
    model = WhisperModel(
        model_size,
        device=device,
        compute_type="float16" if device == "cuda" else "int8",
    )
    # Slide changes land in pauses; VAD keeps silent stretches out of the segment bounds.
    raw_segments, info = model.transcribe(
        audio_path,
        language=language,
        vad_filter=True,
        vad_parameters={"min_silence_duration_ms": 500},
    )

    segments = [TranscriptSegment(start=s.start, end=s.end, text=s.text.strip()) for s in raw_segments]
    print(f"[transcribe] {len(segments)} segments, language {info.language}")
    return segments


def cached_transcript(
    audio_path: str,
    cache: ResultCache,
    refresh: bool = False,
    **kwargs,
) -> list[TranscriptSegment]:
    key = cache.key_for(audio_path)
    if refresh:
        cache.invalidate("transcript", key)
    else:
        cached = cache.get("transcript", key)
        if cached is not None:
            print(f"[transcribe] Transcript loaded from cache ({len(cached)} segments)")
            return [TranscriptSegment(**s) for s in cached]

    segments = transcribe(audio_path, **kwargs)
    cache.put("transcript", key, [vars(s) for s in segments])
    return segments


def segments_to_text(segments: list[TranscriptSegment]) -> str:
    return "\n".join(f"[{s.start:.1f}s - {s.end:.1f}s] {s.text}" for s in segments)
