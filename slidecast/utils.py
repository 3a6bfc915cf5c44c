"""Shared helpers for timestamps and file hashing."""

import hashlib
from pathlib import Path


def parse_timestamp_to_seconds(ts: str) -> float:
    """Convert 'HH:MM:SS', 'MM:SS' or plain seconds to seconds."""
    parts = ts.strip().split(":")
    if len(parts) == 3:
        return int(parts[0]) * 3600 + int(parts[1]) * 60 + float(parts[2])
    elif len(parts) == 2:
        return int(parts[0]) * 60 + float(parts[1])
    elif len(parts) == 1:
        return float(parts[0])
    raise ValueError(f"Unrecognised timestamp: {ts!r}")


def format_seconds_to_timestamp(seconds: float) -> str:
    """Convert seconds to M:SS.mmm, or H:MM:SS.mmm past the hour."""
    millis = int(round(seconds * 1000))
    h, rem = divmod(millis, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}.{ms:03d}"
    return f"{m}:{s:02d}.{ms:03d}"


def file_digest(path: str | Path, chunk_size: int = 1 << 20) -> str:
    """SHA-256 of a file's contents, used as a cache key."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            h.update(chunk)
    return h.hexdigest()
