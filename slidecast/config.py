"""Configuration constants and environment settings."""

import os
import re
from pathlib import Path

# Rasterized slides: pdftoppm writes <prefix>-<page>.png
SLIDE_PREFIX = "slide"
SLIDE_FILENAME_RE = re.compile(r"^slide-(\d+)\.png$")
RASTER_DPI = 150

# Timing engine tolerances (seconds)
FIRST_MARKER_TOLERANCE = 0.1   # earliest marker closer than this to 0 is snapped to 0
END_EPSILON = 0.001            # markers are clamped to [0, total - END_EPSILON]
MIN_GAP_FLOOR = 0.001
SUM_TOLERANCE = 1e-6

# Playlist
CONCAT_FILENAME = "concat.txt"
DURATION_DECIMALS = 3

# Encoding
SLIDESHOW_FILENAME = "video.mp4"
SCALE_FILTER = "scale=trunc(iw/2)*2:trunc(ih/2)*2,fps=1"
X264_ARGS = ["-c:v", "libx264", "-preset", "fast", "-crf", "23"]
VIDEOTOOLBOX_ARGS = ["-c:v", "h264_videotoolbox", "-b:v", "2M"]
AUDIO_CODEC = "aac"

# Subprocess timeouts
PROBE_TIMEOUT = 30
RASTER_TIMEOUT = 600
ENCODE_TIMEOUT = 7200

REQUIRED_TOOLS = ["pdftoppm", "ffmpeg", "ffprobe"]
INSTALL_HINTS = {
    "darwin": "brew install poppler ffmpeg",
    "linux": "sudo apt install poppler-utils ffmpeg",
}

# AI integration
MODEL = "claude-sonnet-4-6"
SUMMARY_MAX_TOKENS = 512
MARKERS_MAX_TOKENS = 4096
INSIGHTS_MAX_TOKENS = 2048
SUMMARY_WORKERS = 4
AI_TIMEOUT = 120.0
AI_MAX_RETRIES = 3
AI_BACKOFF_BASE = 1.0
AI_BACKOFF_MAX = 30.0

WHISPER_MODELS = ["tiny", "base", "small", "medium", "large-v2", "large-v3"]
DEFAULT_WHISPER_MODEL = "small"

INSIGHT_KINDS = ["description", "keypoints", "quiz"]

PROMPTS_DIR = Path(__file__).parent / "prompts"


def api_key() -> str | None:
    return os.environ.get("ANTHROPIC_API_KEY")


def cache_dir() -> Path:
    return Path(os.environ.get("SLIDECAST_CACHE_DIR", Path.home() / ".cache" / "slidecast"))
