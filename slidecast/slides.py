"""Discover rasterized slide images and order them by page number."""

from pathlib import Path

from .config import SLIDE_FILENAME_RE
from .errors import DuplicateSlideError, NoSlidesFoundError
from .models import Slide


def parse_slide_index(name: str) -> int | None:
    """Return the 1-based page index encoded in ``slide-<n>.png``, or None."""
    m = SLIDE_FILENAME_RE.match(name)
    if not m:
        return None
    index = int(m.group(1))
    return index if index >= 1 else None


def list_slides(directory: str | Path) -> list[Slide]:
    """
    List slide images in ``directory`` sorted by numeric page index.

    Files that don't follow the naming convention are ignored, since the
    rasterizer may leave other files next to the slides. Two files for the
    same page (``slide-1.png`` and ``slide-01.png``) are rejected.
    """
    directory = Path(directory)
    slides = []
    seen: dict[int, str] = {}
    for entry in directory.iterdir():
        if not entry.is_file():
            continue
        index = parse_slide_index(entry.name)
        if index is None:
            continue
        if index in seen:
            raise DuplicateSlideError(f"Slide {index} appears twice: {seen[index]} and {entry.name}")
        seen[index] = entry.name
        slides.append(Slide(index=index, image_path=str(entry)))

    if not slides:
        raise NoSlidesFoundError(f"No slide images found in {directory}")

    slides.sort(key=lambda s: s.index)
    return slides


def build_slide_map(slides: list[Slide]) -> dict[int, str]:
    return {s.index: s.image_path for s in slides}
