"""
Shared fixtures for slidecast tests.
"""
import pytest

from slidecast.models import Slide


def make_slides(count: int, directory: str = "/deck") -> list[Slide]:
    return [Slide(index=i, image_path=f"{directory}/slide-{i}.png") for i in range(1, count + 1)]


@pytest.fixture
def four_slides():
    return make_slides(4)


@pytest.fixture
def slide_dir(tmp_path):
    """A directory holding three rasterized slides and an unrelated file."""
    for name in ("slide-1.png", "slide-2.png", "slide-3.png", "notes.txt"):
        (tmp_path / name).write_bytes(b"\x89PNG")
    return tmp_path
