from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Slide:
    index: int        # 1-based, matches the PDF page number
    image_path: str


@dataclass
class Marker:
    t: float          # seconds into the audio
    slide: int        # references Slide.index
    order: int = 0    # input position, tie-break only


@dataclass
class TimingEntry:
    slide_index: int
    seconds: Optional[float] = None   # None = share the leftover time


@dataclass
class TimingPlan:
    sequence: list[str] = field(default_factory=list)
    durations: list[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.sequence)

    @property
    def total(self) -> float:
        return sum(self.durations)

    def pairs(self) -> list[tuple[str, float]]:
        return list(zip(self.sequence, self.durations))


@dataclass
class TranscriptSegment:
    start: float  # seconds
    end: float
    text: str


@dataclass
class SlideSummary:
    slide: int
    summary: str
