"""Error types raised by slidecast.

Planning errors describe a failed precondition of the timing engine and are
never swallowed by it; the CLI turns them into a one-line message.
"""


class SlidecastError(Exception):
    """Base class for every error slidecast raises on purpose."""


class PlanningError(SlidecastError, ValueError):
    pass


class NoSlidesFoundError(PlanningError):
    pass


class DuplicateSlideError(PlanningError):
    pass


class InvalidSlideCountError(PlanningError):
    pass


class DegenerateDurationError(PlanningError):
    pass


class NonPositiveDurationError(PlanningError):
    pass


class NoMarkersError(PlanningError):
    pass


class UnknownSlideReferenceError(PlanningError):
    pass


class MarkerFormatError(PlanningError):
    """A marker file that cannot be decoded or parsed."""


class TimingError(PlanningError):
    """A problem with an explicit per-slide timings table."""

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class TimingFormatError(TimingError):
    pass


class IndexOutOfRangeError(TimingError):
    pass


class DuplicateTimingError(TimingError):
    pass


class InvalidTimingValueError(TimingError):
    pass


class TimingOverrunError(TimingError):
    pass


class InsufficientRemainingTimeError(TimingError):
    pass


class ToolError(SlidecastError, RuntimeError):
    """An external command is missing or exited with a non-zero status."""


class AIResponseError(SlidecastError):
    """The model replied with something we could not use."""


class AIRequestError(SlidecastError):
    """The Anthropic API refused a request or kept failing after retries."""
