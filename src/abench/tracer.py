"""
Diagnostic tracing of failures recovered during a benchmark run.
"""
import sys
import threading
import traceback
from typing import List, Optional, Sequence, TextIO, Tuple

Frame = Tuple[str, str]

MAX_FRAMES = 32


def capture_frames(exc: BaseException, limit: int = MAX_FRAMES) -> List[Frame]:
    """Collect (location, label) pairs for a caught exception.

    Frames are ordered from where the exception was raised outward.
    """
    summaries = traceback.extract_tb(exc.__traceback__)
    frames = [(f"{s.filename}:{s.lineno}", s.name) for s in reversed(summaries)]
    return frames[:limit]


class FailureTracer:
    """Writes recovered failures to a diagnostic stream according to verbosity.

    verbosity 0 prints nothing, 1 prints a one-line message, anything higher
    adds one line per supplied frame and a trailing blank line. Each call
    writes its block in one piece so concurrent callers do not interleave.
    """

    def __init__(self, verbosity: int = 0, stream: Optional[TextIO] = None):
        self.verbosity = verbosity
        self.stream = stream
        self._lock = threading.Lock()

    def format(self, failure: object, frames: Sequence[Frame] = ()) -> str:
        if self.verbosity <= 0:
            return ""
        lines = [f"recover: {failure}\n"]
        if self.verbosity > 1:
            for location, label in frames:
                lines.append(f"\t{location} {label}()\n")
            lines.append("\n")
        return "".join(lines)

    def trace(self, failure: object, frames: Optional[Sequence[Frame]] = None) -> None:
        if frames is None and isinstance(failure, BaseException):
            frames = capture_frames(failure)
        block = self.format(failure, frames or ())
        if not block:
            return
        stream = self.stream or sys.stderr
        with self._lock:
            stream.write(block)
            stream.flush()
