"""Console stopwatch for the display phases."""

import logging
import sys
import time
from typing import Optional, TextIO

logger = logging.getLogger(__name__)


class Timer:
    """Print a label, run the block, then print how long it took.

    Usage:
        with Timer("Sending Image to E-Paper Display..."):
            display.display_image(image, full_refresh=True)

    Output looks like ``Sending Image to E-Paper Display... [Done 1234 ms]``.
    """

    def __init__(self, label: str, stream: Optional[TextIO] = None):
        self.label = label
        self.stream = stream if stream is not None else sys.stdout
        self.elapsed_ms: Optional[int] = None
        self._start = 0.0

    def start(self) -> "Timer":
        print(self.label, end="", file=self.stream, flush=True)
        self._start = time.perf_counter()
        return self

    def stop(self) -> int:
        self.elapsed_ms = int((time.perf_counter() - self._start) * 1000)
        print(f" [Done {self.elapsed_ms} ms]", file=self.stream, flush=True)
        logger.debug(f"{self.label} took {self.elapsed_ms} ms")
        return self.elapsed_ms

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
