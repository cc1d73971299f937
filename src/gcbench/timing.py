"""Timing capture for benchmark invocations.

Measures wall-clock time with ``time.perf_counter`` and accounts for
garbage collector activity during the measured region via
``gc.callbacks``.  A full collection is forced before every
measurement so that garbage left over by a previous benchmark is not
charged to the next one.
"""

from __future__ import annotations

import gc
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator


# ---------------------------------------------------------------------------
# TimingSample
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimingSample:
    """Result of one measured invocation."""

    elapsed_s: float
    gc_count: int
    gc_elapsed_s: float

    @property
    def non_gc_s(self) -> float:
        """Elapsed time not spent in the garbage collector."""
        return self.elapsed_s - self.gc_elapsed_s

    def __iter__(self) -> Iterator[Any]:
        # Allows ``elapsed, gcs, gc_elapsed = sample``.
        return iter((self.elapsed_s, self.gc_count, self.gc_elapsed_s))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "elapsed_s": round(self.elapsed_s, 9),
            "gc_count": self.gc_count,
            "gc_elapsed_s": round(self.gc_elapsed_s, 9),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimingSample:
        """Deserialize from a dict."""
        return cls(
            elapsed_s=float(data["elapsed_s"]),
            gc_count=int(data.get("gc_count", 0)),
            gc_elapsed_s=float(data.get("gc_elapsed_s", 0.0)),
        )


# ---------------------------------------------------------------------------
# GC accounting
# ---------------------------------------------------------------------------


class GCMonitor:
    """Counts collections and time spent collecting while installed.

    Usage::

        with GCMonitor() as mon:
            work()
        mon.count, mon.elapsed_s
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._started: float | None = None
        self.count = 0
        self.elapsed_s = 0.0

    def _callback(self, phase: str, info: dict[str, Any]) -> None:
        if phase == "start":
            self._started = self._clock()
        elif phase == "stop" and self._started is not None:
            self.elapsed_s += self._clock() - self._started
            self.count += 1
            self._started = None

    def __enter__(self) -> GCMonitor:
        gc.callbacks.append(self._callback)
        return self

    def __exit__(self, *exc_info: object) -> None:
        try:
            gc.callbacks.remove(self._callback)
        except ValueError:
            pass


# ---------------------------------------------------------------------------
# Measuring function
# ---------------------------------------------------------------------------


def measure(
    func: Callable[[], Any],
    *,
    clock: Callable[[], float] = time.perf_counter,
) -> TimingSample:
    """Run *func* once and return its timing sample.

    A full garbage collection is forced immediately before the call.
    Exceptions raised by *func* propagate to the caller after the GC
    hook has been removed.

    Args:
        func: Zero-argument callable wrapping the measured region.
        clock: Monotonic clock returning seconds.

    Returns:
        TimingSample with elapsed time, GC count and GC time.
    """
    gc.collect()
    with GCMonitor(clock) as mon:
        start = clock()
        func()
        elapsed = clock() - start
    return TimingSample(
        elapsed_s=elapsed,
        gc_count=mon.count,
        gc_elapsed_s=mon.elapsed_s,
    )
