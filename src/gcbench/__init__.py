"""gcbench: measure the interpreter on a fixed battery of workloads.

Each workload file in the benchmark directory is byte-compiled, loaded,
and invoked a number of times with a forced garbage collection before
every measurement.  Timings, collector counts and collector time are
averaged per benchmark and printed as an outline table.
"""

__version__ = "0.1.0"

from gcbench.runner import run  # noqa: E402

__all__ = ["__version__", "run"]
