"""Benchmark result data structures, aggregation and serialization.

Hierarchy::

    ResultSet (raw data of one run invocation)
      → samples: dict[str, list[TimingSample]]   (one per repetition)
      → failures: dict[str, int]

    Report (aggregated view)
      → rows: list[BenchRow]   (one per benchmark with samples)
      → totals: BenchRow
      → python: PythonProfile

Files produced::

    <name>.json holds {"report": Report, "samples": ResultSet}
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gcbench.logging import get_logger
from gcbench.stats import quadrature, std_deviation
from gcbench.system import PythonProfile
from gcbench.timing import TimingSample

log = get_logger("results")

TOTAL_ROW_NAME = "total"


# ---------------------------------------------------------------------------
# Raw samples
# ---------------------------------------------------------------------------


@dataclass
class ResultSet:
    """Timing samples per benchmark, in the order benchmarks first succeeded."""

    runs: int | None = None  # Upper bound on samples per benchmark
    samples: dict[str, list[TimingSample]] = field(default_factory=dict)
    failures: dict[str, int] = field(default_factory=dict)

    def record(self, name: str, sample: TimingSample) -> None:
        """Append a sample for *name*.

        Raises:
            ValueError: If *name* already holds ``runs`` samples.
        """
        bucket = self.samples.setdefault(name, [])
        if self.runs is not None and len(bucket) >= self.runs:
            raise ValueError(f"Benchmark {name!r} already has {self.runs} samples")
        bucket.append(sample)

    def record_failure(self, name: str) -> None:
        """Count a failed invocation of *name*.  No sample is stored."""
        self.failures[name] = self.failures.get(name, 0) + 1

    def names(self) -> list[str]:
        """Benchmarks that produced at least one sample."""
        return [name for name, samples in self.samples.items() if samples]

    def __len__(self) -> int:
        return sum(len(s) for s in self.samples.values())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "runs": self.runs,
            "samples": {
                name: [s.to_dict() for s in samples] for name, samples in self.samples.items()
            },
            "failures": dict(self.failures),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResultSet:
        """Deserialize from a dict."""
        result = cls(runs=data.get("runs"))
        for name, samples in data.get("samples", {}).items():
            result.samples[name] = [TimingSample.from_dict(s) for s in samples]
        result.failures = {k: int(v) for k, v in data.get("failures", {}).items()}
        return result


# ---------------------------------------------------------------------------
# Aggregated rows
# ---------------------------------------------------------------------------


@dataclass
class BenchRow:
    """One aggregated line of the report.  Times are per-run means."""

    name: str
    non_gc_s: float
    gc_s: float
    gcs: float
    total_s: float
    err_s: float
    runs: int = 0  # Samples behind the means

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "non_gc_s": round(self.non_gc_s, 9),
            "gc_s": round(self.gc_s, 9),
            "gcs": round(self.gcs, 6),
            "total_s": round(self.total_s, 9),
            "err_s": round(self.err_s, 9),
            "runs": self.runs,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchRow:
        """Deserialize from a dict, ignoring unknown fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        return cls(**filtered)


def aggregate_samples(name: str, samples: list[TimingSample]) -> BenchRow:
    """Aggregate the samples of one benchmark into a row.

    Sums are divided by the number of samples actually recorded.  The
    error is the sample standard deviation of the elapsed times.

    Raises:
        ValueError: If *samples* is empty.
    """
    if not samples:
        raise ValueError(f"No samples for benchmark {name!r}")

    n = len(samples)
    elapsed = [s.elapsed_s for s in samples]
    total = sum(elapsed)
    gc_elapsed = sum(s.gc_elapsed_s for s in samples)
    gc_count = sum(s.gc_count for s in samples)

    return BenchRow(
        name=name,
        non_gc_s=(total - gc_elapsed) / n,
        gc_s=gc_elapsed / n,
        gcs=gc_count / n,
        total_s=total / n,
        err_s=std_deviation(elapsed),
        runs=n,
    )


def total_row(rows: list[BenchRow]) -> BenchRow:
    """Sum rows into a totals row; errors combine in quadrature."""
    return BenchRow(
        name=TOTAL_ROW_NAME,
        non_gc_s=sum(r.non_gc_s for r in rows),
        gc_s=sum(r.gc_s for r in rows),
        gcs=sum(r.gcs for r in rows),
        total_s=sum(r.total_s for r in rows),
        err_s=quadrature(r.err_s for r in rows),
        runs=max((r.runs for r in rows), default=0),
    )


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass
class Report:
    """Aggregated results of one run invocation."""

    rows: list[BenchRow] = field(default_factory=list)
    totals: BenchRow = field(default_factory=lambda: total_row([]))
    runs: int = 0  # Requested repetitions
    name: str = ""
    python: PythonProfile = field(default_factory=PythonProfile)
    start_time: str = ""
    end_time: str = ""
    failures: dict[str, int] = field(default_factory=dict)

    def row(self, name: str) -> BenchRow | None:
        """Return the row for benchmark *name*, if present."""
        for r in self.rows:
            if r.name == name:
                return r
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "runs": self.runs,
            "python": self.python.to_dict(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "failures": dict(self.failures),
            "rows": [r.to_dict() for r in self.rows],
            "totals": self.totals.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Report:
        """Deserialize from a dict."""
        rows = [BenchRow.from_dict(r) for r in data.get("rows", [])]
        totals = data.get("totals")
        return cls(
            rows=rows,
            totals=BenchRow.from_dict(totals) if totals else total_row(rows),
            runs=data.get("runs", 0),
            name=data.get("name", ""),
            python=PythonProfile.from_dict(data.get("python", {})),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            failures=dict(data.get("failures", {})),
        )


def build_report(
    results: ResultSet,
    *,
    runs: int,
    name: str = "",
    python: PythonProfile | None = None,
    start_time: str = "",
    end_time: str = "",
) -> Report:
    """Aggregate a ResultSet into a Report.

    Benchmarks without any sample produce no row.
    """
    rows = [aggregate_samples(n, results.samples[n]) for n in results.names()]
    return Report(
        rows=rows,
        totals=total_row(rows),
        runs=runs,
        name=name,
        python=python or PythonProfile(),
        start_time=start_time,
        end_time=end_time or time.strftime("%Y-%m-%dT%H:%M:%S%z"),
        failures=dict(results.failures),
    )


# ---------------------------------------------------------------------------
# I/O functions
# ---------------------------------------------------------------------------


def save_run(path: Path, report: Report, results: ResultSet) -> None:
    """Save a report and its raw samples as one JSON document."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"report": report.to_dict(), "samples": results.to_dict()}
    path.write_text(json.dumps(payload, indent=2) + "\n")
    log.info("Wrote %s", path)


def load_run(path: Path) -> tuple[Report, ResultSet]:
    """Load a saved run.

    Rows are re-aggregated from the raw samples so the report always
    agrees with the data it was computed from.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a saved gcbench run.
    """
    if not path.exists():
        raise FileNotFoundError(f"No saved run at {path}")

    try:
        data = json.loads(path.read_text())
        if not isinstance(data, dict) or "report" not in data:
            raise ValueError("missing report")
        saved = Report.from_dict(data["report"])
        results = ResultSet.from_dict(data.get("samples", {}))
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise ValueError(f"{path} is not a saved gcbench run") from exc

    report = build_report(
        results,
        runs=saved.runs,
        name=saved.name,
        python=saved.python,
        start_time=saved.start_time,
        end_time=saved.end_time,
    )
    return report, results
