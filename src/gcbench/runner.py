"""Benchmark execution engine.

Orchestrates:
1. Configuration validation
2. Discovery, compilation and loading of benchmark units
3. Repetitions: every unit once per run, runs one after another
4. Aggregation into a Report

Everything runs sequentially on the calling thread.  A failing
invocation is logged and dropped, it never stops the run.
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import Any, Callable

from gcbench.config import BenchConfig, check_config
from gcbench.discovery import BenchmarkUnit, Convention, discover
from gcbench.logging import get_logger
from gcbench.results import Report, ResultSet, build_report
from gcbench.system import capture_python_profile
from gcbench.timing import TimingSample, measure

log = get_logger("runner")

MeasureFn = Callable[[Callable[[], Any]], TimingSample]


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback after each invocation."""

    benchmark: str
    run: int  # 1-based
    total_runs: int
    index: int  # 0-based position of the benchmark in the registry
    total_benchmarks: int
    elapsed_s: float = 0.0
    status: str = ""  # "ok" or "error"
    detail: str = ""


ProgressCallback = Callable[[BenchProgress], None]


# ---------------------------------------------------------------------------
# Calling-convention dispatch
# ---------------------------------------------------------------------------


class _SingleUseMeasure:
    """Measuring function handed to MEASURED entry points.

    Refuses a second call so one invocation always yields one sample.
    """

    def __init__(self, measure_fn: MeasureFn) -> None:
        self._measure_fn = measure_fn
        self.calls = 0

    def __call__(self, func: Callable[[], Any]) -> TimingSample:
        self.calls += 1
        if self.calls > 1:
            raise RuntimeError("the measuring function may only be called once per invocation")
        return self._measure_fn(func)


def invoke_unit(unit: BenchmarkUnit, measure_fn: MeasureFn = measure) -> TimingSample:
    """Invoke *unit* once according to its calling convention.

    Raises:
        TypeError: If a MEASURED entry point returns something other
            than the sample produced by the measuring function.
        Exception: Whatever the benchmark itself raises.
    """
    if unit.convention is Convention.MEASURED:
        once = _SingleUseMeasure(measure_fn)
        sample = unit.entry(once)
        if once.calls == 0:
            raise TypeError(f"{unit.name} never called the measuring function")
        if not isinstance(sample, TimingSample):
            raise TypeError(
                f"{unit.name} must return the measuring function's result, "
                f"got {type(sample).__name__}"
            )
        return sample
    return measure_fn(unit.entry)


# ---------------------------------------------------------------------------
# BenchRunner
# ---------------------------------------------------------------------------


class BenchRunner:
    """Executes a benchmark run according to a BenchConfig.

    Usage::

        runner = BenchRunner(BenchConfig(runs=5, pattern="fib"))
        report = runner.run()
        runner.results  # raw samples
    """

    def __init__(
        self,
        config: BenchConfig,
        progress_callback: ProgressCallback | None = None,
        *,
        registry: dict[str, BenchmarkUnit] | None = None,
        measure_fn: MeasureFn = measure,
    ) -> None:
        self.config = config
        self.progress: ProgressCallback = progress_callback or self._default_progress
        self.registry = registry
        self.measure_fn = measure_fn
        self.results = ResultSet(runs=config.runs)

    def run(self) -> Report:
        """Execute the full benchmark.

        Returns:
            The aggregated Report.

        Raises:
            ValueError: If the configuration is invalid.
        """
        start_time = time.strftime("%Y-%m-%dT%H:%M:%S%z")

        if self.registry is None:
            check_config(self.config)
            self.registry = discover(
                self.config.bench_dir,
                self.config.pattern,
                compile=self.config.compile,
                recompile=self.config.recompile,
            )
        elif self.config.runs < 1:
            raise ValueError(f"Need at least one run (got {self.config.runs}).")

        units = list(self.registry.values())
        if not units:
            log.warning("No benchmarks selected")

        self.results = ResultSet(runs=self.config.runs)
        for run_idx in range(self.config.runs):
            log.info("Run %d/%d", run_idx + 1, self.config.runs)
            for idx, unit in enumerate(units):
                self._run_once(unit, run_idx, idx, len(units))

        report = build_report(
            self.results,
            runs=self.config.runs,
            name=self.config.name,
            python=capture_python_profile(),
            start_time=start_time,
        )
        if report.failures:
            log.warning(
                "%d invocation(s) failed: %s",
                sum(report.failures.values()),
                ", ".join(sorted(report.failures)),
            )
        return report

    def _run_once(self, unit: BenchmarkUnit, run_idx: int, idx: int, total: int) -> None:
        """Invoke one unit and record its sample, or log its failure."""
        try:
            sample = invoke_unit(unit, self.measure_fn)
        except Exception as exc:  # noqa: BLE001
            log.error("Benchmark %s failed: %s: %s", unit.name, type(exc).__name__, exc)
            log.debug("Traceback for %s", unit.name, exc_info=True)
            self.results.record_failure(unit.name)
            self.progress(
                BenchProgress(
                    benchmark=unit.name,
                    run=run_idx + 1,
                    total_runs=self.config.runs,
                    index=idx,
                    total_benchmarks=total,
                    status="error",
                    detail=str(exc),
                )
            )
            return

        self.results.record(unit.name, sample)
        self.progress(
            BenchProgress(
                benchmark=unit.name,
                run=run_idx + 1,
                total_runs=self.config.runs,
                index=idx,
                total_benchmarks=total,
                elapsed_s=sample.elapsed_s,
                status="ok",
            )
        )

    @staticmethod
    def _default_progress(progress: BenchProgress) -> None:
        """Default progress callback: log one line per invocation."""
        position = f"[{progress.index + 1}/{progress.total_benchmarks}]"
        line = (
            f"  {position} {progress.benchmark:24s} "
            f"run {progress.run}/{progress.total_runs} "
        )
        if progress.elapsed_s:
            line += f"{progress.elapsed_s:8.3f}s "
        if progress.status:
            line += f"[{progress.status}]"
        log.info(line)


def run(
    pattern: str | None = None,
    recompile: bool = False,
    runs: int | None = None,
    *,
    config: BenchConfig | None = None,
    progress_callback: ProgressCallback | None = None,
) -> Report:
    """Run the benchmark battery and return the aggregated report.

    Args:
        pattern: Regular expression selecting benchmark file names.
        recompile: Rebuild compiled artifacts before loading.
        runs: Number of repetitions of the whole battery (default 3).
        config: Base configuration, never modified; *pattern*, *recompile*
            and *runs* override its fields in a copy when given.
        progress_callback: Called after every invocation.
    """
    overrides: dict[str, Any] = {}
    if pattern is not None:
        overrides["pattern"] = pattern
    if recompile:
        overrides["recompile"] = True
    if runs is not None:
        overrides["runs"] = runs
    cfg = dataclasses.replace(config or BenchConfig(), **overrides)
    return BenchRunner(cfg, progress_callback).run()
