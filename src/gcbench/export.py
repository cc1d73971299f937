"""Export benchmark results to CSV and Markdown formats.

CSV format: one row per benchmark per recorded run (long format for
pandas/R).  This is the raw data, every single measurement.

CSV summary: one row per benchmark plus the totals row, the same
numbers the outline table shows, unrounded.

Markdown format: a summary table suitable for reports, README files
and issue trackers.
"""

from __future__ import annotations

import csv
import io

from gcbench.display import COLUMNS
from gcbench.results import BenchRow, Report, ResultSet
from gcbench.stats import describe


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(results: ResultSet) -> str:
    """Export raw samples as CSV (long format).

    Columns:
        test, run, elapsed_s, gc_count, gc_elapsed_s, non_gc_s
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["test", "run", "elapsed_s", "gc_count", "gc_elapsed_s", "non_gc_s"])

    for name, samples in results.samples.items():
        for i, s in enumerate(samples):
            writer.writerow(
                [
                    name,
                    i + 1,
                    f"{s.elapsed_s:.6f}",
                    s.gc_count,
                    f"{s.gc_elapsed_s:.6f}",
                    f"{s.non_gc_s:.6f}",
                ]
            )

    return output.getvalue()


def export_csv_summary(report: Report, results: ResultSet | None = None) -> str:
    """Export per-benchmark aggregates as CSV.

    When *results* is given, median/min/max of the elapsed times are
    added for each benchmark.
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(
        [
            "test",
            "runs",
            "non_gc_s",
            "gc_s",
            "gcs",
            "total_s",
            "err_s",
            "median_s",
            "min_s",
            "max_s",
        ]
    )

    for row in [*report.rows, report.totals]:
        median = minimum = maximum = ""
        if results is not None and row.name in results.samples:
            stats = describe([s.elapsed_s for s in results.samples[row.name]])
            median = f"{stats.median:.6f}"
            minimum = f"{stats.min:.6f}"
            maximum = f"{stats.max:.6f}"
        writer.writerow(
            [
                row.name,
                row.runs,
                f"{row.non_gc_s:.6f}",
                f"{row.gc_s:.6f}",
                f"{row.gcs:.2f}",
                f"{row.total_s:.6f}",
                f"{row.err_s:.6f}",
                median,
                minimum,
                maximum,
            ]
        )

    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def _md_cells(row: BenchRow, bold: bool = False) -> list[str]:
    cells = [
        row.name,
        f"{row.non_gc_s:.2f}",
        f"{row.gc_s:.2f}",
        str(int(row.gcs)),
        f"{row.total_s:.2f}",
        f"{row.err_s:.2f}",
    ]
    if bold:
        cells = [f"**{c}**" for c in cells]
    return cells


def export_markdown(report: Report) -> str:
    """Export the report as a Markdown document."""
    lines: list[str] = []
    title = report.name or "Benchmark results"
    lines.append(f"# {title}")
    lines.append("")
    if report.python.version:
        lines.append(
            f"Python {report.python.version} ({report.python.implementation}), "
            f"{report.runs} run(s)."
        )
    else:
        lines.append(f"{report.runs} run(s).")
    lines.append("")

    lines.append("| " + " | ".join(COLUMNS) + " |")
    lines.append("|" + "|".join(["---"] + ["---:"] * (len(COLUMNS) - 1)) + "|")
    for row in report.rows:
        lines.append("| " + " | ".join(_md_cells(row)) + " |")
    lines.append("| " + " | ".join(_md_cells(report.totals, bold=True)) + " |")

    if report.failures:
        lines.append("")
        lines.append("Failed invocations:")
        lines.append("")
        for name, count in sorted(report.failures.items()):
            lines.append(f"- {name}: {count}")

    lines.append("")
    return "\n".join(lines)
