"""Terminal display formatting for benchmark reports.

Renders a Report as an outline-style (org-mode) table::

    | test  | non-gc (s) | gc (s) | gcs | total (s) | err (s) |
    |-------+------------+--------+-----+-----------+---------|
    | fibn  |       1.23 |   0.00 |   0 |      1.23 |    0.01 |
    |-------+------------+--------+-----+-----------+---------|
    | total |       1.23 |   0.00 |   0 |      1.23 |    0.01 |

No external dependencies.
"""

from __future__ import annotations

import math
from typing import TextIO

from gcbench.results import BenchRow, Report
from gcbench.system import format_python_profile

RESULTS_BUFFER = "gcbench-results"

COLUMNS = ["test", "non-gc (s)", "gc (s)", "gcs", "total (s)", "err (s)"]


# ---------------------------------------------------------------------------
# Table formatting utilities
# ---------------------------------------------------------------------------


def _format_seconds(seconds: float, precision: int = 2) -> str:
    if math.isnan(seconds):
        return "N/A"
    return f"{seconds:.{precision}f}"


def _row_cells(row: BenchRow, precision: int) -> list[str]:
    return [
        row.name,
        _format_seconds(row.non_gc_s, precision),
        _format_seconds(row.gc_s, precision),
        str(int(row.gcs)),
        _format_seconds(row.total_s, precision),
        _format_seconds(row.err_s, precision),
    ]


def format_outline_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    footer: list[list[str]] | None = None,
) -> str:
    """Format rows as an org-mode table.

    The first column is left-aligned, the others right-aligned.  Rows
    in *footer* are set off from the body by a rule line.
    """
    footer = footer or []
    ncols = len(headers)
    widths = [len(h) for h in headers]
    for row in rows + footer:
        for ci, cell in enumerate(row[:ncols]):
            widths[ci] = max(widths[ci], len(cell))

    def _line(cells: list[str]) -> str:
        padded = list(cells) + [""] * (ncols - len(cells))
        parts = [
            padded[i].ljust(widths[i]) if i == 0 else padded[i].rjust(widths[i])
            for i in range(ncols)
        ]
        return "| " + " | ".join(parts) + " |"

    rule = "|" + "+".join("-" * (w + 2) for w in widths) + "|"

    lines = [_line(headers), rule]
    lines.extend(_line(r) for r in rows)
    if footer:
        lines.append(rule)
        lines.extend(_line(r) for r in footer)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Report display
# ---------------------------------------------------------------------------


def format_report(report: Report, *, precision: int = 2) -> str:
    """Format the results table of *report*."""
    return format_outline_table(
        COLUMNS,
        [_row_cells(r, precision) for r in report.rows],
        footer=[_row_cells(report.totals, precision)],
    )


def format_report_block(report: Report, *, precision: int = 2) -> str:
    """Format *report* with its title and interpreter header."""
    title = f"* {RESULTS_BUFFER}"
    if report.name:
        title += f": {report.name}"

    lines = [title, ""]
    if report.python.version:
        lines.append(format_python_profile(report.python))
    lines.append(f"Runs:     {report.runs}")
    if report.start_time:
        lines.append(f"Started:  {report.start_time}")
    if report.failures:
        failed = ", ".join(f"{name} ({count})" for name, count in sorted(report.failures.items()))
        lines.append(f"Failed:   {failed}")
    lines.append("")
    lines.append(format_report(report, precision=precision))
    return "\n".join(lines)


def write_report(report: Report, stream: TextIO, *, precision: int = 2) -> None:
    """Write the titled report to *stream*."""
    stream.write(format_report_block(report, precision=precision))
    stream.write("\n")
