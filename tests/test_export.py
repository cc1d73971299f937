"""Tests for gcbench.export: CSV and Markdown exports."""

from __future__ import annotations

import csv
import io
import unittest

from bench_test_helpers import make_report, make_result_set

from gcbench.export import export_csv, export_csv_summary, export_markdown


class TestExportCsv(unittest.TestCase):
    """Tests for the raw-sample CSV export."""

    def test_one_row_per_sample(self) -> None:
        rs = make_result_set({"a": [1.0, 2.0], "b": [0.5]}, gc_count=1, gc_elapsed=0.25)
        rows = list(csv.reader(io.StringIO(export_csv(rs))))
        self.assertEqual(
            rows[0], ["test", "run", "elapsed_s", "gc_count", "gc_elapsed_s", "non_gc_s"]
        )
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[1], ["a", "1", "1.000000", "1", "0.250000", "0.750000"])
        self.assertEqual(rows[2][:2], ["a", "2"])
        self.assertEqual(rows[3][:2], ["b", "1"])

    def test_empty(self) -> None:
        rows = list(csv.reader(io.StringIO(export_csv(make_result_set({})))))
        self.assertEqual(len(rows), 1)


class TestExportCsvSummary(unittest.TestCase):
    """Tests for the per-benchmark CSV summary."""

    def test_rows_plus_total(self) -> None:
        report = make_report({"a": [1.0, 3.0], "b": [2.0, 2.0]})
        rows = list(csv.DictReader(io.StringIO(export_csv_summary(report))))
        self.assertEqual([r["test"] for r in rows], ["a", "b", "total"])
        self.assertEqual(rows[0]["total_s"], "2.000000")
        self.assertEqual(rows[0]["median_s"], "")

    def test_with_samples_adds_distribution(self) -> None:
        benchmarks = {"a": [1.0, 3.0, 2.0]}
        report = make_report(benchmarks)
        rs = make_result_set(benchmarks)
        rows = list(csv.DictReader(io.StringIO(export_csv_summary(report, rs))))
        self.assertEqual(rows[0]["median_s"], "2.000000")
        self.assertEqual(rows[0]["min_s"], "1.000000")
        self.assertEqual(rows[0]["max_s"], "3.000000")
        self.assertEqual(rows[1]["median_s"], "")


class TestExportMarkdown(unittest.TestCase):
    """Tests for the Markdown report."""

    def test_table(self) -> None:
        md = export_markdown(make_report({"fibn": [1.0, 1.0]}, name="nightly"))
        self.assertIn("# nightly", md)
        self.assertIn("Python 3.13.1 (CPython), 3 run(s).", md)
        self.assertIn("| test | non-gc (s) | gc (s) | gcs | total (s) | err (s) |", md)
        self.assertIn("|---|---:|---:|---:|---:|---:|", md)
        self.assertIn("| fibn | 1.00 | 0.00 | 0 | 1.00 | 0.00 |", md)
        self.assertIn("| **total** |", md)

    def test_failures_listed(self) -> None:
        report = make_report({"fibn": [1.0]})
        report.failures = {"broken": 2}
        self.assertIn("- broken: 2", export_markdown(report))


if __name__ == "__main__":
    unittest.main()
