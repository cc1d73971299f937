"""Tests for gcbench.cli: the click command group."""

from __future__ import annotations

import json
import logging
import tempfile
import unittest
from pathlib import Path

from bench_test_helpers import FAILING_BENCH, MEASURED_BENCH, SIMPLE_BENCH, write_bench
from click.testing import CliRunner, Result

from gcbench import __version__
from gcbench.cli import main


class TestHelp(unittest.TestCase):
    """Tests for the group and subcommand help."""

    def test_group_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        self.assertEqual(result.exit_code, 0)
        for command in ("run", "list", "show", "export", "system"):
            self.assertIn(command, result.output)

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_run_help(self) -> None:
        result = CliRunner().invoke(main, ["run", "--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("--recompile", result.output)
        self.assertIn("--runs", result.output)
        self.assertIn("PATTERN", result.output)


class _CliBenchDir(unittest.TestCase):
    """Base class with a small benchmark directory."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.bench_dir = self.tmp / "benches"
        self.bench_dir.mkdir()
        write_bench(self.bench_dir, "simple", SIMPLE_BENCH)
        write_bench(self.bench_dir, "sorter", MEASURED_BENCH)
        write_bench(self.bench_dir, "explodes", FAILING_BENCH)

    def tearDown(self) -> None:
        logger = logging.getLogger("gcbench")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        self._tmp.cleanup()

    def _run(self, *args: str) -> Result:
        return CliRunner().invoke(
            main, ["run", "--bench-dir", str(self.bench_dir), "-q", *args]
        )


class TestRun(_CliBenchDir):
    """Tests for ``gcbench run``."""

    def test_prints_report(self) -> None:
        result = self._run("--runs", "2")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("| test", result.output)
        self.assertIn("| simple", result.output)
        self.assertIn("| sorter", result.output)
        self.assertIn("| total", result.output)
        self.assertNotIn("| explodes", result.output)
        self.assertIn("explodes (2)", result.output)

    def test_pattern(self) -> None:
        result = self._run("--runs", "1", "^simple")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("| simple", result.output)
        self.assertNotIn("| sorter", result.output)

    def test_recompile_and_no_compile(self) -> None:
        self.assertEqual(self._run("--runs", "1", "--recompile", "simple").exit_code, 0)
        self.assertEqual(self._run("--runs", "1", "--no-compile", "simple").exit_code, 0)

    def test_zero_runs_is_error(self) -> None:
        result = self._run("--runs", "0")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error", result.output)

    def test_invalid_pattern_is_error(self) -> None:
        result = self._run("([")
        self.assertEqual(result.exit_code, 1)

    def test_missing_bench_dir_is_error(self) -> None:
        result = CliRunner().invoke(
            main, ["run", "--bench-dir", str(self.tmp / "missing"), "-q"]
        )
        self.assertEqual(result.exit_code, 1)

    def test_profile(self) -> None:
        profile = self.tmp / "profile.yaml"
        profile.write_text("name: from-profile\nruns: 1\npattern: sorter\nbench_dir: benches\n")
        result = CliRunner().invoke(main, ["run", "--profile", str(profile), "-q"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("from-profile", result.output)
        self.assertIn("| sorter", result.output)
        self.assertNotIn("| simple", result.output)

    def test_bad_profile_is_error(self) -> None:
        profile = self.tmp / "profile.yaml"
        profile.write_text("bogus: 1\n")
        result = CliRunner().invoke(main, ["run", "--profile", str(profile), "-q"])
        self.assertEqual(result.exit_code, 1)

    def test_log_file(self) -> None:
        log_file = self.tmp / "gcbench.log"
        result = self._run("--runs", "1", "simple", "--log-file", str(log_file))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Discovered 1 benchmarks", log_file.read_text())


class TestSavedRuns(_CliBenchDir):
    """Tests for ``--output``, ``show`` and ``export``."""

    def setUp(self) -> None:
        super().setUp()
        self.run_file = self.tmp / "out" / "run.json"
        result = self._run("--runs", "2", "--name", "saved", "-o", str(self.run_file))
        self.assertEqual(result.exit_code, 0, result.output)

    def test_output_written(self) -> None:
        data = json.loads(self.run_file.read_text())
        self.assertEqual(data["report"]["name"], "saved")
        self.assertEqual(len(data["samples"]["samples"]["simple"]), 2)
        self.assertEqual(data["samples"]["failures"], {"explodes": 2})

    def test_show(self) -> None:
        result = CliRunner().invoke(main, ["show", str(self.run_file)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("gcbench-results: saved", result.output)
        self.assertIn("| simple", result.output)

    def test_show_rejects_other_json(self) -> None:
        other = self.tmp / "other.json"
        other.write_text("{}")
        result = CliRunner().invoke(main, ["show", str(other)])
        self.assertEqual(result.exit_code, 1)

    def test_show_rejects_corrupt_samples(self) -> None:
        data = json.loads(self.run_file.read_text())
        data["samples"]["samples"]["simple"][0].pop("elapsed_s")
        self.run_file.write_text(json.dumps(data))
        for args in (["show"], ["export", "--format", "markdown"]):
            result = CliRunner().invoke(main, [*args, str(self.run_file)])
            self.assertEqual(result.exit_code, 1)
            self.assertIn("not a saved gcbench run", result.output)

    def test_export_csv(self) -> None:
        result = CliRunner().invoke(main, ["export", str(self.run_file)])
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.strip().splitlines()
        self.assertTrue(lines[0].startswith("test,run,elapsed_s"))
        self.assertEqual(len(lines), 5)

    def test_export_markdown_to_file(self) -> None:
        target = self.tmp / "report.md"
        result = CliRunner().invoke(
            main, ["export", str(self.run_file), "--format", "markdown", "-o", str(target)]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("# saved", target.read_text())

    def test_export_csv_summary(self) -> None:
        result = CliRunner().invoke(
            main, ["export", str(self.run_file), "--format", "csv-summary"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("total,", result.output)


class TestList(_CliBenchDir):
    """Tests for ``gcbench list``."""

    def test_lists_names(self) -> None:
        result = CliRunner().invoke(main, ["list", "--bench-dir", str(self.bench_dir)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.split(), ["explodes", "simple", "sorter"])

    def test_pattern_and_load(self) -> None:
        result = CliRunner().invoke(
            main, ["list", "s", "--bench-dir", str(self.bench_dir), "--load"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("simple", result.output)
        self.assertIn("measured", result.output)

    def test_bundled_battery(self) -> None:
        result = CliRunner().invoke(main, ["list"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("fibn", result.output.split())


class TestSystem(unittest.TestCase):
    """Tests for ``gcbench system``."""

    def test_text(self) -> None:
        result = CliRunner().invoke(main, ["system"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Python:", result.output)

    def test_json(self) -> None:
        result = CliRunner().invoke(main, ["system", "--json"])
        self.assertEqual(result.exit_code, 0)
        data = json.loads(result.output)
        self.assertIn("version", data)
        self.assertIn("implementation", data)


if __name__ == "__main__":
    unittest.main()
