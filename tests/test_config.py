"""Tests for gcbench.config: configuration, validation and profiles."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from gcbench.config import (
    BenchConfig,
    check_config,
    config_from_profile,
    load_profile,
    validate_config,
)
from gcbench.discovery import DEFAULT_BENCH_DIR


class TestBenchConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = BenchConfig()
        self.assertEqual(config.runs, 3)
        self.assertIsNone(config.pattern)
        self.assertTrue(config.compile)
        self.assertFalse(config.recompile)
        self.assertEqual(config.bench_dir, DEFAULT_BENCH_DIR)


class TestValidateConfig(unittest.TestCase):
    """Tests for validate_config() / check_config()."""

    def test_default_valid(self) -> None:
        self.assertEqual(validate_config(BenchConfig()), [])

    def test_zero_runs_error(self) -> None:
        errors = validate_config(BenchConfig(runs=0))
        self.assertEqual([(e.field, e.severity) for e in errors], [("runs", "error")])

    def test_single_run_warning(self) -> None:
        errors = validate_config(BenchConfig(runs=1))
        self.assertEqual([(e.field, e.severity) for e in errors], [("runs", "warning")])

    def test_missing_bench_dir(self) -> None:
        errors = validate_config(BenchConfig(bench_dir=Path("/nonexistent/benchmarks")))
        self.assertTrue(any(e.field == "bench_dir" for e in errors))

    def test_invalid_pattern(self) -> None:
        errors = validate_config(BenchConfig(pattern="(unclosed"))
        self.assertTrue(any(e.field == "pattern" and e.severity == "error" for e in errors))

    def test_recompile_without_compile_warns(self) -> None:
        errors = validate_config(BenchConfig(compile=False, recompile=True))
        self.assertEqual([(e.field, e.severity) for e in errors], [("recompile", "warning")])

    def test_check_config_raises_on_errors(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            check_config(BenchConfig(runs=0, pattern="["))
        self.assertIn("runs", str(ctx.exception))
        self.assertIn("pattern", str(ctx.exception))

    def test_check_config_logs_warnings(self) -> None:
        with self.assertLogs("gcbench", level="WARNING") as logs:
            check_config(BenchConfig(runs=1))
        self.assertTrue(any("runs" in line for line in logs.output))


class TestProfiles(unittest.TestCase):
    """Tests for YAML profile loading and merging."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, text: str) -> Path:
        path = self.tmp / "profile.yaml"
        path.write_text(text)
        return path

    def test_load_profile(self) -> None:
        path = self._write("name: nightly\nruns: 5\npattern: '^fib'\nrecompile: true\n")
        data = load_profile(path)
        self.assertEqual(data, {"name": "nightly", "runs": 5, "pattern": "^fib", "recompile": True})

    def test_empty_profile(self) -> None:
        self.assertEqual(load_profile(self._write("")), {})

    def test_missing_profile(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_profile(self.tmp / "missing.yaml")

    def test_non_mapping_rejected(self) -> None:
        with self.assertRaises(ValueError):
            load_profile(self._write("- a\n- b\n"))

    def test_unknown_key_rejected(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            load_profile(self._write("runs: 3\niterations: 5\n"))
        self.assertIn("iterations", str(ctx.exception))

    def test_config_from_profile(self) -> None:
        config = config_from_profile({"name": "n", "runs": 7, "pattern": "x", "compile": False})
        self.assertEqual(config.name, "n")
        self.assertEqual(config.runs, 7)
        self.assertEqual(config.pattern, "x")
        self.assertFalse(config.compile)

    def test_cli_overrides_win(self) -> None:
        config = config_from_profile(
            {"runs": 7, "pattern": "x"},
            cli_overrides={"runs": 2, "pattern": None, "recompile": True},
        )
        self.assertEqual(config.runs, 2)
        self.assertEqual(config.pattern, "x")
        self.assertTrue(config.recompile)

    def test_relative_bench_dir_resolved_against_base(self) -> None:
        config = config_from_profile({"bench_dir": "benches"}, base_dir=self.tmp)
        self.assertEqual(config.bench_dir, self.tmp / "benches")

    def test_cli_bench_dir_not_rebased(self) -> None:
        config = config_from_profile(
            {"bench_dir": "benches"},
            cli_overrides={"bench_dir": "mine"},
            base_dir=self.tmp,
        )
        self.assertEqual(config.bench_dir, Path("mine"))

    def test_no_bench_dir_keeps_default(self) -> None:
        self.assertEqual(config_from_profile({}).bench_dir, DEFAULT_BENCH_DIR)


if __name__ == "__main__":
    unittest.main()
