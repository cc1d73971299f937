"""Benchmark configuration and profile loading.

Handles:
- Loading run profiles from YAML files.
- Merging CLI options over profile values.
- Validating the final configuration before anything is executed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from gcbench.discovery import DEFAULT_BENCH_DIR
from gcbench.logging import get_logger

log = get_logger("config")


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass
class BenchConfig:
    """Resolved configuration for a benchmark run."""

    name: str = ""  # Human-readable name

    # Selection
    pattern: str | None = None  # Regex searched in benchmark names
    bench_dir: Path = field(default_factory=lambda: DEFAULT_BENCH_DIR)

    # Compilation
    compile: bool = True
    recompile: bool = False

    # Iteration control
    runs: int = 3


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: BenchConfig) -> list[ValidationError]:
    """Validate a benchmark configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.runs < 1:
        errors.append(
            ValidationError(
                field="runs",
                message=f"Need at least one run (got {config.runs}).",
            )
        )
    elif config.runs < 2:
        errors.append(
            ValidationError(
                field="runs",
                message="A single run gives no error estimate; err(s) will be 0.",
                severity="warning",
            )
        )

    if not config.bench_dir.is_dir():
        errors.append(
            ValidationError(
                field="bench_dir",
                message=f"Benchmark directory does not exist: {config.bench_dir}",
            )
        )

    if config.pattern:
        try:
            re.compile(config.pattern)
        except re.error as exc:
            errors.append(
                ValidationError(
                    field="pattern",
                    message=f"Invalid regular expression {config.pattern!r}: {exc}",
                )
            )

    if config.recompile and not config.compile:
        errors.append(
            ValidationError(
                field="recompile",
                message="--recompile has no effect when compilation is disabled.",
                severity="warning",
            )
        )

    return errors


def check_config(config: BenchConfig) -> None:
    """Log warnings and raise on fatal validation errors.

    Raises:
        ValueError: Listing every fatal error.
    """
    errors = validate_config(config)
    for w in (e for e in errors if e.severity == "warning"):
        log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in errors if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ValueError("Invalid benchmark configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------

_PROFILE_KEYS = {"name", "pattern", "bench_dir", "compile", "recompile", "runs"}


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a run profile from a YAML file.

    Profile format::

        name: "nightly"
        runs: 5
        pattern: "^(fib|nbody)"
        recompile: true
        bench_dir: "./my-benchmarks"

    Returns:
        The parsed YAML as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a mapping or has unknown keys.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _PROFILE_KEYS)
    if unknown:
        raise ValueError(
            f"Unknown profile key(s): {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(_PROFILE_KEYS))}"
        )
    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
    base_dir: Path | None = None,
) -> BenchConfig:
    """Build a BenchConfig from a parsed profile.

    CLI overrides that are not None take precedence over profile values.
    A relative ``bench_dir`` in the profile is resolved against
    *base_dir* (normally the profile's own directory).
    """
    merged: dict[str, Any] = dict(profile_data)
    for key, value in (cli_overrides or {}).items():
        if value is not None:
            merged[key] = value

    config = BenchConfig(
        name=str(merged.get("name") or ""),
        pattern=merged.get("pattern") or None,
        compile=bool(merged.get("compile", True)),
        recompile=bool(merged.get("recompile", False)),
        runs=int(merged.get("runs", 3)),
    )

    bench_dir = merged.get("bench_dir")
    if bench_dir:
        path = Path(bench_dir)
        from_cli = (cli_overrides or {}).get("bench_dir") is not None
        if not path.is_absolute() and base_dir is not None and not from_cli:
            path = base_dir / path
        config.bench_dir = path

    return config
