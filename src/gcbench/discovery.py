"""Benchmark discovery, compilation and loading.

Handles:
- Listing benchmark source files in a directory, optionally filtered by
  a regular expression on the benchmark name (the file stem).
- Byte-compiling each file ahead of time into ``__pycache__``.
- Loading the compiled artifact as an isolated module and looking up
  its entry point by naming convention.
- Classifying the entry point's calling convention.

Every benchmark file ``<name>.py`` must define ``<name>_entry``, taking
either no argument or a single measuring function.
"""

from __future__ import annotations

import enum
import importlib.machinery
import importlib.util
import inspect
import py_compile
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from gcbench.logging import get_logger

log = get_logger("discovery")

DEFAULT_BENCH_DIR = Path(__file__).resolve().parent / "benchmarks"
SOURCE_SUFFIX = ".py"
ENTRY_SUFFIX = "_entry"


class BenchmarkLoadError(Exception):
    """A benchmark file could not be turned into a runnable unit."""


# ---------------------------------------------------------------------------
# BenchmarkUnit
# ---------------------------------------------------------------------------


class Convention(enum.Enum):
    """How an entry point expects to be called."""

    SIMPLE = "simple"  # entry() -- timed by the runner
    MEASURED = "measured"  # entry(measure) -- times its own region


@dataclass
class BenchmarkUnit:
    """A loaded, runnable benchmark."""

    name: str
    entry: Callable[..., Any]
    convention: Convention
    source: Path | None = None


def entry_point_name(name: str) -> str:
    """Return the entry point a benchmark called *name* must define."""
    return name.replace("-", "_") + ENTRY_SUFFIX


def classify_entry(entry: Callable[..., Any]) -> Convention:
    """Determine the calling convention of *entry*.

    The one-argument form is tried first; an arity mismatch falls back
    to the zero-argument form.

    Raises:
        BenchmarkLoadError: If *entry* accepts neither form.
    """
    try:
        sig = inspect.signature(entry)
    except (TypeError, ValueError):
        # No introspectable signature (some builtins); assume zero-arg.
        return Convention.SIMPLE

    try:
        sig.bind(None)
        return Convention.MEASURED
    except TypeError:
        pass
    try:
        sig.bind()
        return Convention.SIMPLE
    except TypeError as exc:
        raise BenchmarkLoadError(
            f"entry point {getattr(entry, '__name__', entry)!r} must take "
            f"zero arguments or one measuring function"
        ) from exc


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def list_sources(bench_dir: Path, pattern: str | None = None) -> list[Path]:
    """List benchmark source files in *bench_dir*.

    Files whose name starts with ``_`` are helpers, not benchmarks.

    Args:
        bench_dir: Directory holding the benchmark files.
        pattern: Regular expression searched in each file stem (no ``.py``).

    Returns:
        Matching source paths, sorted by name.

    Raises:
        FileNotFoundError: If *bench_dir* does not exist.
        ValueError: If *pattern* is not a valid regular expression.
    """
    if not bench_dir.is_dir():
        raise FileNotFoundError(f"Benchmark directory not found: {bench_dir}")

    regex = None
    if pattern:
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"Invalid benchmark pattern {pattern!r}: {exc}") from exc

    sources: list[Path] = []
    for path in sorted(bench_dir.glob(f"*{SOURCE_SUFFIX}")):
        if path.name.startswith("_") or not path.is_file():
            continue
        if regex is not None and not regex.search(path.stem):
            continue
        sources.append(path)
    return sources


def compile_source(source: Path, *, force: bool = False) -> Path:
    """Byte-compile *source* into its ``__pycache__`` artifact.

    An artifact at least as new as the source is reused unless *force*
    is set.

    Returns:
        Path to the compiled file.

    Raises:
        py_compile.PyCompileError: On syntax errors.
        OSError: If the artifact cannot be written.
    """
    cached = Path(importlib.util.cache_from_source(str(source)))
    if (
        not force
        and cached.exists()
        and cached.stat().st_mtime >= source.stat().st_mtime
    ):
        log.debug("Up to date: %s", cached)
        return cached

    log.debug("Compiling %s", source)
    py_compile.compile(str(source), cfile=str(cached), doraise=True)
    return cached


def _module_name(name: str) -> str:
    return "gcbench_benchmark_" + re.sub(r"\W", "_", name)


def load_unit(source: Path, *, compiled: Path | None = None) -> BenchmarkUnit:
    """Load a benchmark file and return its unit.

    Args:
        source: The benchmark source file.
        compiled: Compiled artifact to execute instead of the source.

    Raises:
        BenchmarkLoadError: If the entry point is missing or unusable.
        Exception: Anything raised while executing the module body.
    """
    name = source.stem
    mod_name = _module_name(name)

    if compiled is not None:
        loader: Any = importlib.machinery.SourcelessFileLoader(mod_name, str(compiled))
        spec = importlib.util.spec_from_file_location(mod_name, str(compiled), loader=loader)
    else:
        spec = importlib.util.spec_from_file_location(mod_name, str(source))
    if spec is None or spec.loader is None:
        raise BenchmarkLoadError(f"cannot create a module spec for {source}")

    module = importlib.util.module_from_spec(spec)
    # Registered before execution so dataclasses and pickling inside
    # benchmark modules can resolve their own module.
    sys.modules[mod_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(mod_name, None)
        raise

    entry_name = entry_point_name(name)
    entry = getattr(module, entry_name, None)
    if entry is None or not callable(entry):
        raise BenchmarkLoadError(f"{source.name} does not define {entry_name}()")

    return BenchmarkUnit(
        name=name,
        entry=entry,
        convention=classify_entry(entry),
        source=source,
    )


def discover(
    bench_dir: Path = DEFAULT_BENCH_DIR,
    pattern: str | None = None,
    *,
    compile: bool = True,
    recompile: bool = False,
) -> dict[str, BenchmarkUnit]:
    """Build the benchmark registry for *bench_dir*.

    Compile errors and loading failures are logged per file and the file
    is skipped; they never abort discovery.  When the compiled artifact
    cannot be written the file is loaded from source instead.

    Args:
        bench_dir: Directory holding the benchmark files.
        pattern: Regular expression filter on file names.
        compile: Byte-compile before loading.
        recompile: Rebuild compiled artifacts even when up to date.

    Returns:
        Mapping of benchmark name to unit, in file name order.
    """
    registry: dict[str, BenchmarkUnit] = {}

    for source in list_sources(bench_dir, pattern):
        compiled: Path | None = None
        if compile:
            try:
                compiled = compile_source(source, force=recompile)
            except py_compile.PyCompileError as exc:
                log.error("Failed to compile %s: %s", source.name, exc)
                continue
            except OSError as exc:
                log.warning("Cannot write compiled %s, loading source: %s", source.name, exc)

        try:
            unit = load_unit(source, compiled=compiled)
        except BenchmarkLoadError as exc:
            log.warning("Skipping %s: %s", source.name, exc)
            continue
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to load %s: %s", source.name, exc)
            log.debug("Load failure for %s", source.name, exc_info=True)
            continue

        registry[unit.name] = unit
        log.debug("Loaded %s (%s)", unit.name, unit.convention.value)

    log.info("Discovered %d benchmarks in %s", len(registry), bench_dir)
    return registry
