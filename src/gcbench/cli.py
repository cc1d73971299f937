"""Command-line interface for gcbench.

Subcommands:
    gcbench run       Run the benchmark battery and print the report
    gcbench list      List the benchmarks that would run
    gcbench show      Display a saved run
    gcbench export    Export a saved run to CSV/markdown
    gcbench system    Print the interpreter profile
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from gcbench import __version__
from gcbench.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """gcbench: time the interpreter on a battery of workload scripts."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command("run")
@click.argument("pattern", required=False)
@click.option(
    "--recompile",
    is_flag=True,
    default=False,
    help="Rebuild compiled benchmark files even when up to date.",
)
@click.option(
    "--runs",
    type=int,
    default=None,
    help="Repetitions of the whole battery (default: 3).",
)
@click.option(
    "--bench-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory of benchmark files (default: the bundled battery).",
)
@click.option(
    "--no-compile",
    is_flag=True,
    default=False,
    help="Load benchmarks from source without byte-compiling them first.",
)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML profile with run settings.",
)
@click.option("--name", type=str, default=None, help="Human-readable run name.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also save the run (samples and report) as JSON.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a DEBUG log to this file.",
)
def run_cmd(
    pattern: str | None,
    recompile: bool,
    runs: int | None,
    bench_dir: Path | None,
    no_compile: bool,
    profile_path: Path | None,
    name: str | None,
    output: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run benchmarks whose name matches PATTERN (a regex).

    \b
    Examples:
        gcbench run
        gcbench run '^(fibn|nbody)' --runs 5
        gcbench run --profile nightly.yaml -o results/nightly.json
    """
    from gcbench.config import config_from_profile, load_profile
    from gcbench.display import format_report_block
    from gcbench.results import save_run
    from gcbench.runner import BenchRunner

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "pattern": pattern,
        "recompile": True if recompile else None,
        "compile": False if no_compile else None,
        "runs": runs,
        "bench_dir": str(bench_dir) if bench_dir else None,
        "name": name,
    }

    try:
        if profile_path:
            profile_data = load_profile(profile_path)
            config = config_from_profile(
                profile_data,
                cli_overrides=cli_overrides,
                base_dir=profile_path.parent,
            )
        else:
            config = config_from_profile({}, cli_overrides=cli_overrides)

        runner = BenchRunner(config)
        report = runner.run()
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    click.echo()
    click.echo(format_report_block(report))

    if output:
        save_run(output, report, runner.results)
        click.echo()
        click.echo(f"Results saved to: {output}")


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@main.command("list")
@click.argument("pattern", required=False)
@click.option(
    "--bench-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory of benchmark files (default: the bundled battery).",
)
@click.option(
    "--load",
    is_flag=True,
    default=False,
    help="Load each benchmark and show its calling convention.",
)
def list_cmd(pattern: str | None, bench_dir: Path | None, load: bool) -> None:
    """List benchmarks whose name matches PATTERN."""
    from gcbench.discovery import DEFAULT_BENCH_DIR, discover, list_sources

    directory = bench_dir or DEFAULT_BENCH_DIR
    try:
        if load:
            for name, unit in discover(directory, pattern, compile=False).items():
                click.echo(f"{name:<24s} {unit.convention.value}")
        else:
            for path in list_sources(directory, pattern):
                click.echo(path.stem)
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command("show")
@click.argument("run_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(run_file: Path) -> None:
    """Display a run saved with ``gcbench run --output``."""
    from gcbench.display import format_report_block
    from gcbench.results import load_run

    try:
        report, _ = load_run(run_file)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    click.echo(format_report_block(report))


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("run_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "csv-summary", "markdown"]),
    default="csv",
    help="Export format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
def export(run_file: Path, fmt: str, output: Path | None) -> None:
    """Export a saved run to CSV or Markdown.

    \b
    Examples:
        gcbench export run.json --format csv > samples.csv
        gcbench export run.json --format markdown -o report.md
    """
    from gcbench.export import export_csv, export_csv_summary, export_markdown
    from gcbench.results import load_run

    try:
        report, results = load_run(run_file)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if fmt == "csv":
        text = export_csv(results)
    elif fmt == "csv-summary":
        text = export_csv_summary(report, results)
    else:
        text = export_markdown(report)

    if output:
        output.write_text(text)
        click.echo(f"Exported to {output}")
    else:
        click.echo(text, nl=False)


# ---------------------------------------------------------------------------
# system
# ---------------------------------------------------------------------------


@main.command("system")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def system_cmd(as_json: bool) -> None:
    """Print the profile of the interpreter being benchmarked."""
    from gcbench.system import capture_python_profile, format_python_profile

    profile = capture_python_profile()
    if as_json:
        click.echo(json.dumps(profile.to_dict(), indent=2))
    else:
        click.echo(format_python_profile(profile))
