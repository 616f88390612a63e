import json
import logging
from pathlib import Path

import click

from capcheck.environment import EnvironmentInfo, detect_environment
from capcheck.errors import CapcheckError
from capcheck.harness import CapabilityTestHarness, Report, existence_scan, summarize
from capcheck.log import LOG_LEVELS, setup_logging
from capcheck.suites import DEFAULT_SUITE, SUITES, build_harness, get_suite, load_suite_file
from capcheck.suites.python_runtime import MINIMAL_NAMES

logger = logging.getLogger(__name__)


def _load_harness(suite_name: str, suite_file: Path | None) -> CapabilityTestHarness:
    try:
        suite = load_suite_file(suite_file) if suite_file else get_suite(suite_name)
    except CapcheckError as exc:
        raise click.ClickException(str(exc)) from exc
    logger.info("Using suite %s", suite.name)
    return build_harness(suite)


def _report_as_dict(env: EnvironmentInfo, report: Report) -> dict:
    summary = summarize(report)
    return {
        "environment": {
            "name": report.environment,
            "implementation": env.implementation.name,
            "version": env.version,
            "os_type": env.os_type.name,
            "machine": env.machine,
            "executable": env.executable,
        },
        "checks": [
            {
                "name": c.name,
                "category": c.category,
                "status": c.status.value,
                "message": c.message,
                "timed_out": c.timed_out,
                "missing_aliases": sorted(c.missing_aliases),
            }
            for c in report.results
        ],
        "summary": {
            "total": summary.total,
            "passed": summary.passed,
            "failed": summary.failed,
            "skipped": summary.skipped,
            "rate": round(summary.rate, 1),
            "rank": summary.rank,
            "missing_aliases": summary.missing_aliases,
            "cancelled": summary.cancelled,
            "categories": {
                name: {
                    "total": c.total,
                    "passed": c.passed,
                    "failed": c.failed,
                    "skipped": c.skipped,
                    "rate": round(c.rate, 1),
                }
                for name, c in summary.categories.items()
            },
        },
    }


suite_option = click.option(
    "--suite",
    "suite_name",
    default=DEFAULT_SUITE,
    envvar="CAPCHECK_SUITE",
    show_default=True,
    help="Built-in suite to run",
)
suite_file_option = click.option(
    "--suite-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML suite file (overrides --suite)",
)
timeout_option = click.option(
    "--timeout",
    type=float,
    default=None,
    envvar="CAPCHECK_TIMEOUT",
    help="Per-probe timeout in seconds for async probes",
)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="CAPCHECK_LOG_LEVEL",
    help="Log verbosity (written to stderr)",
)
def main(log_level: str):
    """Fault-isolated capability checks for the running interpreter."""
    setup_logging(log_level)


@main.command()
@suite_option
@suite_file_option
@timeout_option
@click.option("--verbose", "-v", is_flag=True, help="Show missing aliases")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status(
    suite_name: str,
    suite_file: Path | None,
    timeout: float | None,
    verbose: bool,
    as_json: bool,
):
    """Run a suite and show the scored report."""
    from capcheck.ui import render_fallback, render_report

    env = detect_environment()
    harness = _load_harness(suite_name, suite_file)

    try:
        report = harness.run(timeout)
    except Exception:
        logger.exception("Harness run crashed, falling back to existence scan")
        names = [d.name for d in harness.definitions] or list(MINIMAL_NAMES)
        found = existence_scan(harness.namespace, names)
        if as_json:
            click.echo(json.dumps({"fallback": found}, indent=2))
        else:
            render_fallback(found)
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(_report_as_dict(env, report), indent=2))
    else:
        render_report(env, report, verbose=verbose)

    raise SystemExit(min(report.failed, 255))


@main.command()
def suites():
    """List built-in suites."""
    for spec in SUITES.values():
        marker = "*" if spec.name == DEFAULT_SUITE else " "
        click.echo(f"{marker} {spec.name:<16} {spec.description}")


@main.command()
@suite_option
@suite_file_option
@timeout_option
def interactive(suite_name: str, suite_file: Path | None, timeout: float | None):
    """Interactive dashboard; re-run checks and drill into categories."""
    from capcheck.ui import run_interactive

    env = detect_environment()
    run_interactive(env, _load_harness(suite_name, suite_file), timeout=timeout)


if __name__ == "__main__":
    main()
