"""Rich rendering for capability reports."""

import sys

import readchar
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from capcheck.environment import EnvironmentInfo
from capcheck.harness import (
    DEFAULT_RANK_POLICY,
    CapabilityTestHarness,
    CheckResult,
    CheckStatus,
    RankPolicy,
    Report,
    ReportSummary,
    summarize,
)

STATUS_ICONS = {
    CheckStatus.PASS: "[green]OK[/green]",
    CheckStatus.FAIL: "[red]FAIL[/red]",
    CheckStatus.SKIP: "[dim]SKIP[/dim]",
}


def _rate_style(rate: float) -> str:
    if rate >= 75:
        return "green"
    if rate >= 50:
        return "yellow"
    return "red"


def _build_environment_panel(env: EnvironmentInfo, report: Report) -> Panel:
    info = f"Environment: {report.environment or env.implementation.name}\n"
    info += (
        f"Version:     {env.version}\n"
        f"OS:          {env.os_type.name}/{env.machine}"
    )
    if env.executable:
        info += f"\nExecutable:  {env.executable}"
    return Panel(info, title="Environment")


def _details(check: CheckResult, verbose: bool) -> str:
    details = escape(check.message)
    if verbose and check.missing_aliases:
        missing = ", ".join(sorted(check.missing_aliases))
        details += f" [dim](missing aliases: {missing})[/dim]"
    return details


def build_results_table(results: list[CheckResult], verbose: bool = False) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Check", style="cyan", min_width=20)
    table.add_column("Category", min_width=12)
    table.add_column("Status", justify="center", width=6)
    table.add_column("Details", min_width=20)

    for check in results:
        table.add_row(
            escape(check.name),
            escape(check.category),
            STATUS_ICONS[check.status],
            _details(check, verbose),
        )
    return table


def build_category_table(summary: ReportSummary, keys: dict[str, str] | None = None) -> Panel:
    table = Table(show_header=True, header_style="bold", box=None)
    if keys is not None:
        table.add_column("#", style="cyan", width=3)
    table.add_column("Category", min_width=15)
    table.add_column("Passed", justify="right", width=8)
    table.add_column("Rate", justify="right", width=8)

    key_by_category = {category: key for key, category in (keys or {}).items()}
    for category, stats in summary.categories.items():
        style = _rate_style(stats.rate)
        row = [
            escape(category),
            f"{stats.passed}/{stats.total}",
            f"[{style}]{stats.rate:.1f}%[/{style}]",
        ]
        if keys is not None:
            row.insert(0, escape(f"[{key_by_category.get(category, '-')}]"))
        table.add_row(*row)

    return Panel(table, title="Categories")


def build_summary_panel(summary: ReportSummary) -> Panel:
    if summary.failed == 0:
        headline = "[green bold]ALL CHECKS PASSED[/green bold]"
        border_style = "green"
    else:
        headline = f"[red bold]{summary.failed} CHECKS FAILED[/red bold]"
        border_style = "red"

    stats = f"Passed: {summary.passed} | Failed: {summary.failed}"
    if summary.skipped > 0:
        stats += f" | Skipped: {summary.skipped}"
    if summary.missing_aliases > 0:
        stats += f" | Missing aliases: {summary.missing_aliases}"
    score = f"Score: {summary.rate:.1f}% | Rank: {summary.rank}"
    if summary.cancelled:
        score += " [yellow](partial run)[/yellow]"

    return Panel(f"{headline}\n{stats}\n{score}", title="Summary", border_style=border_style)


def render_report(
    env: EnvironmentInfo,
    report: Report,
    verbose: bool = False,
    policy: RankPolicy = DEFAULT_RANK_POLICY,
    console: Console | None = None,
) -> ReportSummary:
    console = console or Console()
    summary = summarize(report, policy)

    console.print(_build_environment_panel(env, report))
    console.print()
    console.print(build_results_table(list(report.results), verbose=verbose))
    console.print()
    console.print(build_category_table(summary))
    console.print()
    console.print(build_summary_panel(summary))
    return summary


def render_fallback(found: dict[str, bool], console: Console | None = None) -> None:
    """Print a bare existence scan."""
    console = console or Console()
    table = Table(show_header=False, box=None)
    table.add_column("Capability", style="cyan", min_width=20)
    table.add_column("Present", justify="center", width=6)
    for name, present in found.items():
        table.add_row(name, "[green]YES[/green]" if present else "[red]NO[/red]")
    console.print(Panel(table, title="Existence scan", border_style="yellow"))


def category_keys(summary: ReportSummary) -> dict[str, str]:
    """Map single-key shortcuts to categories, in report order."""
    keys = "123456789abcdefghijklmnopstuvwxyz"
    return dict(zip(keys, summary.categories))


def _show_category(report: Report, category: str, console: Console) -> None:
    console.clear()
    results = report.by_category().get(category, [])
    console.print(Panel(f"{len(results)} checks", title=category))
    console.print(build_results_table(results, verbose=True))
    console.print("\n[dim]Press any key to go back...[/dim]")
    readchar.readkey()


def run_interactive(
    env: EnvironmentInfo,
    harness: CapabilityTestHarness,
    timeout: float | None = None,
    policy: RankPolicy = DEFAULT_RANK_POLICY,
) -> None:
    console = Console()
    report = harness.run(timeout)

    while True:
        console.clear()
        summary = summarize(report, policy)
        keys = category_keys(summary)

        console.print(_build_environment_panel(env, report))
        console.print()
        console.print(build_category_table(summary, keys))
        console.print()
        console.print(build_summary_panel(summary))
        console.print()
        console.print(
            Text("Press a category key for details, r to re-run, q to quit", style="dim")
        )

        try:
            key = readchar.readkey()
        except KeyboardInterrupt:
            console.print()
            sys.exit(0)

        if key in ("q", "Q", "\x03"):
            console.print()
            sys.exit(0)

        if key in ("r", "R"):
            console.clear()
            console.print("[bold cyan]Re-running checks...[/bold cyan]")
            report = harness.run(timeout)
        elif key in keys:
            _show_category(report, keys[key], console)
