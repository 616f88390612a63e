"""Scoring and ranking of harness reports."""

from dataclasses import dataclass

from .types import CategorySummary, CheckResult, CheckStatus, Report, ReportSummary


@dataclass(frozen=True)
class RankTier:
    """One rank threshold, inclusive."""

    minimum: float
    label: str


@dataclass(frozen=True)
class RankPolicy:
    """Ordered rank thresholds; a rate at or above ``minimum`` earns the tier."""

    tiers: tuple[RankTier, ...]
    fallback: str = "Lacking"

    def rank(self, rate: float) -> str:
        for tier in sorted(self.tiers, key=lambda t: t.minimum, reverse=True):
            if rate >= tier.minimum:
                return tier.label
        return self.fallback

    @classmethod
    def from_table(cls, table: dict[float, str], fallback: str = "Lacking") -> "RankPolicy":
        return cls(
            tiers=tuple(RankTier(minimum, label) for minimum, label in table.items()),
            fallback=fallback,
        )


DEFAULT_RANK_POLICY = RankPolicy.from_table(
    {
        95: "Top tier",
        85: "Excellent",
        75: "Very good",
        65: "Good",
        50: "Average",
        35: "Below average",
    }
)


def success_rate(passed: int, failed: int) -> float:
    """Percentage of decided checks that passed. Zero when none decided."""
    decided = passed + failed
    if decided == 0:
        return 0.0
    return passed / decided * 100


def _summarize_category(category: str, results: list[CheckResult]) -> CategorySummary:
    passed = sum(1 for r in results if r.status is CheckStatus.PASS)
    failed = sum(1 for r in results if r.status is CheckStatus.FAIL)
    return CategorySummary(
        category=category,
        total=len(results),
        passed=passed,
        failed=failed,
        skipped=len(results) - passed - failed,
        rate=success_rate(passed, failed),
    )


def summarize(report: Report, policy: RankPolicy = DEFAULT_RANK_POLICY) -> ReportSummary:
    """Compute counts, success rate, per-category breakdown and rank."""
    passed = report.passed
    failed = report.failed
    rate = success_rate(passed, failed)
    return ReportSummary(
        total=report.total,
        passed=passed,
        failed=failed,
        skipped=report.skipped,
        rate=rate,
        rank=policy.rank(rate),
        missing_aliases=report.missing_alias_count,
        categories={
            category: _summarize_category(category, results)
            for category, results in report.by_category().items()
        },
        cancelled=report.cancelled,
    )
