"""Capability check types."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

DEFAULT_CATEGORY = "Uncategorized"

Probe = Callable[[], Union[Any, Awaitable[Any]]]


class CheckStatus(Enum):
    """Status of a capability check."""

    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


@dataclass(frozen=True)
class Passed:
    """Capability present and its probe, if any, succeeded."""

    detail: str | None = None

    status = CheckStatus.PASS


@dataclass(frozen=True)
class Failed:
    """Capability present but its probe failed or raised."""

    reason: str

    status = CheckStatus.FAIL


@dataclass(frozen=True)
class TimedOut(Failed):
    """Probe did not finish within the caller's timeout."""

    reason: str = "timeout"


@dataclass(frozen=True)
class Skipped:
    """Capability identifier did not resolve."""

    reason: str

    status = CheckStatus.SKIP


Outcome = Union[Passed, Failed, Skipped]


@dataclass(frozen=True)
class CheckDefinition:
    """A registered check.

    ``name`` doubles as the dotted path resolved against the namespace.
    Without a ``probe``, resolving the name is enough to pass.
    """

    name: str
    category: str = DEFAULT_CATEGORY
    aliases: tuple[str, ...] = ()
    probe: Probe | None = None


@dataclass(frozen=True)
class CheckResult:
    """Result of a single capability check."""

    name: str
    category: str
    outcome: Outcome
    missing_aliases: frozenset[str] = frozenset()

    @property
    def status(self) -> CheckStatus:
        return self.outcome.status

    @property
    def message(self) -> str:
        if isinstance(self.outcome, Passed):
            return self.outcome.detail or ""
        return self.outcome.reason

    @property
    def timed_out(self) -> bool:
        return isinstance(self.outcome, TimedOut)


@dataclass(frozen=True)
class Report:
    """Results of one harness run, in registration order.

    Counts are derived from ``results`` on every access.
    """

    results: tuple[CheckResult, ...] = ()
    cancelled: bool = False
    environment: str | None = None

    def _count(self, status: CheckStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return self._count(CheckStatus.PASS)

    @property
    def failed(self) -> int:
        return self._count(CheckStatus.FAIL)

    @property
    def skipped(self) -> int:
        return self._count(CheckStatus.SKIP)

    @property
    def missing_alias_count(self) -> int:
        return sum(len(r.missing_aliases) for r in self.results)

    def by_category(self) -> dict[str, list[CheckResult]]:
        grouped: dict[str, list[CheckResult]] = {}
        for result in self.results:
            grouped.setdefault(result.category, []).append(result)
        return grouped

    def missing(self) -> list[CheckResult]:
        """Results that did not pass."""
        return [r for r in self.results if r.status is not CheckStatus.PASS]


@dataclass(frozen=True)
class CategorySummary:
    """Counts and success rate for one category."""

    category: str
    total: int
    passed: int
    failed: int
    skipped: int
    rate: float


@dataclass(frozen=True)
class ReportSummary:
    """Scored view of a report."""

    total: int
    passed: int
    failed: int
    skipped: int
    rate: float
    rank: str
    missing_aliases: int
    categories: dict[str, CategorySummary] = field(default_factory=dict)
    cancelled: bool = False
