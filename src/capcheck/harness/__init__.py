"""Capability test harness."""

from .resolve import existence_scan, identify_environment, resolve_identifier
from .runner import CapabilityTestHarness
from .summary import DEFAULT_RANK_POLICY, RankPolicy, RankTier, success_rate, summarize
from .types import (
    CheckDefinition,
    CheckResult,
    CheckStatus,
    Failed,
    Passed,
    Report,
    ReportSummary,
    Skipped,
    TimedOut,
)

__all__ = [
    "CapabilityTestHarness",
    "CheckDefinition",
    "CheckResult",
    "CheckStatus",
    "DEFAULT_RANK_POLICY",
    "Failed",
    "Passed",
    "RankPolicy",
    "RankTier",
    "Report",
    "ReportSummary",
    "Skipped",
    "TimedOut",
    "existence_scan",
    "identify_environment",
    "resolve_identifier",
    "success_rate",
    "summarize",
]
