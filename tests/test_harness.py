"""Tests for the capability test harness."""

from __future__ import annotations

import asyncio
import sys
from types import SimpleNamespace

from capcheck.harness import runner as runner_module
from capcheck.harness import (
    CapabilityTestHarness,
    CheckStatus,
    Failed,
    Passed,
    Skipped,
    summarize,
)


def _raise(exc: Exception):
    raise exc


def _harness(**capabilities) -> CapabilityTestHarness:
    return CapabilityTestHarness(dict(capabilities))


def test_end_to_end_alpha_beta_gamma() -> None:
    harness = _harness(alpha=object(), beta=object())
    harness.register("alpha")
    harness.register("beta", probe=lambda: False)
    harness.register("gamma")

    report = harness.run()
    summary = summarize(report)

    assert [r.name for r in report.results] == ["alpha", "beta", "gamma"]
    assert report.results[0].outcome == Passed(None)
    assert isinstance(report.results[1].outcome, Failed)
    assert report.results[2].outcome == Skipped("identifier not found")
    assert (summary.total, summary.passed, summary.failed, summary.skipped) == (3, 1, 1, 1)
    assert summary.rate == 50.0


def test_register_does_not_call_probe() -> None:
    calls: list[str] = []
    harness = _harness(x=1)
    harness.register("x", probe=lambda: calls.append("x"))

    assert calls == []
    assert len(harness) == 1


def test_reregistering_overwrites_and_keeps_position() -> None:
    harness = _harness(x=1, y=2)
    harness.register("x", probe=lambda: "from A")
    harness.register("y")
    harness.register("x", probe=lambda: "from B")

    report = harness.run()

    assert [r.name for r in report.results] == ["x", "y"]
    assert report.results[0].outcome == Passed("from B")


def test_probe_string_becomes_detail() -> None:
    harness = _harness(x=1)
    harness.register("x", probe=lambda: "Exists: 3 items")

    result = harness.run().results[0]

    assert result.status is CheckStatus.PASS
    assert result.message == "Exists: 3 items"


def test_probe_returning_truthy_non_string_has_no_detail() -> None:
    harness = _harness(x=1)
    harness.register("x", probe=lambda: 42)

    assert harness.run().results[0].outcome == Passed(None)


def test_probe_returning_none_fails() -> None:
    harness = _harness(x=1)
    harness.register("x", probe=lambda: None)

    result = harness.run().results[0]

    assert result.status is CheckStatus.FAIL
    assert "no result" in result.message


def test_probe_exception_is_isolated() -> None:
    harness = _harness(a=1, b=1, c=1)
    harness.register("a", probe=lambda: _raise(RuntimeError("boom")))
    harness.register("b", probe=lambda: _raise(ZeroDivisionError()))
    harness.register("c", probe=lambda: True)

    report = harness.run()

    assert report.total == 3
    assert report.results[0].outcome == Failed("RuntimeError: boom")
    assert report.results[1].outcome == Failed("ZeroDivisionError")
    assert report.results[2].status is CheckStatus.PASS


def test_probe_not_called_when_identifier_missing() -> None:
    calls: list[str] = []
    harness = _harness()
    harness.register("absent", probe=lambda: calls.append("ran"))

    result = harness.run().results[0]

    assert calls == []
    assert result.status is CheckStatus.SKIP


def test_alias_independent_of_failed_primary() -> None:
    harness = _harness(primary=1, alternate=1)
    harness.register("primary", aliases=["alternate"], probe=lambda: False)

    result = harness.run().results[0]

    assert result.status is CheckStatus.FAIL
    assert result.missing_aliases == frozenset()


def test_missing_aliases_reported_on_skipped_check() -> None:
    harness = _harness(present=1)
    harness.register("absent", aliases=["present", "gone", "also.gone"])

    result = harness.run().results[0]

    assert result.status is CheckStatus.SKIP
    assert result.missing_aliases == frozenset({"gone", "also.gone"})


def test_dotted_names_resolve_through_attributes_and_mappings() -> None:
    namespace = {"crypt": SimpleNamespace(base64encode=lambda s: s, tables={"sha": 1})}
    harness = CapabilityTestHarness(namespace)
    harness.register("crypt.base64encode")
    harness.register("crypt.tables.sha")
    harness.register("crypt.missing")

    statuses = [r.status for r in harness.run().results]

    assert statuses == [CheckStatus.PASS, CheckStatus.PASS, CheckStatus.SKIP]


def test_default_category() -> None:
    harness = _harness(x=1)
    harness.register("x")
    harness.register("y", category="Debug")

    report = harness.run()

    assert [r.category for r in report.results] == ["Uncategorized", "Debug"]


def test_run_is_repeatable() -> None:
    harness = _harness(a=1, b=1)
    harness.register("a", probe=lambda: True)
    harness.register("b", probe=lambda: False)
    harness.register("c")

    first = [r.status for r in harness.run().results]
    second = [r.status for r in harness.run().results]

    assert first == second


def test_keyboard_interrupt_returns_partial_report() -> None:
    def interrupt():
        raise KeyboardInterrupt

    harness = _harness(a=1, b=1, c=1)
    harness.register("a")
    harness.register("b", probe=interrupt)
    harness.register("c")

    report = harness.run()

    assert report.cancelled is True
    assert [r.name for r in report.results] == ["a"]


def test_probe_side_effects_do_not_interleave() -> None:
    events: list[str] = []

    def probe(name: str):
        def run() -> bool:
            events.append(f"start {name}")
            events.append(f"end {name}")
            return True

        return run

    harness = _harness(a=1, b=1)
    harness.register("a", probe=probe("a"))
    harness.register("b", probe=probe("b"))
    harness.run()

    assert events == ["start a", "end a", "start b", "end b"]


def test_environment_identified_from_candidates() -> None:
    namespace = {"identifyexecutor": lambda: "", "getexecutorname": lambda: "Fake 1.0"}
    harness = CapabilityTestHarness(
        namespace, environment_candidates=("identifyexecutor", "getexecutorname")
    )

    assert harness.run().environment == "Fake 1.0"


def test_probe_calling_sys_exit_is_recorded_as_failure() -> None:
    harness = _harness(a=1, b=1)
    harness.register("a", probe=lambda: sys.exit(3))
    harness.register("b", probe=lambda: True)

    report = harness.run()

    assert report.total == 2
    assert report.cancelled is False
    assert report.results[0].outcome == Failed("SystemExit: 3")
    assert report.results[1].status is CheckStatus.PASS


def test_coroutine_probe_awaiting_cancelled_future_fails_in_sync_run() -> None:
    async def awaits_cancelled_future() -> bool:
        future = asyncio.get_running_loop().create_future()
        future.cancel()
        await future
        return True

    harness = _harness(a=1, b=1)
    harness.register("a", probe=awaits_cancelled_future)
    harness.register("b", probe=lambda: True)

    report = harness.run()

    assert report.total == 2
    assert report.results[0].outcome == Failed("CancelledError")
    assert report.results[1].status is CheckStatus.PASS


def test_generator_exit_from_probe_is_recorded_as_failure() -> None:
    def closes():
        raise GeneratorExit

    harness = _harness(a=1, b=1)
    harness.register("a", probe=closes)
    harness.register("b")

    report = harness.run()

    assert report.results[0].outcome == Failed("GeneratorExit")
    assert report.results[1].status is CheckStatus.PASS


def test_alias_lookup_error_fails_only_that_check(monkeypatch) -> None:
    real_resolve = runner_module.resolve_identifier

    def resolve(namespace, path):
        if path == "broken.alias":
            raise RuntimeError("lookup exploded")
        return real_resolve(namespace, path)

    monkeypatch.setattr(runner_module, "resolve_identifier", resolve)
    harness = _harness(a=1, b=1)
    harness.register("a", aliases=["broken.alias"])
    harness.register("b", aliases=["gone"])

    report = harness.run()

    first, second = report.results
    assert first.outcome == Failed("alias resolution failed: RuntimeError: lookup exploded")
    assert first.missing_aliases == frozenset()
    assert second.status is CheckStatus.PASS
    assert second.missing_aliases == frozenset({"gone"})
