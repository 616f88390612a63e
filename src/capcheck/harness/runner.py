"""Fault-isolated capability check runner."""

import asyncio
import inspect
import logging
from collections.abc import Iterable, Iterator
from typing import Any

from .resolve import identify_environment, resolve_identifier
from .types import (
    DEFAULT_CATEGORY,
    CheckDefinition,
    CheckResult,
    Failed,
    Outcome,
    Passed,
    Probe,
    Report,
    Skipped,
    TimedOut,
)

logger = logging.getLogger(__name__)

NOT_FOUND = "identifier not found"


def describe_exception(exc: BaseException) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def evaluate_probe_value(value: Any) -> Outcome:
    """Map a probe's return value onto an outcome.

    ``False`` and ``None`` fail; anything else passes, with string
    values kept as the detail.
    """
    if value is None:
        return Failed("probe returned no result")
    if value is False:
        return Failed("probe returned False")
    return Passed(value if isinstance(value, str) else None)


# Raised by a probe, these are recorded as failures; KeyboardInterrupt still
# stops the run.
PROBE_ERRORS = (Exception, asyncio.CancelledError, SystemExit, GeneratorExit)


def _close(awaitable: Any) -> None:
    if inspect.iscoroutine(awaitable):
        awaitable.close()


def _await_blocking(awaitable: Any, timeout: float | None) -> Any:
    """Drive an awaitable probe to completion from synchronous code."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_bounded(awaitable, timeout))
    _close(awaitable)
    raise RuntimeError("coroutine probe inside a running event loop needs arun()")


def _externally_cancelled() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


async def _bounded(awaitable: Any, timeout: float | None) -> Any:
    return await asyncio.wait_for(awaitable, timeout)


class CapabilityTestHarness:
    """Registry of capability checks run against one namespace.

    Checks run strictly one after another in registration order, since
    probes may touch shared state (scratch files, temporary globals).
    A failure inside any probe or alias lookup is recorded on that
    check's result and never reaches the caller.
    """

    def __init__(
        self,
        namespace: Any,
        environment_candidates: Iterable[str] = (),
    ) -> None:
        self.namespace = namespace
        self.environment_candidates = tuple(environment_candidates)
        self._registry: dict[str, CheckDefinition] = {}

    def register(
        self,
        name: str,
        category: str | None = None,
        aliases: Iterable[str] = (),
        probe: Probe | None = None,
    ) -> None:
        """Add a check, replacing any earlier check with the same name.

        Re-registration is last-write-wins and keeps the position of the
        first registration. The probe is not called here.
        """
        if name in self._registry:
            logger.debug("Replacing check %s", name)
        self._registry[name] = CheckDefinition(
            name=name,
            category=category or DEFAULT_CATEGORY,
            aliases=tuple(aliases),
            probe=probe,
        )

    @property
    def definitions(self) -> list[CheckDefinition]:
        return list(self._registry.values())

    def __len__(self) -> int:
        return len(self._registry)

    def _precheck(self, definition: CheckDefinition) -> Outcome | None:
        """Outcome decided without calling the probe, if any."""
        if resolve_identifier(self.namespace, definition.name) is None:
            return Skipped(NOT_FOUND)
        if definition.probe is None:
            return Passed()
        return None

    def _missing_aliases(self, definition: CheckDefinition) -> frozenset[str]:
        return frozenset(
            alias
            for alias in definition.aliases
            if resolve_identifier(self.namespace, alias) is None
        )

    def _finish(self, definition: CheckDefinition, outcome: Outcome) -> CheckResult:
        try:
            missing = self._missing_aliases(definition)
        except Exception as exc:  # noqa: BLE001 - isolate alias failures
            logger.debug("Alias lookup for %s failed", definition.name, exc_info=True)
            missing = frozenset()
            outcome = Failed(f"alias resolution failed: {describe_exception(exc)}")

        result = CheckResult(
            name=definition.name,
            category=definition.category,
            outcome=outcome,
            missing_aliases=missing,
        )
        logger.info("%s: %s %s", result.name, result.status.value, result.message)
        return result

    def _failure(self, definition: CheckDefinition, exc: BaseException) -> Outcome:
        if isinstance(exc, asyncio.TimeoutError):
            logger.debug("Probe %s timed out", definition.name)
            return TimedOut()
        logger.debug("Probe %s raised", definition.name, exc_info=True)
        return Failed(describe_exception(exc))

    def run_one(self, definition: CheckDefinition, timeout: float | None = None) -> CheckResult:
        """Run a single check without letting any probe error escape.

        Args:
            definition: Check to run
            timeout: Bound on awaitable probes, in seconds (None = no bound)

        Returns:
            CheckResult with outcome and missing aliases
        """
        try:
            outcome = self._precheck(definition)
            if outcome is None:
                value = definition.probe()
                if inspect.isawaitable(value):
                    value = _await_blocking(value, timeout)
                outcome = evaluate_probe_value(value)
        except PROBE_ERRORS as exc:  # noqa: BLE001 - checks must keep running
            outcome = self._failure(definition, exc)
        return self._finish(definition, outcome)

    async def arun_one(
        self, definition: CheckDefinition, timeout: float | None = None
    ) -> CheckResult:
        """Async form of :meth:`run_one`; awaitable probes are awaited in place."""
        try:
            outcome = self._precheck(definition)
            if outcome is None:
                value = definition.probe()
                if inspect.isawaitable(value):
                    value = await asyncio.wait_for(value, timeout)
                outcome = evaluate_probe_value(value)
        except asyncio.CancelledError as exc:
            if _externally_cancelled():
                raise
            outcome = self._failure(definition, exc)
        except PROBE_ERRORS as exc:  # noqa: BLE001 - checks must keep running
            outcome = self._failure(definition, exc)
        return self._finish(definition, outcome)

    def iter_results(self, timeout: float | None = None) -> Iterator[CheckResult]:
        """Yield results one at a time in registration order."""
        for definition in self.definitions:
            yield self.run_one(definition, timeout)

    def _report(self, results: list[CheckResult], cancelled: bool = False) -> Report:
        environment = None
        if self.environment_candidates:
            environment = identify_environment(self.namespace, self.environment_candidates)
        return Report(results=tuple(results), cancelled=cancelled, environment=environment)

    def run(self, timeout: float | None = None) -> Report:
        """Run every registered check.

        A KeyboardInterrupt stops the run and returns the results collected
        so far, marked as cancelled.
        """
        results: list[CheckResult] = []
        try:
            for result in self.iter_results(timeout):
                results.append(result)
        except KeyboardInterrupt:
            logger.warning("Run interrupted after %d of %d checks", len(results), len(self))
            return self._report(results, cancelled=True)
        return self._report(results)

    async def arun(self, timeout: float | None = None) -> Report:
        """Run every registered check, awaiting each probe before the next.

        ``timeout`` bounds each awaitable probe; an expired probe fails
        with a timeout outcome. Cancelling the run returns the partial
        report instead of discarding it.
        """
        results: list[CheckResult] = []
        try:
            for definition in self.definitions:
                results.append(await self.arun_one(definition, timeout))
        except asyncio.CancelledError:
            logger.warning("Run cancelled after %d of %d checks", len(results), len(self))
            return self._report(results, cancelled=True)
        return self._report(results)
