"""Built-in and file-based check suites."""

from typing import Any

from capcheck.environment import ENVIRONMENT_CANDIDATES, RuntimeNamespace
from capcheck.errors import UnknownSuiteError
from capcheck.harness import CapabilityTestHarness

from . import python_runtime
from .loader import load_suite_file, parse_suite
from .types import SuiteSpec

__all__ = ["SUITES", "SuiteSpec", "build_harness", "get_suite", "load_suite_file", "parse_suite"]

DEFAULT_SUITE = "python-runtime"

SUITES: dict[str, SuiteSpec] = {
    spec.name: spec
    for spec in (
        SuiteSpec(
            name="python-runtime",
            description="Interpreter capabilities with behavioral probes",
            build=python_runtime.build,
        ),
        SuiteSpec(
            name="python-minimal",
            description="Existence-only checks for core capabilities",
            build=python_runtime.build_minimal,
        ),
    )
}


def get_suite(name: str) -> SuiteSpec:
    """Look up a built-in suite by name."""
    try:
        return SUITES[name]
    except KeyError:
        raise UnknownSuiteError(name, sorted(SUITES)) from None


def build_harness(suite: SuiteSpec, namespace: Any = None) -> CapabilityTestHarness:
    """Create a harness for ``suite``, defaulting to the runtime namespace."""
    harness = CapabilityTestHarness(
        namespace if namespace is not None else RuntimeNamespace(),
        environment_candidates=ENVIRONMENT_CANDIDATES,
    )
    suite.build(harness)
    return harness
