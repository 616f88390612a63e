"""Suite type definitions."""

from collections.abc import Callable
from dataclasses import dataclass

from capcheck.harness import CapabilityTestHarness


@dataclass(frozen=True)
class SuiteSpec:
    """A named set of checks registered by ``build``."""

    name: str
    description: str
    build: Callable[[CapabilityTestHarness], None]
