"""Declarative suite files.

A suite file is YAML with existence-only checks::

    name: my-plugin
    description: Hooks exported by my plugin
    checks:
      - name: plugin.setup
        category: Lifecycle
        aliases: [plugin.init]
      - plugin.teardown
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from capcheck.errors import SuiteFileError
from capcheck.harness import CapabilityTestHarness

from .types import SuiteSpec

logger = logging.getLogger(__name__)


def _parse_check(index: int, entry: Any) -> tuple[str, str | None, tuple[str, ...]]:
    if isinstance(entry, str):
        return entry, None, ()
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        raise SuiteFileError(f"Check #{index} must be a name or a mapping with a 'name'")

    category = entry.get("category")
    if category is not None and not isinstance(category, str):
        raise SuiteFileError(f"Check {entry['name']}: category must be a string")

    aliases = entry.get("aliases") or []
    if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
        raise SuiteFileError(f"Check {entry['name']}: aliases must be a list of strings")
    return entry["name"], category, tuple(aliases)


def parse_suite(data: Any, default_name: str = "custom") -> SuiteSpec:
    """Build a suite from already-loaded YAML data."""
    if not isinstance(data, dict):
        raise SuiteFileError("Suite file must contain a mapping")
    checks = data.get("checks")
    if not isinstance(checks, list) or not checks:
        raise SuiteFileError("Suite file must define a non-empty 'checks' list")

    parsed = [_parse_check(index, entry) for index, entry in enumerate(checks, 1)]

    def build(harness: CapabilityTestHarness) -> None:
        for name, category, aliases in parsed:
            harness.register(name, category, aliases)

    return SuiteSpec(
        name=str(data.get("name") or default_name),
        description=str(data.get("description") or ""),
        build=build,
    )


def load_suite_file(path: Path) -> SuiteSpec:
    """Load a suite from a YAML file."""
    try:
        with path.open("r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except OSError as exc:
        raise SuiteFileError(f"Cannot read suite file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SuiteFileError(f"Invalid YAML in {path}: {exc}") from exc

    suite = parse_suite(data, default_name=path.stem)
    logger.debug("Loaded suite %s from %s", suite.name, path)
    return suite
