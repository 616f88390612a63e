"""Environment detection and the runtime capability namespace."""

import builtins
import contextlib
import importlib
import logging
import platform
import sys
from collections.abc import Iterator, Mapping
from typing import Any

from .types import EnvironmentInfo, Implementation, OSType

logger = logging.getLogger(__name__)

# Tried in order by identify_environment()
ENVIRONMENT_CANDIDATES = (
    "platform.python_implementation",
    "sys.implementation.name",
)


class RuntimeNamespace(Mapping[str, Any]):
    """Read-only view of builtins and importable top-level modules.

    A key that names a builtin resolves to it; any other key is imported
    on first access, and anything the import prints goes to stderr.
    Submodules are reached as attributes, so only those already imported
    by their parent package resolve.
    """

    def __getitem__(self, key: str) -> Any:
        if hasattr(builtins, key):
            return getattr(builtins, key)
        try:
            with contextlib.redirect_stdout(sys.stderr):
                return importlib.import_module(key)
        except ImportError as exc:
            raise KeyError(key) from exc

    def __iter__(self) -> Iterator[str]:
        names = set(dir(builtins))
        names.update(name for name in sys.modules if "." not in name)
        return iter(sorted(names))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return "RuntimeNamespace()"


def _detect_implementation() -> Implementation:
    impl_map = {
        "cpython": Implementation.CPYTHON,
        "pypy": Implementation.PYPY,
        "graalpy": Implementation.GRAALPY,
    }
    return impl_map.get(sys.implementation.name, Implementation.UNKNOWN)


def _detect_os() -> OSType:
    os_map = {
        "Linux": OSType.LINUX,
        "Darwin": OSType.MACOS,
        "Windows": OSType.WINDOWS,
    }
    return os_map.get(platform.system(), OSType.UNKNOWN)


def detect_environment() -> EnvironmentInfo:
    """Detect full interpreter information."""
    info = EnvironmentInfo(
        implementation=_detect_implementation(),
        os_type=_detect_os(),
        version=platform.python_version(),
        machine=platform.machine(),
        executable=sys.executable or "",
    )
    logger.debug("Detected environment: %s", info)
    return info
