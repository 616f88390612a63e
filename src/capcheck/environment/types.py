"""Environment type definitions."""

from dataclasses import dataclass
from enum import Enum, auto


class Implementation(Enum):
    """Python implementation."""

    CPYTHON = auto()
    PYPY = auto()
    GRAALPY = auto()
    UNKNOWN = auto()


class OSType(Enum):
    """Operating system family."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class EnvironmentInfo:
    """Detected interpreter information."""

    implementation: Implementation
    os_type: OSType
    version: str = ""
    machine: str = ""
    executable: str = ""

    @property
    def is_cpython(self) -> bool:
        return self.implementation == Implementation.CPYTHON

    @property
    def is_posix(self) -> bool:
        return self.os_type in (OSType.LINUX, OSType.MACOS)

    def __str__(self) -> str:
        return f"{self.implementation.name} {self.version} on {self.os_type.name}/{self.machine}"
