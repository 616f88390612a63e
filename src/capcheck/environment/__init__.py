"""Environment detection for capability checks."""

from .detect import ENVIRONMENT_CANDIDATES, RuntimeNamespace, detect_environment
from .types import EnvironmentInfo, Implementation, OSType

__all__ = [
    "ENVIRONMENT_CANDIDATES",
    "EnvironmentInfo",
    "Implementation",
    "OSType",
    "RuntimeNamespace",
    "detect_environment",
]
