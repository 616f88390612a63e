"""Identifier resolution against a capability namespace."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

UNKNOWN_ENVIRONMENT = "Unknown"


def split_path(path: str | Sequence[str]) -> tuple[str, ...]:
    """Split a dotted path into segments. Sequences pass through."""
    if isinstance(path, str):
        return tuple(segment for segment in path.split(".") if segment)
    return tuple(path)


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(segment)
    return getattr(current, segment, None)


def resolve_identifier(namespace: Any, path: str | Sequence[str]) -> Any | None:
    """Look up ``path`` in ``namespace``, returning None when absent.

    Mapping intermediates are indexed, anything else is read as an
    attribute. A value bound to None counts as absent. Never raises.
    """
    segments = split_path(path)
    if not segments:
        return None

    current = namespace
    try:
        for segment in segments:
            current = _step(current, segment)
            if current is None:
                return None
    except Exception:  # noqa: BLE001 - lookups must never raise
        logger.debug("Resolution of %s failed", ".".join(segments), exc_info=True)
        return None
    return current


def identify_environment(namespace: Any, candidates: Iterable[str]) -> str:
    """Return the first non-empty name reported by ``candidates``.

    Each candidate is a path. Callables are invoked with no arguments,
    plain values are used directly.
    """
    for candidate in candidates:
        value = resolve_identifier(namespace, candidate)
        if value is None:
            continue
        if callable(value):
            try:
                value = value()
            except Exception:  # noqa: BLE001 - try the next candidate
                logger.debug("Identifier %s raised", candidate, exc_info=True)
                continue
        if isinstance(value, str) and value:
            return value
    return UNKNOWN_ENVIRONMENT


def existence_scan(namespace: Any, names: Iterable[str]) -> dict[str, bool]:
    """Report which names resolve to a callable or container.

    Used as a last resort when a full harness run cannot complete.
    """
    found: dict[str, bool] = {}
    for name in names:
        value = resolve_identifier(namespace, name)
        found[name] = value is not None and (
            callable(value) or isinstance(value, Mapping) or hasattr(value, "__dict__")
        )
    return found
