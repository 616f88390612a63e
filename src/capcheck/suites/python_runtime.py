"""Capability checks for the running Python interpreter."""

import asyncio
import base64
import dis
import functools
import gc
import hashlib
import inspect
import os
import sys
import tempfile
import threading
import types

from capcheck.harness import CapabilityTestHarness

SCRATCH_PREFIX = "__capcheck_"

# Existence-only checks shared by the minimal suite and the fallback scan
MINIMAL_NAMES = (
    "compile",
    "eval",
    "exec",
    "gc.get_objects",
    "sys._getframe",
    "inspect.getclosurevars",
    "importlib.import_module",
    "threading.Thread",
)


def _probe_gc() -> str | bool:
    objects = gc.get_objects()
    return f"{len(objects)} objects" if objects else False


def _probe_getframe() -> str:
    frame = sys._getframe()
    return f"line {frame.f_lineno}"


def _probe_closurevars() -> str:
    captured = 1

    def inner() -> int:
        return captured

    found = inspect.getclosurevars(inner).nonlocals
    return f"{len(found)} nonlocals"


def _probe_instructions() -> str:
    def sample() -> int:
        return 42

    return f"{sum(1 for _ in dis.get_instructions(sample))} instructions"


def _probe_wraps() -> bool:
    def original() -> str:
        return "orig"

    @functools.wraps(original)
    def hooked() -> str:
        return "hooked"

    return hooked.__wrapped__ is original and hooked() == "hooked"


def _probe_clone_function() -> bool:
    def original() -> str:
        return "orig"

    clone = types.FunctionType(
        original.__code__,
        original.__globals__,
        "clone",
        original.__defaults__,
        original.__closure__,
    )
    return clone is not original and clone() == "orig"


def _probe_scratch_file() -> str:
    fd, path = tempfile.mkstemp(prefix=SCRATCH_PREFIX, suffix=".txt")
    try:
        with os.fdopen(fd, "w") as handle:
            handle.write("test")
        with open(path) as handle:
            content = handle.read()
    finally:
        os.remove(path)
    return "Works" if content == "test" else "Broken"


def _probe_isfile() -> str:
    fd, path = tempfile.mkstemp(prefix=SCRATCH_PREFIX)
    os.close(fd)
    try:
        exists = os.path.isfile(path)
    finally:
        os.remove(path)
    return f"Works: {exists}"


def _probe_compile() -> str:
    code = compile("40 + 2", "<capcheck>", "eval")
    return f"Works: {eval(code)}"


def _probe_base64() -> str:
    return base64.b64encode(b"test").decode("ascii")


def _probe_sha256() -> str:
    return hashlib.sha256(b"test").hexdigest()[:16]


def _probe_thread() -> bool:
    seen: list[str] = []
    worker = threading.Thread(target=seen.append, args=("ran",))
    worker.start()
    worker.join(timeout=5)
    return seen == ["ran"]


async def _probe_event_loop() -> str:
    await asyncio.sleep(0)
    return "Works"


def build(harness: CapabilityTestHarness) -> None:
    """Register the interpreter capability checks."""
    # Environment
    harness.register(
        "sys.getrecursionlimit",
        "Environment",
        probe=lambda: f"limit {sys.getrecursionlimit()}",
    )
    harness.register(
        "os.environ",
        "Environment",
        aliases=("os.getenv", "os.putenv"),
        probe=lambda: f"{len(os.environ)} variables",
    )
    harness.register("sys.implementation", "Environment")

    # Debug
    harness.register("gc.get_objects", "Debug", aliases=("gc.get_referrers",), probe=_probe_gc)
    harness.register("sys._getframe", "Debug", probe=_probe_getframe)
    harness.register("sys.settrace", "Debug", aliases=("sys.setprofile", "sys.monitoring"))

    # Introspection
    harness.register("inspect.getclosurevars", "Introspection", probe=_probe_closurevars)
    harness.register("dis.get_instructions", "Introspection", probe=_probe_instructions)
    harness.register("inspect.getmembers", "Introspection", aliases=("inspect.getmembers_static",))

    # Closures
    harness.register("functools.wraps", "Closures", probe=_probe_wraps)
    harness.register("types.FunctionType", "Closures", probe=_probe_clone_function)
    harness.register("types.CodeType", "Closures")

    # Filesystem
    harness.register(
        "tempfile.mkstemp",
        "Filesystem",
        aliases=("tempfile.NamedTemporaryFile",),
        probe=_probe_scratch_file,
    )
    harness.register("os.path.isfile", "Filesystem", probe=_probe_isfile)

    # Scripts
    harness.register("compile", "Scripts", aliases=("eval", "exec"), probe=_probe_compile)
    harness.register("importlib.reload", "Scripts")

    # Cryptography
    harness.register(
        "base64.b64encode", "Cryptography", aliases=("binascii.b2a_base64",), probe=_probe_base64
    )
    harness.register(
        "hashlib.sha256",
        "Cryptography",
        aliases=("hashlib.blake2b", "hashlib.sha3_256"),
        probe=_probe_sha256,
    )
    harness.register("secrets.token_hex", "Cryptography")

    # Signals
    harness.register("signal.signal", "Signals", aliases=("signal.getsignal",))
    harness.register("signal.SIGALRM", "Signals", aliases=("signal.setitimer",))

    # Concurrency
    harness.register("threading.Thread", "Concurrency", probe=_probe_thread)
    harness.register("asyncio.run", "Concurrency", probe=_probe_event_loop)
    harness.register("os.fork", "Concurrency", aliases=("os.posix_spawn",))


def build_minimal(harness: CapabilityTestHarness) -> None:
    """Register existence-only checks for the core capabilities."""
    for name in MINIMAL_NAMES:
        harness.register(name, "Basic")
