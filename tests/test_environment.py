"""Tests for environment detection and the runtime namespace."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from capcheck.environment import (
    ENVIRONMENT_CANDIDATES,
    Implementation,
    OSType,
    RuntimeNamespace,
    detect_environment,
)
from capcheck.environment import detect as detect_module
from capcheck.harness import identify_environment, resolve_identifier


def test_runtime_namespace_resolves_builtins_and_modules() -> None:
    namespace = RuntimeNamespace()

    assert resolve_identifier(namespace, "len") is len
    assert resolve_identifier(namespace, "os.path.join") is os.path.join
    assert resolve_identifier(namespace, "capcheck_no_such_module.attr") is None
    assert "len" in namespace


def test_identify_running_interpreter() -> None:
    name = identify_environment(RuntimeNamespace(), ENVIRONMENT_CANDIDATES)

    assert name != "Unknown"


def test_detect_environment(monkeypatch) -> None:
    monkeypatch.setattr(detect_module.platform, "system", lambda: "Darwin")

    info = detect_environment()

    assert info.os_type is OSType.MACOS
    assert info.is_posix
    assert info.version
    assert info.implementation.name in str(info)


def test_unknown_os(monkeypatch) -> None:
    monkeypatch.setattr(detect_module.platform, "system", lambda: "Plan9")

    info = detect_environment()

    assert info.os_type is OSType.UNKNOWN
    assert not info.is_posix
    assert isinstance(info.implementation, Implementation)


def test_runtime_namespace_keeps_import_output_off_stdout(
    tmp_path: Path, monkeypatch, capsys
) -> None:
    (tmp_path / "capcheck_chatty_module.py").write_text(
        'print("hello from import")\nvalue = 1\n', encoding="utf-8"
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "capcheck_chatty_module", raising=False)

    assert resolve_identifier(RuntimeNamespace(), "capcheck_chatty_module.value") == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "hello from import" in captured.err
