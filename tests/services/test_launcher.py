from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest
from result import Err, Ok

from millerfs.services import launcher as launcher_mod
from millerfs.services.launcher import SubprocessLauncher, platform_opener


def test_default_command_follows_platform(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(launcher_mod.sys, "platform", "darwin")
    assert platform_opener() == ["open"]
    monkeypatch.setattr(launcher_mod.sys, "platform", "linux")
    assert platform_opener() == ["xdg-open"]
    assert SubprocessLauncher().command == ["xdg-open"]


def test_open_spawns_without_waiting() -> None:
    with patch("millerfs.services.launcher.subprocess.Popen") as popen:
        result = SubprocessLauncher(["viewer", "--new"]).open("/data/a.txt")

    assert isinstance(result, Ok)
    args, kwargs = popen.call_args
    assert args[0] == ["viewer", "--new", "/data/a.txt"]
    assert kwargs["stdout"] is subprocess.DEVNULL
    popen.return_value.wait.assert_not_called()


def test_missing_command_is_reported() -> None:
    result = SubprocessLauncher(["definitely-not-a-real-opener-xyz"]).open("/data/a.txt")

    assert isinstance(result, Err)
    assert "/data/a.txt" in result.unwrap_err()
