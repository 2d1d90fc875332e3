from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Sequence
from typing import Protocol

from result import Err, Ok, Result

from millerfs.models.entry import display_text

logger = logging.getLogger(__name__)


class Launcher(Protocol):
    def open(self, path: str) -> Result[None, str]: ...


def platform_opener() -> list[str]:
    if sys.platform == "darwin":
        return ["open"]
    if sys.platform == "win32":
        return ["cmd", "/c", "start", ""]
    return ["xdg-open"]


class SubprocessLauncher:
    """Open files with an external command and return without waiting for it."""

    def __init__(self, command: Sequence[str] | None = None) -> None:
        self._command = list(command) if command else platform_opener()

    @property
    def command(self) -> list[str]:
        return list(self._command)

    def open(self, path: str) -> Result[None, str]:
        argv = [*self._command, path]
        try:
            subprocess.Popen(  # noqa: S603
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            message = display_text(f"Failed to open {path}: {exc}")
            logger.warning("%s", message)
            return Err(message)
        logger.debug("Launched %s", argv)
        return Ok(None)
