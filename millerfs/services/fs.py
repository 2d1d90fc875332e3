from __future__ import annotations

import itertools
import logging
import os
import stat as statmod
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

from result import Err, Ok, Result

logger = logging.getLogger(__name__)

MAX_LINE_BYTES = 4096


@dataclass(slots=True, frozen=True)
class StatResult:
    size: int
    is_dir: bool
    is_file: bool
    is_symlink: bool = False


@dataclass(slots=True, frozen=True)
class DirEntry:
    path: str
    name: str


class FileSystem(Protocol):
    def expanduser(self, path: str) -> str: ...

    def exists(self, path: str) -> bool: ...

    def absolute(self, path: str) -> str: ...

    def stat(self, path: str, follow_symlinks: bool = True) -> StatResult: ...

    def scandir(self, path: str) -> Iterable[Result[DirEntry, str]]:
        """Open *path* for listing.

        Raises ``OSError`` when the directory itself cannot be opened. Failures on
        individual entries of the stream are yielded as ``Err``.
        """
        ...

    def read_lines(self, path: str, limit: int, max_line_bytes: int = MAX_LINE_BYTES) -> list[str]:
        """Return at most *limit* lines of *path*.

        A line longer than *max_line_bytes* continues on the next returned line, so
        no more than ``limit * max_line_bytes`` bytes are ever read.
        """
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str: ...


def _stat_result(st: os.stat_result) -> StatResult:
    return StatResult(
        size=st.st_size,
        is_dir=statmod.S_ISDIR(st.st_mode),
        is_file=statmod.S_ISREG(st.st_mode),
        is_symlink=statmod.S_ISLNK(st.st_mode),
    )


class OsFileSystem:
    def expanduser(self, path: str) -> str:
        return str(Path(path).expanduser())

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def absolute(self, path: str) -> str:
        return os.path.normpath(os.path.abspath(path))

    def stat(self, path: str, follow_symlinks: bool = True) -> StatResult:
        return _stat_result(os.stat(path, follow_symlinks=follow_symlinks))

    def scandir(self, path: str) -> Iterable[Result[DirEntry, str]]:
        handle = os.scandir(path)
        return self._drain(path, handle)

    @staticmethod
    def _drain(path: str, handle: Iterator[os.DirEntry[str]]) -> Iterator[Result[DirEntry, str]]:
        with handle:  # type: ignore[attr-defined]
            while True:
                try:
                    e = next(handle)
                except StopIteration:
                    return
                except OSError as exc:
                    # readdir() failures end the stream; keep what was read so far.
                    logger.debug("Directory stream for %s ended early: %s", path, exc)
                    yield Err(str(exc))
                    return
                yield Ok(DirEntry(path=e.path, name=e.name))

    def read_lines(self, path: str, limit: int, max_line_bytes: int = MAX_LINE_BYTES) -> list[str]:
        with open(path, "rb") as handle:
            chunks = iter(lambda: handle.readline(max_line_bytes), b"")
            return [
                raw.decode("utf-8", errors="replace").rstrip("\r\n")
                for raw in itertools.islice(chunks, limit)
            ]

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return Path(path).read_text(encoding=encoding)


DEFAULT_FS: FileSystem = OsFileSystem()
