from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath

from result import Err, Ok, Result

from millerfs.services.fs import MAX_LINE_BYTES, DirEntry, StatResult


@dataclass
class _MockEntry:
    is_dir: bool
    content: str = ""
    link: str | None = None

    @property
    def size(self) -> int:
        return len(self.content.encode())


class MemoryFileSystem:
    def __init__(self) -> None:
        self._entries: dict[str, _MockEntry] = {"/": _MockEntry(is_dir=True)}
        self._broken_meta: set[str] = set()
        self._denied_dirs: set[str] = set()
        self._denied_reads: set[str] = set()
        self._stream_errors: dict[str, int] = {}

    def _ensure_parents(self, key: str) -> None:
        for parent in reversed(PurePosixPath(key).parents):
            pk = str(parent)
            if pk not in self._entries:
                self._entries[pk] = _MockEntry(is_dir=True)

    def add_dir(self, path: str) -> MemoryFileSystem:
        key = self._normalize(path)
        self._ensure_parents(key)
        self._entries[key] = _MockEntry(is_dir=True)
        return self

    def add_file(self, path: str, content: str = "") -> MemoryFileSystem:
        key = self._normalize(path)
        self._ensure_parents(key)
        self._entries[key] = _MockEntry(is_dir=False, content=content)
        return self

    def add_symlink(self, path: str, target: str) -> MemoryFileSystem:
        key = self._normalize(path)
        self._ensure_parents(key)
        self._entries[key] = _MockEntry(is_dir=False, link=target)
        return self

    def remove(self, path: str) -> MemoryFileSystem:
        key = self._normalize(path)
        prefix = key.rstrip("/") + "/"
        for p in [p for p in self._entries if p == key or p.startswith(prefix)]:
            del self._entries[p]
        return self

    def break_metadata(self, path: str) -> MemoryFileSystem:
        self._broken_meta.add(self._normalize(path))
        return self

    def deny_listing(self, path: str) -> MemoryFileSystem:
        self._denied_dirs.add(self._normalize(path))
        return self

    def deny_read(self, path: str) -> MemoryFileSystem:
        self._denied_reads.add(self._normalize(path))
        return self

    def add_stream_errors(self, path: str, count: int = 1) -> MemoryFileSystem:
        self._stream_errors[self._normalize(path)] = count
        return self

    def expanduser(self, path: str) -> str:
        return path.replace("~", "/mock/home")

    def exists(self, path: str) -> bool:
        return self._normalize(path) in self._entries

    def absolute(self, path: str) -> str:
        return self._normalize(path)

    def stat(self, path: str, follow_symlinks: bool = True) -> StatResult:
        key = self._normalize(path)
        head, tail = posixpath.split(key)
        if tail:
            key = posixpath.join(self._resolve(head), tail)
        if key in self._broken_meta:
            raise PermissionError(13, "Permission denied", key)
        entry = self._entries.get(key)
        if entry is None:
            raise FileNotFoundError(2, "No such file or directory", key)
        if entry.link is not None:
            if not follow_symlinks:
                return StatResult(size=len(entry.link), is_dir=False, is_file=False, is_symlink=True)
            return self.stat(self._resolve(key))
        return StatResult(size=entry.size, is_dir=entry.is_dir, is_file=not entry.is_dir)

    def scandir(self, path: str) -> list[Result[DirEntry, str]]:
        key = self._resolve(self._normalize(path))
        if key in self._denied_dirs:
            raise PermissionError(13, "Permission denied", key)
        entry = self._entries.get(key)
        if entry is None:
            raise FileNotFoundError(2, "No such file or directory", key)
        if not entry.is_dir:
            raise NotADirectoryError(20, "Not a directory", key)

        listed_as = self._normalize(path)
        prefix = key.rstrip("/") + "/"
        result: list[Result[DirEntry, str]] = []
        for p in self._entries:
            if p == key or not p.startswith(prefix):
                continue
            name = p[len(prefix) :]
            if "/" in name:
                continue
            result.append(Ok(DirEntry(path=posixpath.join(listed_as, name), name=name)))
        result.extend(Err("Input/output error") for _ in range(self._stream_errors.get(key, 0)))
        return result

    def read_lines(self, path: str, limit: int, max_line_bytes: int = MAX_LINE_BYTES) -> list[str]:
        key = self._resolve(self._normalize(path))
        if key in self._denied_reads:
            raise PermissionError(13, "Permission denied", key)
        entry = self._entries.get(key)
        if entry is None:
            raise FileNotFoundError(2, "No such file or directory", key)
        if entry.is_dir:
            raise IsADirectoryError(21, "Is a directory", key)
        return [line[:max_line_bytes] for line in entry.content.splitlines()[:limit]]

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        key = self._normalize(path)
        entry = self._entries.get(key)
        if entry is None:
            raise OSError(f"No such file or directory: '{key}'")
        return entry.content

    def _resolve(self, key: str) -> str:
        current = PurePosixPath("/")
        for part in PurePosixPath(key).parts[1:]:
            current = current / part
            entry = self._entries.get(str(current))
            if entry is not None and entry.link is not None:
                current = PurePosixPath(posixpath.normpath(posixpath.join(str(current.parent), entry.link)))
        return str(current)

    @staticmethod
    def _normalize(path: str) -> str:
        return posixpath.normpath(path) if path else "/"
