from __future__ import annotations

import os
from dataclasses import dataclass, field

from result import Err, Ok, Result

from millerfs.models.enums import EntryKind
from millerfs.services.fs import DEFAULT_FS, FileSystem


@dataclass(slots=True, frozen=True)
class EntryMetadata:
    kind: EntryKind
    size: int
    target_is_dir: bool = False
    target_is_file: bool = False

    @property
    def is_dir_like(self) -> bool:
        """True for directories and for symlinks that resolve to one."""
        return self.kind is EntryKind.DIRECTORY or (self.kind is EntryKind.SYMLINK and self.target_is_dir)

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_file_like(self) -> bool:
        return self.kind is EntryKind.FILE or (self.kind is EntryKind.SYMLINK and self.target_is_file)


@dataclass(slots=True, frozen=True)
class Entry:
    """One child of a listed directory.

    ``name`` is the raw name as returned by the filesystem and is the only form used
    to build paths. Metadata is queried on every call to :meth:`metadata`, so a
    listing never holds stale kind or size information.
    """

    parent: str
    name: str
    fs: FileSystem = field(default=DEFAULT_FS, compare=False, repr=False)

    @property
    def path(self) -> str:
        return os.path.join(self.parent, self.name)

    @property
    def display_name(self) -> str:
        return display_text(self.name)

    def metadata(self) -> Result[EntryMetadata, str]:
        try:
            st = self.fs.stat(self.path, follow_symlinks=False)
        except OSError as exc:
            return Err(display_text(str(exc)))

        if st.is_symlink:
            try:
                target = self.fs.stat(self.path)
            except OSError:
                # dangling link
                return Ok(EntryMetadata(EntryKind.SYMLINK, st.size))
            return Ok(EntryMetadata(EntryKind.SYMLINK, st.size, target.is_dir, target.is_file))
        if st.is_dir:
            return Ok(EntryMetadata(EntryKind.DIRECTORY, st.size))
        if st.is_file:
            return Ok(EntryMetadata(EntryKind.FILE, st.size))
        return Ok(EntryMetadata(EntryKind.UNKNOWN, st.size))


def display_text(raw: str) -> str:
    """Lossy conversion of a filesystem name or path for display only."""
    return os.fsencode(raw).decode("utf-8", errors="replace")
