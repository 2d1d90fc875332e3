from __future__ import annotations

import logging

from result import Err, Ok, Result

from millerfs.models.entry import Entry
from millerfs.models.navigation import ListError
from millerfs.services.fs import DEFAULT_FS, FileSystem

logger = logging.getLogger(__name__)


def _sort_key(entry: Entry) -> tuple[str, str]:
    return (entry.name.casefold(), entry.name)


def _is_dir_like(entry: Entry) -> bool:
    meta = entry.metadata()
    return meta.is_ok() and meta.unwrap().is_dir_like


class EntryLister:
    """Turn a directory path into a fresh, sorted list of entries.

    Only failure to open the directory is an error. Unreadable items in the
    directory stream are dropped, while entries whose metadata cannot be queried
    are kept and left for the caller to report when selected.
    """

    def __init__(
        self,
        fs: FileSystem = DEFAULT_FS,
        dirs_first: bool = False,
        max_entries: int | None = None,
    ) -> None:
        self._fs = fs
        self._dirs_first = dirs_first
        self._max_entries = max_entries

    @property
    def fs(self) -> FileSystem:
        return self._fs

    def list(self, path: str) -> Result[list[Entry], ListError]:
        entries: list[Entry] = []
        skipped = 0
        try:
            for item in self._fs.scandir(path):
                if item.is_err():
                    skipped += 1
                    continue
                entries.append(Entry(parent=path, name=item.unwrap().name, fs=self._fs))
        except OSError as exc:
            reason = exc.strerror or str(exc)
            logger.debug("Listing %s failed: %s", path, reason)
            return Err(ListError(path=path, message=reason))

        if skipped:
            logger.debug("Skipped %d unreadable entries in %s", skipped, path)

        entries.sort(key=_sort_key)
        if self._dirs_first:
            entries.sort(key=lambda e: not _is_dir_like(e))

        if self._max_entries is not None and len(entries) > self._max_entries:
            logger.info("Truncating listing of %s to %d of %d entries", path, self._max_entries, len(entries))
            del entries[self._max_entries :]
        return Ok(entries)
