from __future__ import annotations

import logging
import os

from result import Err, Ok, Result

from millerfs.models.cursor import Cursor
from millerfs.models.entry import Entry, display_text
from millerfs.models.enums import Key
from millerfs.models.navigation import (
    Event,
    KeyPress,
    ListError,
    NavigationState,
    NavigationView,
    ParentSnapshot,
    PreviewError,
)
from millerfs.services.launcher import Launcher, SubprocessLauncher
from millerfs.services.lister import EntryLister
from millerfs.services.preview import DEFAULT_PREVIEW_LINES, build_preview

logger = logging.getLogger(__name__)

_NAVIGATION_KEYS = frozenset({Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT, Key.ENTER})


def parent_of(path: str) -> str | None:
    """Return the parent directory of *path*, or ``None`` at the filesystem root."""
    parent = os.path.dirname(path)
    if not parent or parent == path:
        return None
    return parent


def _index_of(entries: list[Entry], path: str) -> int | None:
    for idx, entry in enumerate(entries):
        if entry.path == path:
            return idx
    return None


class NavigationEngine:
    """Owns the browsing state and is the only thing that mutates it.

    Every handled event leaves the state renderable. Directory-level failures
    reject the navigation and keep the previous state; entry-level failures are
    reported through ``last_error`` and never discard the listing.
    """

    def __init__(
        self,
        state: NavigationState,
        lister: EntryLister,
        launcher: Launcher,
        preview_lines: int = DEFAULT_PREVIEW_LINES,
    ) -> None:
        self._state = state
        self._lister = lister
        self._launcher = launcher
        self._preview_lines = max(1, preview_lines)

    @classmethod
    def open(
        cls,
        start: str,
        lister: EntryLister | None = None,
        launcher: Launcher | None = None,
        preview_lines: int = DEFAULT_PREVIEW_LINES,
    ) -> Result[NavigationEngine, ListError]:
        lister = lister or EntryLister()
        path = lister.fs.absolute(lister.fs.expanduser(start))
        listed = lister.list(path)
        if isinstance(listed, Err):
            return listed

        state = NavigationState(current_path=path, current_entries=Cursor.with_items(listed.unwrap()))
        engine = cls(state, lister, launcher or SubprocessLauncher(), preview_lines)
        state.parent_snapshot = engine._snapshot_parent_of(path)
        engine._refresh_preview()
        logger.debug("Browsing %s (%d entries)", path, len(state.current_entries))
        return Ok(engine)

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def should_quit(self) -> bool:
        return self._state.quit_requested

    def handle(self, event: Event) -> None:
        if not isinstance(event, KeyPress):
            return

        key = event.key
        if key is Key.QUIT:
            self._state.quit_requested = True
            return
        if key in _NAVIGATION_KEYS:
            self._state.last_error = None

        if key is Key.DOWN:
            self._state.current_entries.next()
            self._refresh_preview()
        elif key is Key.UP:
            self._state.current_entries.previous()
            self._refresh_preview()
        elif key is Key.LEFT:
            self._ascend()
        elif key in {Key.RIGHT, Key.ENTER}:
            self._descend()

    def view(self) -> NavigationView:
        state = self._state
        selected = state.current_entries.current()
        snapshot = state.parent_snapshot
        preview = state.preview
        if isinstance(preview, PreviewError):
            preview = PreviewError(display_text(preview.message))
        return NavigationView(
            parent_path=snapshot.path if snapshot is not None else None,
            parent_entries=snapshot.entries if snapshot is not None else (),
            current_path=state.current_path,
            current_entries=tuple(state.current_entries.items),
            selected_index=state.current_entries.index,
            preview_title=selected.display_name if selected is not None else "",
            preview=preview,
            error=display_text(state.last_error) if state.last_error is not None else None,
        )

    def _ascend(self) -> None:
        state = self._state
        parent = parent_of(state.current_path)
        if parent is None:
            return

        listed = self._lister.list(parent)
        if isinstance(listed, Err):
            self._reject(listed.unwrap_err())
            return
        entries = listed.unwrap()

        index = state.return_index
        if index is None:
            index = _index_of(entries, state.current_path)
        cursor = Cursor.with_items(entries)
        cursor.select(index)

        logger.debug("Ascend %s -> %s", state.current_path, parent)
        state.current_path = parent
        state.current_entries = cursor
        state.return_index = None
        state.parent_snapshot = self._snapshot_parent_of(parent)
        self._refresh_preview()

    def _descend(self) -> None:
        state = self._state
        entry = state.current_entries.current()
        if entry is None:
            return

        meta_result = entry.metadata()
        if isinstance(meta_result, Err):
            state.last_error = meta_result.unwrap_err()
            return
        meta = meta_result.unwrap()

        if meta.is_dir_like:
            listed = self._lister.list(entry.path)
            if isinstance(listed, Err):
                self._reject(listed.unwrap_err())
                return
            logger.debug("Descend %s -> %s", state.current_path, entry.path)
            state.return_index = state.current_entries.index
            state.parent_snapshot = ParentSnapshot(state.current_path, tuple(state.current_entries.items))
            state.current_path = entry.path
            state.current_entries = Cursor.with_items(listed.unwrap())
            self._refresh_preview()
            return

        if meta.is_file_like:
            launched = self._launcher.open(entry.path)
            if isinstance(launched, Err):
                state.last_error = launched.unwrap_err()

    def _reject(self, error: ListError) -> None:
        logger.warning("Navigation rejected: %s", error)
        self._state.last_error = str(error)

    def _snapshot_parent_of(self, path: str) -> ParentSnapshot | None:
        parent = parent_of(path)
        if parent is None:
            return None
        listed = self._lister.list(parent)
        if isinstance(listed, Err):
            logger.debug("Parent snapshot unavailable: %s", listed.unwrap_err())
            return ParentSnapshot(parent, ())
        return ParentSnapshot(parent, tuple(listed.unwrap()))

    def _refresh_preview(self) -> None:
        outcome = build_preview(self._state.current_entries.current(), self._lister, self._preview_lines)
        self._state.preview = outcome.preview
        if outcome.error is not None:
            self._state.last_error = outcome.error
