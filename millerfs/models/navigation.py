from __future__ import annotations

from dataclasses import dataclass

from millerfs.models.cursor import Cursor
from millerfs.models.entry import Entry, display_text
from millerfs.models.enums import Key


@dataclass(slots=True, frozen=True)
class ListError:
    path: str
    message: str

    def __str__(self) -> str:
        return f"Cannot read {display_text(self.path)}: {display_text(self.message)}"


@dataclass(slots=True, frozen=True)
class EmptyPreview:
    pass


@dataclass(slots=True, frozen=True)
class ChildListing:
    entries: tuple[Entry, ...]


@dataclass(slots=True, frozen=True)
class TextSnippet:
    text: str


@dataclass(slots=True, frozen=True)
class PreviewError:
    message: str


Preview = EmptyPreview | ChildListing | TextSnippet | PreviewError

EMPTY_PREVIEW = EmptyPreview()


@dataclass(slots=True, frozen=True)
class KeyPress:
    key: Key


@dataclass(slots=True, frozen=True)
class Tick:
    pass


Event = KeyPress | Tick


@dataclass(slots=True, frozen=True)
class ParentSnapshot:
    path: str
    entries: tuple[Entry, ...]


@dataclass(slots=True)
class NavigationState:
    current_path: str
    current_entries: Cursor[Entry]
    parent_snapshot: ParentSnapshot | None = None
    return_index: int | None = None
    preview: Preview = EMPTY_PREVIEW
    last_error: str | None = None
    quit_requested: bool = False


@dataclass(slots=True, frozen=True)
class NavigationView:
    """Read-only snapshot handed to the renderer."""

    parent_path: str | None
    parent_entries: tuple[Entry, ...]
    current_path: str
    current_entries: tuple[Entry, ...]
    selected_index: int | None
    preview_title: str
    preview: Preview
    error: str | None = None

    @property
    def entry_count(self) -> int:
        return len(self.current_entries)
