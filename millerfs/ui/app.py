from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import override

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Static

from millerfs.config.schema import AppConfig
from millerfs.models.entry import Entry, display_text
from millerfs.models.enums import Key
from millerfs.models.navigation import (
    ChildListing,
    KeyPress,
    NavigationView,
    Preview,
    PreviewError,
    TextSnippet,
    Tick,
)
from millerfs.services.engine import NavigationEngine
from millerfs.services.formatting import entry_label

logger = logging.getLogger(__name__)

KEYMAP: dict[str, Key] = {
    "q": Key.QUIT,
    "ctrl+c": Key.QUIT,
    "up": Key.UP,
    "k": Key.UP,
    "down": Key.DOWN,
    "j": Key.DOWN,
    "left": Key.LEFT,
    "h": Key.LEFT,
    "backspace": Key.LEFT,
    "right": Key.RIGHT,
    "l": Key.RIGHT,
    "enter": Key.ENTER,
}

_SELECTED_STYLE = "bold italic #1d1f21 on #81a2be"
_HIGHLIGHT_SYMBOL = "-> "


def window_start(count: int, selected: int | None, height: int) -> int:
    """First visible row so that *selected* stays inside a *height*-row window."""
    if height <= 0 or count <= height or selected is None:
        return 0
    start = selected - height // 2
    return max(0, min(start, count - height))


def render_listing(
    entries: Sequence[Entry],
    selected: int | None = None,
    height: int = 0,
    show_size: bool = True,
    label: Callable[[Entry], str] | None = None,
) -> Text:
    if not entries:
        return Text("(empty)", style="#969896")

    start = window_start(len(entries), selected, height)
    stop = start + height if height > 0 else len(entries)
    lines: list[Text] = []
    for idx in range(start, min(stop, len(entries))):
        text = label(entries[idx]) if label is not None else entry_label(entries[idx], show_size=show_size)
        if selected is None:
            lines.append(Text(text))
        elif idx == selected:
            lines.append(Text(_HIGHLIGHT_SYMBOL + text, style=_SELECTED_STYLE))
        else:
            lines.append(Text(" " * len(_HIGHLIGHT_SYMBOL) + text))
    return Text("\n").join(lines)


def render_preview(
    preview: Preview,
    height: int = 0,
    show_size: bool = True,
    label: Callable[[Entry], str] | None = None,
) -> Text:
    if isinstance(preview, ChildListing):
        return render_listing(preview.entries, height=height, show_size=show_size, label=label)
    if isinstance(preview, TextSnippet):
        return Text(preview.text)
    if isinstance(preview, PreviewError):
        return Text(preview.message, style="bold #cc6666")
    return Text("...", style="#969896")


class HelpOverlay(ModalScreen[None]):
    CSS = """
    HelpOverlay {
        align: center middle;
        background: rgba(0,0,0,0.45);
    }
    #help-box {
        width: 60%;
        height: auto;
        background: #282a2e;
        border: solid #81a2be;
        padding: 1 2;
        color: #c5c8c6;
    }
    """

    @override
    def compose(self) -> ComposeResult:
        content = "\n".join(
            [
                "[b #81a2be]Navigation[/]",
                "  j/k or Up/Down: Move (wraps around)",
                "  h / Left / Backspace: Parent directory",
                "  l / Right / Enter: Enter directory or open file",
                "",
                "[b #81a2be]Other[/]",
                "  ?: Toggle help",
                "  q / Ctrl+C: Quit",
            ]
        )
        yield Static(content, id="help-box")

    def key_escape(self) -> None:
        self.dismiss()

    def key_q(self) -> None:
        self.dismiss()

    def key_question_mark(self) -> None:
        self.dismiss()


class MillerApp(App[None]):
    CSS_PATH = "app.tcss"

    def __init__(self, engine: NavigationEngine, config: AppConfig) -> None:
        super().__init__()
        self.engine = engine
        self.config = config
        self._show_size = config.show_size
        # Entry labels for the current engine state; cleared after every handled key.
        self._labels: dict[Entry, str] = {}

    @override
    def compose(self) -> ComposeResult:
        yield Container(
            Static(id="path-row"),
            Static(id="error-row"),
            Horizontal(
                Static(id="parent-pane", classes="pane"),
                Static(id="current-pane", classes="pane"),
                Static(id="preview-pane", classes="pane"),
                id="panes",
            ),
            Static(id="status-row"),
            id="app-grid",
        )

    def on_mount(self) -> None:
        self.set_interval(self.config.tick_interval, self._on_tick)
        self._refresh_all()

    def on_resize(self) -> None:
        self._refresh_all()

    def _on_tick(self) -> None:
        self.engine.handle(Tick())
        self._refresh_all()

    def _pane_height(self, widget: Static) -> int:
        return widget.content_size.height or self.size.height

    def _label(self, entry: Entry) -> str:
        text = self._labels.get(entry)
        if text is None:
            text = entry_label(entry, show_size=self._show_size)
            self._labels[entry] = text
        return text

    def _refresh_all(self) -> None:
        view = self.engine.view()
        self._render_header(view)
        self._render_panes(view)
        self._render_footer(view)

    def _render_header(self, view: NavigationView) -> None:
        self.query_one("#path-row", Static).update(
            Text.from_markup("[#81a2be]Path:[/] ").append(display_text(view.current_path))
        )
        error_row = self.query_one("#error-row", Static)
        if view.error is not None:
            error_row.update(Text(view.error))
            error_row.display = True
        else:
            error_row.update("")
            error_row.display = False

    def _render_panes(self, view: NavigationView) -> None:
        parent_pane = self.query_one("#parent-pane", Static)
        parent_pane.border_title = display_text(view.parent_path) if view.parent_path is not None else ""
        if view.parent_path is None:
            parent_pane.update("")
        else:
            parent_pane.update(
                render_listing(view.parent_entries, height=self._pane_height(parent_pane), label=self._label)
            )

        current_pane = self.query_one("#current-pane", Static)
        current_pane.border_title = display_text(view.current_path)
        current_pane.update(
            render_listing(
                view.current_entries,
                view.selected_index,
                height=self._pane_height(current_pane),
                label=self._label,
            )
        )

        preview_pane = self.query_one("#preview-pane", Static)
        preview_pane.border_title = view.preview_title
        preview_pane.update(
            render_preview(view.preview, height=self._pane_height(preview_pane), label=self._label)
        )

    def _render_footer(self, view: NavigationView) -> None:
        position = view.selected_index + 1 if view.selected_index is not None else 0
        left = f"Item {position}/{view.entry_count}"
        hints = "q quit | ? help | j/k move | h parent | l/Enter open"

        width = self.size.width - 4
        gap = 4
        max_hints_len = width - len(left) - gap
        if max_hints_len < 10:
            status = left
        else:
            if len(hints) > max_hints_len:
                hints = hints[: max_hints_len - 1] + "…"
            pad = width - len(left) - len(hints)
            status = left + " " * max(gap, pad) + hints
        self.query_one("#status-row", Static).update(Text(status, style="#969896"))

    @override
    def on_key(self, event) -> None:  # type: ignore[override]
        if isinstance(self.screen, ModalScreen):
            return
        key = event.key
        if key == "question_mark":
            self.push_screen(HelpOverlay())
            return

        mapped = KEYMAP.get(key)
        if mapped is None:
            return
        event.stop()
        self.engine.handle(KeyPress(mapped))
        self._labels.clear()
        if self.engine.should_quit:
            logger.debug("Quit requested")
            self.exit()
            return
        self._refresh_all()
