from __future__ import annotations

from millerfs.models.entry import Entry
from millerfs.models.enums import EntryKind

UNITS = ["B", "KB", "MB", "GB", "TB"]

KIND_MARKERS: dict[EntryKind, str] = {
    EntryKind.DIRECTORY: "📁",
    EntryKind.FILE: "📄",
    EntryKind.SYMLINK: "🔗",
    EntryKind.UNKNOWN: "?",
}


def format_bytes(size: int) -> str:
    """Decimal (SI) size, e.g. ``1.50 KB``."""
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1000 and unit < len(UNITS) - 1:
        value /= 1000.0
        unit += 1
    if unit == 0:
        return f"{int(value)} {UNITS[unit]}"
    return f"{value:.2f} {UNITS[unit]}"


def entry_label(entry: Entry, show_size: bool = True) -> str:
    meta = entry.metadata()
    if meta.is_err():
        return f"{KIND_MARKERS[EntryKind.UNKNOWN]} {entry.display_name}"
    info = meta.unwrap()
    label = f"{KIND_MARKERS[info.kind]} {entry.display_name}"
    if show_size and info.is_file:
        label += f"  {format_bytes(info.size)}"
    return label
