from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MIN_TICK_INTERVAL = 0.05


@dataclass(slots=True)
class AppConfig:
    preview_lines: int = 128
    tick_interval: float = 0.25
    dirs_first: bool = False
    max_entries: int | None = None
    opener: list[str] = field(default_factory=list)
    show_size: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "previewLines": self.preview_lines,
            "tickInterval": self.tick_interval,
            "dirsFirst": self.dirs_first,
            "maxEntries": self.max_entries,
            "opener": self.opener,
            "showSize": self.show_size,
        }


def from_dict(data: dict[str, Any], defaults: AppConfig) -> AppConfig:
    max_entries_raw = data.get("maxEntries", defaults.max_entries)
    opener_raw = data.get("opener", defaults.opener)
    if isinstance(opener_raw, str):
        opener_raw = [opener_raw]

    return AppConfig(
        preview_lines=max(1, int(data.get("previewLines", defaults.preview_lines))),
        tick_interval=max(MIN_TICK_INTERVAL, float(data.get("tickInterval", defaults.tick_interval))),
        dirs_first=bool(data.get("dirsFirst", defaults.dirs_first)),
        max_entries=max(1, int(max_entries_raw)) if max_entries_raw is not None else None,
        opener=[str(x) for x in opener_raw or []],
        show_size=bool(data.get("showSize", defaults.show_size)),
    )
