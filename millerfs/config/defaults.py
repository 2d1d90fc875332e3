from __future__ import annotations

from millerfs.config.schema import AppConfig


def default_config() -> AppConfig:
    return AppConfig()
