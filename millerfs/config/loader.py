from __future__ import annotations

import json
import logging
from typing import Any

from result import Err, Ok, Result

from millerfs.config.defaults import default_config
from millerfs.config.schema import AppConfig, from_dict
from millerfs.services.fs import DEFAULT_FS, FileSystem

logger = logging.getLogger(__name__)

CONFIG_PATH = "~/.config/millerfs/config.json"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)


def _is_opener(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value)
    return isinstance(value, list) and all(isinstance(part, str) and part for part in value)


# camelCase key -> (check, expected type shown in messages)
_KEY_CHECKS = {
    "previewLines": (_is_int, "an integer"),
    "tickInterval": (_is_number, "a number of seconds"),
    "dirsFirst": (lambda v: isinstance(v, bool), "true or false"),
    "maxEntries": (lambda v: v is None or _is_int(v), "an integer or null"),
    "opener": (_is_opener, "a command string or a list of non-empty strings"),
    "showSize": (lambda v: isinstance(v, bool), "true or false"),
}


def validate_payload(payload: dict[str, Any]) -> str | None:
    """Return a message naming the first key with a value of the wrong type."""
    for key, (check, expected) in _KEY_CHECKS.items():
        if key in payload and not check(payload[key]):
            return f"'{key}' must be {expected}, got {json.dumps(payload[key])}"
    return None


def load_config(path: str | None = None, fs: FileSystem = DEFAULT_FS) -> Result[AppConfig, str]:
    resolved = path or fs.expanduser(CONFIG_PATH)
    if not fs.exists(resolved):
        return Ok(default_config())

    try:
        raw = fs.read_text(resolved)
    except OSError as exc:
        return Err(f"Failed reading config at {resolved}: {exc}.")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        return Err(f"Failed reading config at {resolved}: invalid JSON at line {exc.lineno} column {exc.colno}.")

    if not isinstance(payload, dict):
        return Err(f"Config at {resolved} must be a JSON object.")
    problem = validate_payload(payload)
    if problem is not None:
        return Err(f"Config at {resolved}: {problem}.")

    unknown = sorted(set(payload) - set(_KEY_CHECKS))
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", resolved, ", ".join(unknown))
    return Ok(from_dict(payload, default_config()))


def sample_config_json() -> str:
    return json.dumps(default_config().to_dict(), indent=2)
