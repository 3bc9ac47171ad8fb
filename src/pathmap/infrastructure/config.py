"""Configuration constants, .env parsing, and watch settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import get_args

from pathmap.remapping.types import ReloadPolicy

MAPPING_FILE_NAME = "completion_prefix_map.json"
DEFAULT_POLICY: ReloadPolicy = "prompt"


def read_env_file(keys: list[str]) -> dict[str, str]:
    """Parse .env file and return values for requested keys.

    Does NOT load into os.environ; callers decide what to do with values.
    """
    env_file = Path.cwd() / ".env"
    try:
        content = env_file.read_text()
    except OSError:
        return {}

    result: dict[str, str] = {}
    wanted = set(keys)

    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        eq_idx = trimmed.find("=")
        if eq_idx == -1:
            continue
        key = trimmed[:eq_idx].strip()
        if key not in wanted:
            continue
        value = trimmed[eq_idx + 1 :].strip()
        if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
            value = value[1:-1]
        if value:
            result[key] = value

    return result


def parse_policy(value: str | None) -> ReloadPolicy:
    """Normalize a configured policy; unknown values fall back to the default."""
    if value:
        normalized = value.strip().lower()
        if normalized in get_args(ReloadPolicy):
            return normalized  # type: ignore[return-value]
    return DEFAULT_POLICY


# Read config values from .env (falls back to os.environ).
_env_config = read_env_file(
    ["PATHMAP_STORAGE_DIR", "PATHMAP_ON_CONFIG_CHANGED", "PATHMAP_DEBOUNCE_MS", "PATHMAP_LOG_LEVEL"]
)

HOME_DIR: Path = Path.home()

STORAGE_DIR: Path = Path(
    os.environ.get("PATHMAP_STORAGE_DIR")
    or _env_config.get("PATHMAP_STORAGE_DIR", str(HOME_DIR / ".config" / "pathmap"))
).expanduser()
ON_CONFIG_CHANGED: ReloadPolicy = parse_policy(
    os.environ.get("PATHMAP_ON_CONFIG_CHANGED") or _env_config.get("PATHMAP_ON_CONFIG_CHANGED")
)
DEBOUNCE_MS: int = int(os.environ.get("PATHMAP_DEBOUNCE_MS") or _env_config.get("PATHMAP_DEBOUNCE_MS", "2000"))
LOG_LEVEL: str = (
    os.environ.get("PATHMAP_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or _env_config.get("PATHMAP_LOG_LEVEL", "INFO")
).upper()


class WatchConfig:
    """Settings for reacting to mapping-file changes."""

    def __init__(self, policy: str | None = ON_CONFIG_CHANGED, debounce_ms: int = DEBOUNCE_MS) -> None:
        self.policy: ReloadPolicy = parse_policy(policy)
        self.debounce_ms = max(0, debounce_ms)

    @property
    def debounce_s(self) -> float:
        return self.debounce_ms / 1000
