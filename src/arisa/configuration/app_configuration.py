from __future__ import annotations

import copy
import fcntl
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from arisa.errors import ConfigError
from arisa.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path(os.getenv("ARISA_CONFIG", "./config/app_config.yml")).resolve()

DEFAULT_CONFIG: Dict[str, Any] = {
    "limits": {
        "max_input_size": 4096,
        "max_output_size": 4000,
    },
    "cooldowns": {
        "per_user_cooldown": 3,
        "hash_cooldown": 5,
        "github_cooldown": 10,
        "color_cooldown": 2,
    },
    "cache": {
        "ttl_seconds": 3600,
        "single_flight": True,
    },
    "cooldown_sweep": {
        "interval_seconds": 300,
        "max_age_seconds": 3600,
    },
    "http": {
        "timeout_seconds": 30,
        "user_agent": "Arisa-Bot/1.0",
    },
    "github": {
        "token": None,
    },
    "quotes": {
        "quotes": [
            "segfault yourself",
            "cat /dev/random",
            "a monad is just a monoid in the category of endofunctors",
            "GITPULLO COMMITO MERGE CONFLICTO",
            "mov eax, 0x80000000; mov ebx, [eax]; int 0x80",
            "thinking github came before git",
            "g++ -fsanitize=undefined,address -fno-omit-frame-pointer",
            "ghidra backdoored by the NSA",
        ],
        "update_interval_minutes": [3, 5],
    },
}


@dataclass(frozen=True)
class LimitsSettings:
    max_input_size: int
    max_output_size: int


@dataclass(frozen=True)
class CooldownSettings:
    """Cooldown windows in seconds, grouped the way commands share them."""

    per_user_cooldown: int
    hash_cooldown: int
    github_cooldown: int
    color_cooldown: int


@dataclass(frozen=True)
class SweepSettings:
    interval_seconds: float
    max_age_seconds: float


@dataclass(frozen=True)
class HttpSettings:
    timeout_seconds: float
    user_agent: str


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return ``data[name]`` merged over the defaults for that section."""
    merged = dict(DEFAULT_CONFIG.get(name, {}))
    value = data.get(name)
    if isinstance(value, dict):
        merged.update({k: v for k, v in value.items() if v is not None})
    elif value is not None:
        logger.warning("[APP CONFIGURATION] Section %r is not a mapping; using defaults.", name)
    return merged


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed views of each section. Missing keys fall back to
    :data:`DEFAULT_CONFIG` so a partial file is always usable.
    """

    def __init__(self, config_path: Path = CONFIG_PATH) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the raw cached mapping. Callers should not mutate it."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def limits(self) -> LimitsSettings:
        section = _section(self._data, "limits")
        return LimitsSettings(
            max_input_size=int(section["max_input_size"]),
            max_output_size=int(section["max_output_size"]),
        )

    @property
    def cooldowns(self) -> CooldownSettings:
        section = _section(self._data, "cooldowns")
        return CooldownSettings(**{field: int(section[field]) for field in CooldownSettings.__dataclass_fields__})

    @property
    def cache_ttl_seconds(self) -> float:
        return float(_section(self._data, "cache")["ttl_seconds"])

    @property
    def cache_single_flight(self) -> bool:
        return bool(_section(self._data, "cache")["single_flight"])

    @property
    def cooldown_sweep(self) -> SweepSettings:
        """Return the cooldown sweep schedule.

        The retention horizon should exceed every cooldown window; the sweep
        only bounds memory and must never shorten a live window.
        """
        section = _section(self._data, "cooldown_sweep")
        return SweepSettings(
            interval_seconds=float(section["interval_seconds"]),
            max_age_seconds=float(section["max_age_seconds"]),
        )

    @property
    def http(self) -> HttpSettings:
        section = _section(self._data, "http")
        return HttpSettings(
            timeout_seconds=float(section["timeout_seconds"]),
            user_agent=str(section["user_agent"]),
        )

    @property
    def github_token(self) -> Optional[str]:
        token = _section(self._data, "github").get("token") or os.getenv("GITHUB_TOKEN")
        return str(token) if token else None

    @property
    def quotes(self) -> List[str]:
        value = _section(self._data, "quotes").get("quotes")
        if not isinstance(value, list) or not value:
            return list(DEFAULT_CONFIG["quotes"]["quotes"])
        return [str(quote) for quote in value]

    @property
    def status_interval_minutes(self) -> Tuple[int, int]:
        """Return the (min, max) minutes between presence updates."""
        value = _section(self._data, "quotes").get("update_interval_minutes")
        try:
            low, high = (int(v) for v in value)
        except (TypeError, ValueError):
            return (3, 5)
        return (min(low, high), max(low, high))


def ensure_config_file(path: Path = CONFIG_PATH) -> bool:
    """Write :data:`DEFAULT_CONFIG` to ``path`` if no config exists yet.

    Returns True when a new file was created.

    Raises
    ------
    ConfigError
        If the default file cannot be written.
    """
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(copy.deepcopy(DEFAULT_CONFIG), f, sort_keys=False, allow_unicode=True)
    except OSError as exc:
        raise ConfigError(f"Failed to write config file {path}: {exc}") from exc
    logger.info("[APP CONFIGURATION] Created default config at %s.", path)
    return True
