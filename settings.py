"""
Decree configuration.

Layered, highest precedence first:
    1) Explicit overrides passed to `load_settings()`
    2) Environment variables (DECREE_*)
    3) Built-in defaults

Settings only tune logging and the upper bound on requested challenge
lengths. Nothing here reaches the transcript bytes: digest and challenge
lengths are fixed by the code and the protocols, so a prover and a verifier
on differently configured hosts still agree.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from errors import ConfigError

DEFAULT_MAX_CHALLENGE_BYTES = 4096
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")

_ENV_KEYS = {
    "max_challenge_bytes": "DECREE_MAX_CHALLENGE_BYTES",
    "log_level": "DECREE_LOG_LEVEL",
    "log_json": "DECREE_LOG_FORMAT",
}


@dataclass(frozen=True)
class DecreeSettings:
    max_challenge_bytes: int = DEFAULT_MAX_CHALLENGE_BYTES
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False

    def validate(self) -> "DecreeSettings":
        value = self.max_challenge_bytes
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError("max_challenge_bytes must be an integer", {"value": repr(value)})
        if value < 1:
            raise ConfigError("max_challenge_bytes must be positive", {"value": value})
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError("unknown log level", {"value": self.log_level})
        return self


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip(), 10)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer", {"value": raw}) from exc


def _parse_log_format(raw: str) -> bool:
    v = raw.strip().lower()
    if v in ("json", "1", "true"):
        return True
    if v in ("text", "0", "false", ""):
        return False
    raise ConfigError("DECREE_LOG_FORMAT must be 'json' or 'text'", {"value": raw})


def _from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for attr, key in _ENV_KEYS.items():
        raw = env.get(key)
        if raw is None:
            continue
        if attr == "log_level":
            out[attr] = raw.strip().upper()
        elif attr == "log_json":
            out[attr] = _parse_log_format(raw)
        else:
            out[attr] = _parse_int(key, raw)
    return out


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> DecreeSettings:
    """
    Build validated settings from defaults, the environment and overrides.

    Args:
        overrides: Field values that win over everything else
        env: Environment mapping (defaults to os.environ)

    Returns:
        DecreeSettings: The validated settings

    Raises:
        ConfigError: On unknown override keys or out-of-range values
    """
    known = {f.name for f in fields(DecreeSettings)}
    layered = _from_env(os.environ if env is None else env)
    for key, value in (overrides or {}).items():
        if key not in known:
            raise ConfigError(f"unknown setting {key!r}", {"known": sorted(known)})
        layered[key] = value
    return replace(DecreeSettings(), **layered).validate()


_CACHED: Optional[DecreeSettings] = None


def get_settings() -> DecreeSettings:
    """Process-wide settings, loaded from the environment on first use."""
    global _CACHED
    if _CACHED is None:
        _CACHED = load_settings()
    return _CACHED


def reset_settings() -> None:
    """Forget cached settings (tests and long-lived processes that change env)."""
    global _CACHED
    _CACHED = None


__all__ = [
    "DecreeSettings",
    "load_settings",
    "get_settings",
    "reset_settings",
    "DEFAULT_MAX_CHALLENGE_BYTES",
]
