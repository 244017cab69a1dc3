"""Connection settings for the sensor."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import voluptuous as vol

DEFAULT_PORT = 22
DEFAULT_TIMEOUT = 30

# Environment variable per setting; command line options take precedence
ENV_VARS = {
    "username": "VEEAM_SSH_USER",
    "password": "VEEAM_SSH_PASSWORD",
    "key": "VEEAM_SSH_KEY",
    "port": "VEEAM_SSH_PORT",
    "timeout": "VEEAM_SSH_TIMEOUT",
    "debug": "VEEAM_SENSOR_DEBUG",
}


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "y", "yes", "true", "on")


SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional("username", default=None): vol.Any(None, str),
        vol.Optional("password", default=None): vol.Any(None, str),
        vol.Optional("key", default=None): vol.Any(None, str),
        vol.Optional("port", default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Optional("timeout", default=DEFAULT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional("debug", default=False): _flag,
    }
)


@dataclass(frozen=True)
class Settings:
    username: Optional[str] = None
    password: Optional[str] = None
    key: Optional[str] = None
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False


def resolve_private_key_path(key: Optional[str], base: Optional[Path] = None) -> Optional[str]:
    """Return an absolute path for an SSH private key.

    Keys may be given as absolute paths, paths relative to *base* (the
    working directory by default) or with a leading ``~``. ``None`` or
    empty values pass through unchanged.
    """

    if not key:
        return None

    path = Path(key).expanduser()
    if not path.is_absolute():
        path = (base or Path.cwd()) / path
    return str(path)


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge *overrides* over the environment and validate the result.

    Raises :class:`voluptuous.Invalid` when a value is out of range.
    """
    environ = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    for name, env_var in ENV_VARS.items():
        value = environ.get(env_var)
        if value not in (None, ""):
            raw[name] = value
    for name, value in (overrides or {}).items():
        if value is not None:
            raw[name] = value

    data = SETTINGS_SCHEMA(raw)
    data["key"] = resolve_private_key_path(data["key"])
    return Settings(**data)
