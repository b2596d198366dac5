from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .settings import Settings

ENV_PREFIX = "LUNOREST_"
_RESERVED = {"CONFIG", "LOG_LEVEL"}

# Credential variables understood by the official Luno SDKs.
_CREDENTIAL_ENV = {
    "LUNO_API_KEY_ID": ("luno", "credentials", "api_key_id"),
    "LUNO_API_SECRET": ("luno", "credentials", "api_secret"),
}


def _deep_set(obj: dict[str, Any], path: list[str] | tuple[str, ...], value: Any) -> None:
    cur: dict[str, Any] = obj
    for key in path[:-1]:
        nxt = cur.get(key)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[key] = nxt
        cur = nxt
    cur[path[-1]] = value


def _parse_env_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _apply_env_overrides(data: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    """Layer ``LUNOREST_A__B=value`` variables over the file config as ``a.b = value``."""
    merged: dict[str, Any] = dict(data)

    for env_name, path in _CREDENTIAL_ENV.items():
        if environ.get(env_name):
            _deep_set(merged, path, environ[env_name])

    for key, raw_value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        remainder = key[len(ENV_PREFIX):]
        if remainder in _RESERVED:
            continue

        path = [p.lower() for p in remainder.split("__") if p]
        if path:
            _deep_set(merged, path, _parse_env_value(raw_value))

    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    return loaded


def load_settings(config_path: str | Path | None = None, environ: dict[str, str] | None = None) -> Settings:
    """Load settings from YAML with environment overrides.

    The file defaults to ``$LUNOREST_CONFIG`` or ``./config.yml``; a missing file
    yields the defaults.

    Raises:
        ValueError: If the merged configuration is invalid
    """
    env = dict(os.environ if environ is None else environ)
    if config_path is None:
        config_path = env.get(f"{ENV_PREFIX}CONFIG", "config.yml")

    data = _apply_env_overrides(_read_yaml(Path(config_path)), env)

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
