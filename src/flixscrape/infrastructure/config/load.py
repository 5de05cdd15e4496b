from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

# Section name -> prefix used by the flat spelling of its keys
# (``tmdb.api_key`` is ``tmdb_api_key``, ``logging.level`` is ``log_level``).
_SECTION_PREFIXES: dict[str, str] = {
    "upstream": "upstream_",
    "tmdb": "tmdb_",
    "enrichment": "enrichment_",
    "sources": "sources_",
    "logging": "log_",
    "cache": "cache_",
}

_TOP_LEVEL_KEYS = ("app_name", "environment")


def _merge_into(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into ``base``; non-mapping values replace."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            base[key] = value
    return base


def _split_flat_key(key: str) -> tuple[str, str] | None:
    for section, prefix in _SECTION_PREFIXES.items():
        if key.startswith(prefix) and len(key) > len(prefix):
            return section, key[len(prefix) :]
    return None


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer (defaults, YAML, env or CLI) into the sectioned shape.

    Sectioned blocks are copied, flat keys are moved into their section and
    unknown keys are dropped.
    """
    out: dict[str, Any] = {}
    for key, value in layer.items():
        if key in _SECTION_PREFIXES and isinstance(value, Mapping):
            _merge_into(out.setdefault(key, {}), value)
        elif key in _TOP_LEVEL_KEYS:
            out[key] = value
        elif (target := _split_flat_key(key)) is not None:
            section, section_key = target
            out.setdefault(section, {})[section_key] = value
    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with precedence defaults < YAML < env (.env included) < CLI.

    Reads files only; nothing is created on disk.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        # Real environment variables win over .env entries.
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [deepcopy(DEFAULT_CONFIG)]
    if config_path is not None:
        layers.append(_read_yaml_config(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _merge_into(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
