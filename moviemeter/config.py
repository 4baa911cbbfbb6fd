"""Configuration loading.

Sources, later ones win:

    defaults <- .env <- MOVIEMETER__SECTION__KEY environment <- overrides

Every key has a default, and the default's type decides how text from
``.env`` or the environment is converted. Names that match no known key are
ignored with a warning.
"""
from __future__ import annotations
import os
import re
import copy
import logging
from typing import Any, Dict, Mapping, Tuple
from pathlib import Path

from .config_types import AppConfig, ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "MOVIEMETER__"

_DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "endpoint": {
        "base_url": "http://127.0.0.1:3000",
        "timeout_seconds": 30.0,
    },
    "debounce": {
        "delay_ms": 500,
    },
}

_LOG_FORMAT = "%(message)s"

# KEY=value, optionally prefixed with "export"
_DOTENV_LINE = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$")


def merge_layer(base: Dict[str, Any], layer: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``base`` with ``layer`` applied on top (one level of sections)."""
    merged = copy.deepcopy(base)
    for key, value in layer.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def _read_dotenv(path: Path) -> Dict[str, str]:
    """Read ``MOVIEMETER__*`` assignments from a .env file.

    Quoted values are taken verbatim. Unquoted values end at a `` #`` comment,
    so a ``#`` inside a URL survives.
    """
    if not path.is_file():
        return {}
    values: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        if line.lstrip().startswith("#"):
            continue
        match = _DOTENV_LINE.match(line)
        if not match or not match.group(1).startswith(ENV_PREFIX):
            continue
        key, raw = match.groups()
        if raw[:1] in ("'", '"'):
            end = raw.find(raw[0], 1)
            value = raw[1:end] if end > 0 else raw[1:]
        else:
            value = re.split(r"\s+#", raw, maxsplit=1)[0]
        values[key] = value
    return values


def _locate(name: str) -> Tuple[str, ...] | None:
    """Map ``MOVIEMETER__ENDPOINT__BASE_URL`` to ``("endpoint", "base_url")``."""
    path = tuple(part.lower() for part in name[len(ENV_PREFIX):].split("__"))
    node: Any = _DEFAULTS
    for part in path:
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    if isinstance(node, dict):
        return None
    return path


def _convert(raw: str, default: Any, name: str) -> Any:
    text = raw.strip()
    try:
        if isinstance(default, int):
            return int(text)
        if isinstance(default, float):
            return float(text)
    except ValueError:
        raise ConfigError(f"{name} must be a {type(default).__name__}, got '{raw}'") from None
    return text


def _text_layer(source: Mapping[str, str]) -> Dict[str, Any]:
    """Build a config layer from prefixed text settings."""
    layer: Dict[str, Any] = {}
    for name, raw in source.items():
        if not name.startswith(ENV_PREFIX):
            continue
        path = _locate(name)
        if path is None:
            logger.warning(f"Ignoring unknown setting {name}")
            continue
        default: Any = _DEFAULTS
        for part in path:
            default = default[part]
        cursor = layer
        for part in path[:-1]:
            cursor = cursor.setdefault(part, {})
        cursor[path[-1]] = _convert(raw, default, name)
    return layer


def load_config(overrides: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Load configuration as a nested dict and configure logging.

    During test runs (PYTEST_CURRENT_TEST is set) .env is skipped unless
    MOVIEMETER_ENABLE_DOTENV is set.

    Args:
        overrides: Values applied last (CLI options, tests)

    Raises:
        ConfigError: If a .env or environment value cannot be converted
    """
    cfg = copy.deepcopy(_DEFAULTS)
    if os.environ.get("MOVIEMETER_ENABLE_DOTENV") or not os.environ.get("PYTEST_CURRENT_TEST"):
        cfg = merge_layer(cfg, _text_layer(_read_dotenv(Path(".env"))))
    cfg = merge_layer(cfg, _text_layer(os.environ))
    if overrides:
        cfg = merge_layer(cfg, overrides)

    _configure_logging(cfg["log_level"])
    return cfg


def load_typed_config(overrides: Dict[str, Any] | None = None) -> AppConfig:
    """Load and validate configuration as an AppConfig.

    Raises:
        ConfigError: On unconvertible or out-of-range values
    """
    return AppConfig.from_dict(load_config(overrides))


def _configure_logging(level_name: Any) -> None:
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=_LOG_FORMAT, force=True)


__all__ = ["load_config", "load_typed_config", "merge_layer", "ConfigError", "ENV_PREFIX"]
