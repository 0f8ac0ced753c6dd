"""Configuration loading utilities for the chat client.

This module handles layered configuration:
1. Explicit path argument (highest precedence)
2. Environment variable CHAT_CLIENT_CONFIG
3. Fallback to "config/default.yaml"

Values from the file are merged over the built-in defaults. It also supports
optional overrides from environment variables with prefix ``CHAT_CLIENT__``
(e.g., CHAT_CLIENT__BACKEND__BASE_URL=http://127.0.0.1:5001/api).
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "CHAT_CLIENT_CONFIG"
ENV_PREFIX = "CHAT_CLIENT__"
DEFAULT_CONFIG_PATH = "config/default.yaml"

DEFAULTS: Dict[str, Any] = {
    "backend": {
        "base_url": "http://localhost:5001/api",
        "chat_path": "/chat",
        "conversation_path": "/conversation",
        # None disables the timeout: a hanging call keeps the send pending.
        "timeout": None,
    },
    "messages": {
        "error_fallback": "Error processing message",
        "connection_error": "Error connecting to the server",
    },
    "session": {"prefix": "user_"},
    "logging": {"level": "INFO"},
}


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``extra`` into a copy of ``base``."""
    out = copy.deepcopy(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _coerce(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    if value.lower() in {"null", "none"}:
        return None
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _env_overrides() -> Dict[str, Any]:
    """Nested dict built from CHAT_CLIENT__* variables.

    CHAT_CLIENT__BACKEND__BASE_URL=x becomes {"backend": {"base_url": "x"}}.
    """
    overrides: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        *sections, leaf = key[len(ENV_PREFIX):].lower().split("__")
        nested: Dict[str, Any] = {leaf: _coerce(value)}
        for section in reversed(sections):
            nested = {section: nested}
        overrides = _merge(overrides, nested)
    return overrides


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    return _merge(cfg, _env_overrides())


def load_config(path: str | None = None) -> Dict[str, Any]:
    """Load YAML configuration for the chat client.

    Parameters
    ----------
    path : str | None
        Optional path to a configuration file. If not provided, the
        environment variable ``CHAT_CLIENT_CONFIG`` is consulted. As a
        last resort ``config/default.yaml`` is used.

    Returns
    -------
    Dict[str, Any]
        Defaults merged with the file contents, environment overrides applied.

    Raises
    ------
    ConfigError
        If the file exists but is not valid YAML or not a mapping.
    """
    if path is None:
        path = os.environ.get(ENV_CONFIG_PATH, DEFAULT_CONFIG_PATH)

    path_obj = Path(path)
    if not path_obj.exists():
        logger.warning("Config file not found at %s. Using defaults.", path_obj)
        return _apply_env_overrides(copy.deepcopy(DEFAULTS))

    with path_obj.open("r", encoding="utf-8") as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file {path_obj}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"Invalid config format in {path_obj}, expected dict.")

    return _apply_env_overrides(_merge(DEFAULTS, loaded))


@dataclass(frozen=True)
class ClientSettings:
    """Typed view over the configuration dict."""

    base_url: str = DEFAULTS["backend"]["base_url"]
    chat_path: str = DEFAULTS["backend"]["chat_path"]
    conversation_path: str = DEFAULTS["backend"]["conversation_path"]
    timeout: Optional[float] = None
    error_fallback: str = DEFAULTS["messages"]["error_fallback"]
    connection_error: str = DEFAULTS["messages"]["connection_error"]
    session_prefix: str = DEFAULTS["session"]["prefix"]
    log_level: str = DEFAULTS["logging"]["level"]

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "ClientSettings":
        cfg = _merge(DEFAULTS, cfg or {})
        backend = cfg["backend"]
        messages = cfg["messages"]
        timeout = backend.get("timeout")
        try:
            timeout = float(timeout) if timeout is not None else None
        except (TypeError, ValueError) as e:
            raise ConfigError(f"backend.timeout must be a number, got {timeout!r}") from e
        return cls(
            base_url=str(backend["base_url"]).rstrip("/"),
            chat_path=str(backend["chat_path"]),
            conversation_path=str(backend["conversation_path"]),
            timeout=timeout,
            error_fallback=str(messages["error_fallback"]),
            connection_error=str(messages["connection_error"]),
            session_prefix=str(cfg["session"]["prefix"]),
            log_level=str(cfg["logging"]["level"]).upper(),
        )
